r"""Shared test helpers.

This module contains scripted transports, fake consensus types and
sample JSON documents used across the unit and integration tests.
"""

from __future__ import annotations

__all__ = [
    "BASE_URL",
    "BLOCK_HASH",
    "FAKE_CONSENSUS",
    "TXID",
    "AsyncScriptedTransport",
    "FakeBlock",
    "FakeBlockHeader",
    "FakeMerkleBlock",
    "FakeEsplora",
    "FakeTransaction",
    "Reply",
    "ScriptedTransport",
    "make_tx_json",
    "mock_async_transport",
    "mock_transport",
]

import struct
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from esplora_client.codec import ConsensusTypes
from esplora_client.transport import (
    AsyncBaseTransport,
    AsyncHttpxTransport,
    BaseTransport,
    HttpxTransport,
    RawResponse,
    Request,
)

if TYPE_CHECKING:
    from collections.abc import Callable

BASE_URL = "https://esplora.example.com/api"
TXID = "b4a5b8e2d4c35e1f9a1b2c3d4e5f60718293a4b5c6d7e8f9011223344556677a"
BLOCK_HASH = "00000000000000000002a7c4c1e48d76c5a37902165a270156b7a8d72728a054"


################################
#     Fake consensus types     #
################################


@dataclass(frozen=True)
class FakeTransaction:
    """Transaction keeping its raw serialization."""

    raw: bytes

    @classmethod
    def deserialize(cls, data: bytes) -> FakeTransaction:
        if len(data) < 10:
            msg = f"transaction too short: {len(data)} bytes"
            raise ValueError(msg)
        return cls(raw=bytes(data))

    def serialize(self) -> bytes:
        return self.raw


@dataclass(frozen=True)
class FakeBlock:
    """Block keeping its raw serialization."""

    raw: bytes

    @classmethod
    def deserialize(cls, data: bytes) -> FakeBlock:
        if len(data) < 80:
            msg = f"block too short: {len(data)} bytes"
            raise ValueError(msg)
        return cls(raw=bytes(data))

    def serialize(self) -> bytes:
        return self.raw


@dataclass(frozen=True)
class FakeBlockHeader:
    """80-byte block header."""

    version: int
    prev_block: bytes
    merkle_root: bytes
    time: int
    bits: int
    nonce: int

    _FORMAT = "<i32s32sIII"

    @classmethod
    def deserialize(cls, data: bytes) -> FakeBlockHeader:
        if len(data) != 80:
            msg = f"block header must be 80 bytes, got {len(data)}"
            raise ValueError(msg)
        return cls(*struct.unpack(cls._FORMAT, data))

    def serialize(self) -> bytes:
        return struct.pack(
            self._FORMAT,
            self.version,
            self.prev_block,
            self.merkle_root,
            self.time,
            self.bits,
            self.nonce,
        )


@dataclass(frozen=True)
class FakeMerkleBlock:
    """Merkle block keeping its header and the rest of its serialization."""

    header: FakeBlockHeader
    tail: bytes

    @classmethod
    def deserialize(cls, data: bytes) -> FakeMerkleBlock:
        return cls(header=FakeBlockHeader.deserialize(data[:80]), tail=bytes(data[80:]))


FAKE_CONSENSUS = ConsensusTypes(
    transaction=FakeTransaction,
    block=FakeBlock,
    block_header=FakeBlockHeader,
    merkle_block=FakeMerkleBlock,
)


######################
#     Transports     #
######################


class ScriptedTransport(BaseTransport):
    """Transport returning canned responses and recording the requests.

    The last response is repeated once the script is exhausted.
    """

    def __init__(self, *responses: RawResponse) -> None:
        self.responses = list(responses)
        self.requests: list[Request] = []
        self.closed = False

    def send(self, request: Request) -> RawResponse:
        self.requests.append(request)
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]

    def close(self) -> None:
        self.closed = True


class AsyncScriptedTransport(AsyncBaseTransport):
    """Asynchronous twin of ``ScriptedTransport``."""

    def __init__(self, *responses: RawResponse) -> None:
        self.responses = list(responses)
        self.requests: list[Request] = []
        self.closed = False

    async def send(self, request: Request) -> RawResponse:
        self.requests.append(request)
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]

    async def aclose(self) -> None:
        self.closed = True


@dataclass
class Reply:
    """Canned answer of ``FakeEsplora``."""

    status: int = 200
    text: str = ""
    json: Any = None
    content: bytes | None = None
    headers: dict[str, str] = field(default_factory=dict)

    def to_response(self) -> httpx.Response:
        if self.json is not None:
            return httpx.Response(self.status, json=self.json, headers=self.headers)
        if self.content is not None:
            return httpx.Response(self.status, content=self.content, headers=self.headers)
        return httpx.Response(self.status, text=self.text, headers=self.headers)


class FakeEsplora:
    """In-memory Esplora server to plug into ``httpx.MockTransport``.

    Routes map ``(method, path)`` to a ``Reply`` or to a list of replies
    served in order, the last one being repeated. Unknown routes answer
    404 like the real server.
    """

    def __init__(self, routes: dict[tuple[str, str], Reply | list[Reply]] | None = None) -> None:
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        reply = self.routes.get((request.method, path))
        if reply is None:
            return httpx.Response(404, text="Not Found")
        if isinstance(reply, list):
            reply = reply.pop(0) if len(reply) > 1 else reply[0]
        return reply.to_response()


def mock_transport(handler: Callable[[httpx.Request], httpx.Response]) -> HttpxTransport:
    """Create a blocking transport answering with ``handler``."""
    return HttpxTransport(httpx.Client(transport=httpx.MockTransport(handler)))


def mock_async_transport(
    handler: Callable[[httpx.Request], httpx.Response],
) -> AsyncHttpxTransport:
    """Create an asynchronous transport answering with ``handler``."""
    return AsyncHttpxTransport(httpx.AsyncClient(transport=httpx.MockTransport(handler)))


########################
#     JSON samples     #
########################


def make_tx_json(confirmed: bool = True) -> dict[str, Any]:
    """Return a transaction in the JSON format of Esplora."""
    status: dict[str, Any] = {"confirmed": confirmed}
    if confirmed:
        status.update(block_height=840000, block_hash=BLOCK_HASH, block_time=1713571767)
    return {
        "txid": TXID,
        "version": 2,
        "locktime": 0,
        "vin": [
            {
                "txid": "11" * 32,
                "vout": 1,
                "prevout": {"value": 150000, "scriptpubkey": "0014" + "ab" * 20},
                "scriptsig": "",
                "witness": ["30440220" + "01" * 32, "02" + "cd" * 32],
                "sequence": 4294967293,
                "is_coinbase": False,
            }
        ],
        "vout": [
            {"value": 100000, "scriptpubkey": "0014" + "ef" * 20},
            {"value": 49000, "scriptpubkey": "0014" + "ab" * 20},
        ],
        "size": 222,
        "weight": 561,
        "status": status,
        "fee": 1000,
    }
