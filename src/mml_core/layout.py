"""Fixed-layout big-endian field decoding.

Records are frozen dataclasses whose fields carry their on-disk kind in the
dataclass field metadata. ``decode`` and ``encode`` walk those declarations
field by field, so no in-memory layout is ever overlaid on file bytes.
"""
from __future__ import annotations

import dataclasses
import struct
from typing import Any

from .errors import TruncatedInput
from .protocol import CHANNEL_MAX, FIXED_ONE


class Cursor:
    """Read position over a fully materialized byte string."""

    def __init__(self, data: bytes, pos: int = 0):
        self.data = bytes(data)
        self.pos = 0
        self.seek(pos)

    def tell(self) -> int:
        return self.pos

    def remaining(self) -> int:
        return len(self.data) - self.pos

    def seek(self, pos: int) -> None:
        if pos < 0 or pos > len(self.data):
            raise TruncatedInput(pos, 0, len(self.data) - pos)
        self.pos = pos

    def skip(self, n: int) -> None:
        if n > self.remaining():
            raise TruncatedInput(self.pos, n, self.remaining())
        self.pos += n

    def read(self, n: int) -> bytes:
        if n > self.remaining():
            raise TruncatedInput(self.pos, n, self.remaining())
        chunk = self.data[self.pos:self.pos + n]
        self.pos += n
        return chunk

    def unpack(self, st: struct.Struct) -> tuple:
        return st.unpack(self.read(st.size))


class Scalar:
    def __init__(self, name: str, fmt: str):
        self.name = name
        self.struct = struct.Struct(">" + fmt)

    @property
    def size(self) -> int:
        return self.struct.size

    def __repr__(self) -> str:
        return self.name


I8 = Scalar("I8", "b")
U8 = Scalar("U8", "B")
I16 = Scalar("I16", "h")
U16 = Scalar("U16", "H")
I32 = Scalar("I32", "i")
U32 = Scalar("U32", "I")


class Array:
    def __init__(self, kind, count: int):
        self.kind = kind
        self.count = count

    def __repr__(self) -> str:
        return f"Array({self.kind!r}, {self.count})"


def _default_for(kind):
    if isinstance(kind, Scalar):
        return 0
    if isinstance(kind, Array):
        return tuple(_default_for(kind.kind) for _ in range(kind.count))
    return kind()


def scalar(kind: Scalar) -> Any:
    return dataclasses.field(default=0, metadata={"kind": kind})


def array(kind, count: int) -> Any:
    arr = Array(kind, count)
    return dataclasses.field(default_factory=lambda: _default_for(arr), metadata={"kind": arr})


def nested(record_cls) -> Any:
    return dataclasses.field(default_factory=record_cls, metadata={"kind": record_cls})


def layout(record_cls) -> list[tuple[str, Any]]:
    """Return the (field name, kind) pairs of a record class in file order."""
    return [(f.name, f.metadata["kind"]) for f in dataclasses.fields(record_cls) if "kind" in f.metadata]


def width(kind) -> int:
    if isinstance(kind, Scalar):
        return kind.size
    if isinstance(kind, Array):
        return width(kind.kind) * kind.count
    return sum(width(k) for _, k in layout(kind))


def decode(cur: Cursor, kind):
    if isinstance(kind, Scalar):
        return cur.unpack(kind.struct)[0]
    if isinstance(kind, Array):
        return tuple(decode(cur, kind.kind) for _ in range(kind.count))
    values = {name: decode(cur, k) for name, k in layout(kind)}
    return kind(**values)


def encode(kind, value) -> bytes:
    if isinstance(kind, Scalar):
        return kind.struct.pack(value)
    if isinstance(kind, Array):
        if len(value) != kind.count:
            raise ValueError(f"expected {kind.count} elements, got {len(value)}")
        return b"".join(encode(kind.kind, v) for v in value)
    return b"".join(encode(k, getattr(value, name)) for name, k in layout(kind))


def decode_bytes(data: bytes, kind):
    """Decode exactly one value of ``kind`` from ``data``."""
    cur = Cursor(data)
    value = decode(cur, kind)
    if cur.remaining():
        raise ValueError(f"{cur.remaining()} trailing bytes after {kind!r}")
    return value


def fixed(v: int) -> float:
    """16.16 fixed-point to float."""
    return v / float(FIXED_ONE)


def channel(v: int) -> float:
    """16-bit color channel to the 0..1 range."""
    return v / float(CHANNEL_MAX)
