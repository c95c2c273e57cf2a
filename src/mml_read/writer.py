"""Byte writers for both container kinds.

Used to build fixtures; nothing in the diff path writes containers.
"""
from __future__ import annotations

import struct

from mml_core.layout import encode
from mml_core.protocol import (
    CHUNK_HEADER,
    CHUNK_LENGTHS,
    MACBINARY_CRC_OFFSET,
    MACBINARY_CRC_SPAN,
    MACBINARY_DATA_LENGTH_OFFSET,
    MACBINARY_HEADER_LEN,
    MACBINARY_MAX_FILENAME,
    MACBINARY_RSRC_LENGTH_OFFSET,
    RSRC_HEADER,
    RSRC_REF_ENTRY,
    RSRC_TYPE_ENTRY,
    TAG_TYPE,
)
from mml_core.records import Rect, RGBColor

from .chunks import KNOWN_CHUNKS
from .macbinary import crc16, round_up
from .snapshot import FuxState

RSRC_DATA_START = 0x100
RSRC_MAP_HEADER_LEN = 28


def encode_chunk(tag: bytes, payload: bytes) -> bytes:
    return CHUNK_HEADER.pack(tag, len(payload)) + payload


def write_fux_state(state: FuxState) -> bytes:
    """Every known chunk in protocol order, then the opaque chunks."""
    out = bytearray()
    for tag, (name, kind) in KNOWN_CHUNKS.items():
        if name is None:
            out += encode_chunk(tag, bytes(CHUNK_LENGTHS[TAG_TYPE]))
            continue
        out += encode_chunk(tag, encode(kind, getattr(state, name)))
    for tag, payload in state.tags.items():
        out += encode_chunk(tag, payload)
    return bytes(out)


def encode_str_list(strings) -> bytes:
    out = bytearray(struct.pack(">h", len(strings)))
    for s in strings:
        if len(s) > 255:
            raise ValueError("Pascal strings hold at most 255 bytes")
        out.append(len(s))
        out += s
    return bytes(out)


def encode_clut(colors, count: int | None = None, seed: int = 0, flags: int = 0) -> bytes:
    count = len(colors) if count is None else count
    out = bytearray(struct.pack(">IHH", seed, flags, count))
    for i, color in enumerate(colors):
        out += struct.pack(">H", i) + encode(RGBColor, color)
    return bytes(out)


def encode_nrct(rects, count: int | None = None) -> bytes:
    count = len(rects) if count is None else count
    out = bytearray(struct.pack(">H", count))
    for rect in rects:
        out += encode(Rect, rect)
    return bytes(out)


def build_resource_fork(resources: dict[bytes, dict[int, bytes]]) -> bytes:
    """Lay out a classic resource fork: header, data section, map.

    Reference lists follow the type list in type order.
    """
    if not resources:
        raise ValueError("a resource fork needs at least one type")
    data_section = bytearray()
    offsets: dict[bytes, list[tuple[int, int]]] = {}
    for res_type, entries in resources.items():
        for res_id, payload in entries.items():
            offsets.setdefault(res_type, []).append((res_id, len(data_section)))
            data_section += struct.pack(">I", len(payload)) + payload

    type_list = bytearray(struct.pack(">H", len(resources) - 1))
    ref_lists = bytearray()
    ref_base = 2 + len(resources) * RSRC_TYPE_ENTRY.size
    for res_type, refs in offsets.items():
        type_list += RSRC_TYPE_ENTRY.pack(res_type, len(refs) - 1, ref_base + len(ref_lists))
        for res_id, data_off in refs:
            ref_lists += RSRC_REF_ENTRY.pack(res_id, 0xFFFF, data_off, 0)

    map_body = type_list + ref_lists
    map_len = RSRC_MAP_HEADER_LEN + len(map_body)
    map_offset = RSRC_DATA_START + len(data_section)
    header = RSRC_HEADER.pack(RSRC_DATA_START, map_offset, len(data_section), map_len)

    map_header = bytearray(header)
    map_header += bytes(4 + 2 + 2)
    map_header += struct.pack(">HH", RSRC_MAP_HEADER_LEN, map_len)

    fork = bytearray(header)
    fork += bytes(RSRC_DATA_START - len(fork))
    fork += data_section
    fork += map_header + map_body
    return bytes(fork)


def build_macbinary(resource_fork: bytes, data_fork: bytes = b"", filename: bytes = b"Untitled",
                    file_type: bytes = b"APPL", creator: bytes = b"????") -> bytes:
    if len(filename) > MACBINARY_MAX_FILENAME:
        raise ValueError("MacBinary file names hold at most 63 bytes")
    header = bytearray(MACBINARY_HEADER_LEN)
    header[1] = len(filename)
    header[2:2 + len(filename)] = filename
    header[65:69] = file_type
    header[69:73] = creator
    struct.pack_into(">I", header, MACBINARY_DATA_LENGTH_OFFSET, len(data_fork))
    struct.pack_into(">I", header, MACBINARY_RSRC_LENGTH_OFFSET, len(resource_fork))
    header[122] = 0x81
    header[123] = 0x81
    struct.pack_into(">H", header, MACBINARY_CRC_OFFSET, crc16(bytes(header[:MACBINARY_CRC_SPAN])))

    out = bytearray(header)
    out += data_fork + bytes(round_up(len(data_fork)) - len(data_fork))
    out += resource_fork + bytes(round_up(len(resource_fork)) - len(resource_fork))
    return bytes(out)
