"""Classic resource fork reader, for forks carried inside a MacBinary file."""
from __future__ import annotations

import struct
from dataclasses import dataclass, field
from pathlib import Path

from mml_core.errors import FormatError
from mml_core.layout import Cursor, decode
from mml_core.protocol import (
    INTERFACE_CLUT_ID,
    INTERFACE_RECTS_ID,
    NUM_INTERFACE_COLORS,
    NUM_INTERFACE_RECTS,
    RES_CLUT,
    RES_RECTS,
    RES_STRINGS,
    RSRC_DATA_OFFSET_MASK,
    RSRC_HEADER,
    RSRC_MAP_TYPE_LIST_OFFSET,
    RSRC_REF_ENTRY,
    RSRC_REF_ENTRY_LEN,
    RSRC_TYPE_ENTRY,
)
from mml_core.records import Rect, RGBColor

from .macbinary import read_macbinary_header
from .snapshot import ResourceState

RECOGNIZED_TYPES = (RES_STRINGS, RES_CLUT, RES_RECTS)

_U16 = struct.Struct(">H")
_I16 = struct.Struct(">h")
_U32 = struct.Struct(">I")


@dataclass(frozen=True)
class ResourceFork:
    """Index of one resource fork. Offsets are absolute within the file."""

    start: int
    data_offset: int
    map_offset: int
    data_length: int
    map_length: int
    type_list_offset: int
    # type -> id -> offset of the resource's length word, relative to the data section
    references: dict[bytes, dict[int, int]] = field(default_factory=dict)

    def locate(self, res_type: bytes, res_id: int) -> int | None:
        rel = self.references.get(res_type, {}).get(res_id)
        if rel is None:
            return None
        return self.data_offset + rel


def read_resource_fork(data: bytes, start: int) -> ResourceFork:
    cur = Cursor(data, start)
    data_offset, map_offset, data_length, map_length = cur.unpack(RSRC_HEADER)
    data_offset += start
    map_offset += start

    cur.seek(map_offset + RSRC_MAP_TYPE_LIST_OFFSET)
    (type_list_offset,) = cur.unpack(_U16)
    type_list_offset += map_offset
    cur.skip(2)
    (num_types,) = cur.unpack(_U16)
    num_types += 1

    type_list = [cur.unpack(RSRC_TYPE_ENTRY) for _ in range(num_types)]

    # Reference lists are walked in type-list order, directly after the type list.
    references: dict[bytes, dict[int, int]] = {}
    for res_type, num_refs, _ref_list_offset in type_list:
        count = num_refs + 1
        if res_type not in RECOGNIZED_TYPES:
            cur.skip(count * RSRC_REF_ENTRY_LEN)
            continue
        refs = references.setdefault(res_type, {})
        for _ in range(count):
            res_id, _name_offset, packed_offset, _reserved = cur.unpack(RSRC_REF_ENTRY)
            refs[res_id] = packed_offset & RSRC_DATA_OFFSET_MASK

    return ResourceFork(
        start=start,
        data_offset=data_offset,
        map_offset=map_offset,
        data_length=data_length,
        map_length=map_length,
        type_list_offset=type_list_offset,
        references=references,
    )


def read_string_list(cur: Cursor) -> tuple[bytes, ...]:
    """Read an STR# payload: length word, string count, Pascal strings."""
    cur.skip(4)
    (count,) = cur.unpack(_I16)
    strings = []
    for _ in range(count):
        (n,) = cur.read(1)
        strings.append(cur.read(n))
    return tuple(strings)


def read_interface_colors(cur: Cursor) -> tuple[RGBColor, ...]:
    cur.skip(4)  # length
    cur.skip(4)  # seed
    cur.skip(2)  # flags
    (count,) = cur.unpack(_U16)
    if count != NUM_INTERFACE_COLORS:
        raise FormatError(f"unexpected number of colors in clut {INTERFACE_CLUT_ID}: {count}")
    colors = []
    for _ in range(count):
        cur.skip(2)  # pixel value
        colors.append(decode(cur, RGBColor))
    return tuple(colors)


def read_interface_rects(cur: Cursor) -> tuple[Rect, ...]:
    cur.skip(4)
    (count,) = cur.unpack(_U16)
    if count != NUM_INTERFACE_RECTS:
        raise FormatError(f"unexpected number of rects in nrct {INTERFACE_RECTS_ID}: {count}")
    return tuple(decode(cur, Rect) for _ in range(count))


def read_resource_state(data: bytes, require_interface: bool = True) -> ResourceState:
    header = read_macbinary_header(data)
    fork = read_resource_fork(data, header.resource_fork_offset)
    cur = Cursor(data)

    strings: dict[int, tuple[bytes, ...]] = {}
    for res_id in sorted(fork.references.get(RES_STRINGS, {})):
        cur.seek(fork.locate(RES_STRINGS, res_id))
        strings[res_id] = read_string_list(cur)

    interface_colors = None
    clut_off = fork.locate(RES_CLUT, INTERFACE_CLUT_ID)
    if clut_off is not None:
        cur.seek(clut_off)
        interface_colors = read_interface_colors(cur)
    elif require_interface:
        raise FormatError(f"missing clut {INTERFACE_CLUT_ID}")

    interface_rects = None
    nrct_off = fork.locate(RES_RECTS, INTERFACE_RECTS_ID)
    if nrct_off is not None:
        cur.seek(nrct_off)
        interface_rects = read_interface_rects(cur)
    elif require_interface:
        raise FormatError(f"missing nrct {INTERFACE_RECTS_ID}")

    return ResourceState(
        strings=strings,
        interface_colors=interface_colors,
        interface_rects=interface_rects,
    )


def load_resource_state(path: Path, require_interface: bool = True) -> ResourceState:
    return read_resource_state(Path(path).read_bytes(), require_interface=require_interface)
