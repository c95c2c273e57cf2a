import struct

import pytest

from conftest import interface_colors, interface_rects, make_macbinary
from mml_core.errors import FormatError, TruncatedInput
from mml_core.protocol import RES_STRINGS
from mml_read.macbinary import read_macbinary_header
from mml_read.rsrc import read_resource_fork, read_resource_state
from mml_read.writer import build_macbinary, build_resource_fork, encode_clut, encode_nrct, encode_str_list


def test_reads_strings_colors_and_rects():
    data = make_macbinary(strings={128: ["alpha", "beta"], 130: ["Café"]})
    state = read_resource_state(data)
    assert state.strings == {128: (b"alpha", b"beta"), 130: (b"Caf\x8e",)}
    assert state.interface_colors == tuple(interface_colors())
    assert state.interface_rects == tuple(interface_rects())


def test_fork_follows_padded_data_fork():
    data = make_macbinary(data_fork=b"d" * 200)
    header = read_macbinary_header(data)
    assert header.resource_fork_offset == 128 + 256
    assert read_resource_state(data).strings[128] == (b"alpha", b"beta")


def test_unrecognized_types_are_skipped():
    extra = {b"PICT": {128: b"\x00" * 40, 129: b"\x01" * 10}, b"snd ": {5: b"beep"}}
    data = make_macbinary(extra=extra)
    header = read_macbinary_header(data)
    fork = read_resource_fork(data, header.resource_fork_offset)
    assert set(fork.references) == {RES_STRINGS, b"clut", b"nrct"}
    assert read_resource_state(data).strings == {128: (b"alpha", b"beta")}


def test_wrong_color_count_is_format_error():
    with pytest.raises(FormatError, match="clut 130"):
        read_resource_state(make_macbinary(colors=interface_colors(24)))


def test_wrong_rect_count_is_format_error():
    with pytest.raises(FormatError, match="nrct 128"):
        read_resource_state(make_macbinary(rects=interface_rects(17)))


def test_missing_interface_resources():
    data = make_macbinary(colors=False, rects=False)
    with pytest.raises(FormatError, match="missing"):
        read_resource_state(data)
    state = read_resource_state(data, require_interface=False)
    assert state.interface_colors is None
    assert state.interface_rects is None
    assert state.strings == {128: (b"alpha", b"beta")}


def test_offset_past_end_is_truncated():
    data = bytearray(make_macbinary())
    header = read_macbinary_header(bytes(data))
    start = header.resource_fork_offset
    # point the map offset far beyond the file
    struct.pack_into(">I", data, start + 4, 0x00FFFFFF)
    with pytest.raises(TruncatedInput):
        read_resource_state(bytes(data))


def test_truncated_string_list():
    # declares far more strings than the file can hold
    payload = struct.pack(">h", 0x7FFF) + bytes([2]) + b"ok"
    fork = build_resource_fork({RES_STRINGS: {128: payload}})
    with pytest.raises(TruncatedInput):
        read_resource_state(build_macbinary(fork), require_interface=False)


def test_color_table_seed_is_ignored():
    fork_a = build_resource_fork({
        b"clut": {130: encode_clut(interface_colors(), seed=1)},
        b"nrct": {128: encode_nrct(interface_rects())},
        RES_STRINGS: {128: encode_str_list([b"x"])},
    })
    fork_b = build_resource_fork({
        b"clut": {130: encode_clut(interface_colors(), seed=99)},
        b"nrct": {128: encode_nrct(interface_rects())},
        RES_STRINGS: {128: encode_str_list([b"x"])},
    })
    assert read_resource_state(build_macbinary(fork_a)) == read_resource_state(build_macbinary(fork_b))
