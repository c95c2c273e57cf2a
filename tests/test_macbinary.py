import pytest

from mml_core.errors import FormatError, TruncatedInput
from mml_read.macbinary import crc16, read_macbinary_header, round_up
from mml_read.writer import build_macbinary


def test_crc16_check_value():
    # CRC-16/XMODEM check value
    assert crc16(b"123456789") == 0x31C3


def test_round_up():
    assert round_up(0) == 0
    assert round_up(1) == 128
    assert round_up(128) == 128
    assert round_up(129) == 256


def test_valid_header_is_accepted():
    data = build_macbinary(b"\x00" * 16, data_fork=b"x" * 130, filename=b"Marathon Infinity")
    header = read_macbinary_header(data)
    assert header.filename == b"Marathon Infinity"
    assert header.data_length == 130
    assert header.resource_length == 16
    assert header.resource_fork_offset == 128 + 256


def test_short_file_is_truncated():
    with pytest.raises(TruncatedInput):
        read_macbinary_header(bytes(100))


@pytest.mark.parametrize("offset,value", [(0, 1), (1, 64), (74, 1), (123, 0x82)])
def test_magic_mismatch(offset, value):
    data = bytearray(build_macbinary(b"\x00" * 16))
    data[offset] = value
    with pytest.raises(FormatError, match="magic"):
        read_macbinary_header(bytes(data))


def test_crc_mismatch():
    data = bytearray(build_macbinary(b"\x00" * 16))
    data[125] ^= 0xFF
    with pytest.raises(FormatError, match="CRC"):
        read_macbinary_header(bytes(data))


def test_every_single_bit_flip_is_rejected():
    original = build_macbinary(b"\x00" * 16, filename=b"Engine")
    read_macbinary_header(original)
    for byte in range(124):
        for bit in range(8):
            data = bytearray(original)
            data[byte] ^= 1 << bit
            with pytest.raises(FormatError):
                read_macbinary_header(bytes(data))
