"""MacBinary envelope validation."""
from __future__ import annotations

import binascii
import struct
from dataclasses import dataclass

from mml_core.errors import FormatError, TruncatedInput
from mml_core.protocol import (
    MACBINARY_BLOCK,
    MACBINARY_CRC_OFFSET,
    MACBINARY_CRC_SPAN,
    MACBINARY_DATA_LENGTH_OFFSET,
    MACBINARY_HEADER_LEN,
    MACBINARY_MAX_FILENAME,
    MACBINARY_MAX_MIN_VERSION,
    MACBINARY_RSRC_LENGTH_OFFSET,
)


def crc16(data: bytes) -> int:
    """CRC-16 with polynomial 0x1021, initial value 0, no reflection, no final xor."""
    return binascii.crc_hqx(data, 0)


def round_up(n: int, block: int = MACBINARY_BLOCK) -> int:
    return (n + block - 1) // block * block


@dataclass(frozen=True)
class MacBinaryHeader:
    filename: bytes
    data_length: int
    resource_length: int
    crc: int

    @property
    def resource_fork_offset(self) -> int:
        return MACBINARY_HEADER_LEN + round_up(self.data_length)


def read_macbinary_header(data: bytes) -> MacBinaryHeader:
    if len(data) < MACBINARY_HEADER_LEN:
        raise TruncatedInput(0, MACBINARY_HEADER_LEN, len(data))
    header = data[:MACBINARY_HEADER_LEN]

    if header[0] or header[1] > MACBINARY_MAX_FILENAME or header[74] or header[123] > MACBINARY_MAX_MIN_VERSION:
        raise FormatError("header magic mismatch")

    (stored_crc,) = struct.unpack_from(">H", header, MACBINARY_CRC_OFFSET)
    if crc16(header[:MACBINARY_CRC_SPAN]) != stored_crc:
        raise FormatError("header CRC mismatch")

    (data_length,) = struct.unpack_from(">I", header, MACBINARY_DATA_LENGTH_OFFSET)
    (resource_length,) = struct.unpack_from(">I", header, MACBINARY_RSRC_LENGTH_OFFSET)

    return MacBinaryHeader(
        filename=header[2:2 + header[1]],
        data_length=data_length,
        resource_length=resource_length,
        crc=stored_crc,
    )
