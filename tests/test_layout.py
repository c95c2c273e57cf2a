import dataclasses

import pytest

from mml_core.errors import TruncatedInput
from mml_core.layout import I16, I32, U16, U32, Array, Cursor, Scalar, decode, decode_bytes, encode, layout, width
from mml_core.layout import channel, fixed
from mml_core.protocol import CHUNK_LENGTHS
from mml_core import records
from mml_read.chunks import KNOWN_CHUNKS

RECORD_KINDS = [
    records.RGBColor,
    records.Rect,
    records.AnnotationDefinition,
    records.ControlPanelDefinition,
    records.DamageDefinition,
    records.DamageResponse,
    records.FadeDefinition,
    records.LineDefinition,
    records.MediaDefinition,
    records.SceneryDefinition,
    records.WeaponInterfaceAmmoDefinition,
    records.WeaponInterfaceDefinition,
]

RANGES = {
    "I8": (-128, 127),
    "U8": (0, 255),
    "I16": (-32768, 32767),
    "U16": (0, 65535),
    "I32": (-(2 ** 31), 2 ** 31 - 1),
    "U32": (0, 2 ** 32 - 1),
}


def sample(kind, counter):
    """Distinct in-range values for every field of ``kind``."""
    if isinstance(kind, Scalar):
        lo, hi = RANGES[kind.name]
        n = next(counter)
        return lo + (n * 7919) % (hi - lo + 1)
    if isinstance(kind, Array):
        return tuple(sample(kind.kind, counter) for _ in range(kind.count))
    return kind(**{name: sample(k, counter) for name, k in layout(kind)})


def _counter():
    n = 1
    while True:
        yield n
        n += 1


def test_cursor_reads_big_endian():
    cur = Cursor(b"\x01\x02\xff\xfe\x00\x01\x00\x00")
    assert decode(cur, U16) == 0x0102
    assert decode(cur, I16) == -2
    assert decode(cur, U32) == 0x00010000
    assert cur.remaining() == 0


def test_cursor_short_read_raises_truncated():
    cur = Cursor(b"\x00\x01\x02")
    with pytest.raises(TruncatedInput) as exc:
        decode(cur, I32)
    assert exc.value.offset == 0
    assert exc.value.needed == 4
    # nothing consumed on failure
    assert cur.tell() == 0


def test_cursor_seek_and_skip_are_bounded():
    cur = Cursor(bytes(10))
    cur.seek(10)
    with pytest.raises(TruncatedInput):
        cur.seek(11)
    cur.seek(8)
    with pytest.raises(TruncatedInput):
        cur.skip(3)


def test_record_widths_match_chunk_lengths():
    for tag, (name, kind) in KNOWN_CHUNKS.items():
        if kind is not None:
            assert width(kind) == CHUNK_LENGTHS[tag], tag


@pytest.mark.parametrize("kind", RECORD_KINDS, ids=lambda k: k.__name__)
def test_record_round_trip(kind):
    value = sample(kind, _counter())
    data = encode(kind, value)
    assert len(data) == width(kind)
    assert decode_bytes(data, kind) == value


def test_nested_array_decoding_keeps_order():
    kind = Array(records.RGBColor, 2)
    data = bytes([0, 1, 0, 2, 0, 3, 0, 4, 0, 5, 0, 6])
    assert decode_bytes(data, kind) == (records.RGBColor(1, 2, 3), records.RGBColor(4, 5, 6))


def test_defaults_are_zero_filled():
    weapon = records.WeaponInterfaceDefinition()
    assert weapon.ammo_data == (records.WeaponInterfaceAmmoDefinition(),) * 2
    assert encode(records.WeaponInterfaceDefinition, weapon) == bytes(58)


def test_records_are_immutable():
    color = records.RGBColor(1, 2, 3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        color.red = 5


def test_fixed_point_scales():
    assert fixed(65536) == 1.0
    assert fixed(-32768) == -0.5
    assert channel(65535) == 1.0
    assert channel(0) == 0.0


def test_encode_rejects_wrong_array_length():
    with pytest.raises(ValueError):
        encode(Array(I32, 3), (1, 2))


def test_split_shape():
    assert records.split_shape((2 << 13) | (5 << 8) | 7) == {"coll": 5, "clut": 2, "seq": 7}
