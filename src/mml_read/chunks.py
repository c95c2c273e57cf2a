"""Tagged-chunk state file reader."""
from __future__ import annotations

from pathlib import Path

from mml_core.errors import SchemaMismatch
from mml_core.layout import I16, Array, Cursor, decode, width
from mml_core.protocol import (
    CHUNK_HEADER,
    CHUNK_HEADER_LEN,
    CHUNK_LENGTHS,
    NUM_CONTROL_PANELS,
    NUM_DAMAGE_RESPONSES,
    NUM_FADERS,
    NUM_INFRAVISION_COLORS,
    NUM_LINE_DEFINITIONS,
    NUM_MEDIA,
    NUM_POLYGON_COLORS,
    NUM_RANDOM_SOUNDS,
    NUM_SCENERY,
    NUM_WEAPON_INTERFACES,
    TAG_DAMAGE,
    TAG_FADERS,
    TAG_INFRAVISION,
    TAG_MAP_LINES,
    TAG_MAP_NAME,
    TAG_MAP_POLYGONS,
    TAG_MAP_TEXT,
    TAG_MEDIA,
    TAG_PANELS,
    TAG_RANDOM_SOUNDS,
    TAG_SCENERY,
    TAG_TYPE,
    TAG_WEAPON_HUD,
)
from mml_core.records import (
    AnnotationDefinition,
    ControlPanelDefinition,
    DamageResponse,
    FadeDefinition,
    LineDefinition,
    MediaDefinition,
    RGBColor,
    SceneryDefinition,
    WeaponInterfaceDefinition,
)

from .snapshot import FuxState

# tag -> (FuxState field, record kind). A field of None means the chunk is
# length-checked and then dropped.
KNOWN_CHUNKS = {
    TAG_FADERS: ("fade_definitions", Array(FadeDefinition, NUM_FADERS)),
    TAG_DAMAGE: ("damage_responses", Array(DamageResponse, NUM_DAMAGE_RESPONSES)),
    TAG_INFRAVISION: ("infravision_colors", Array(RGBColor, NUM_INFRAVISION_COLORS)),
    TAG_MEDIA: ("media_definitions", Array(MediaDefinition, NUM_MEDIA)),
    TAG_MAP_LINES: ("line_definitions", Array(LineDefinition, NUM_LINE_DEFINITIONS)),
    TAG_MAP_NAME: ("map_name_color", RGBColor),
    TAG_MAP_POLYGONS: ("polygon_colors", Array(RGBColor, NUM_POLYGON_COLORS)),
    TAG_MAP_TEXT: ("annotation_definition", AnnotationDefinition),
    TAG_PANELS: ("control_panels", Array(ControlPanelDefinition, NUM_CONTROL_PANELS)),
    TAG_RANDOM_SOUNDS: ("random_sounds", Array(I16, NUM_RANDOM_SOUNDS)),
    TAG_SCENERY: ("scenery_definitions", Array(SceneryDefinition, NUM_SCENERY)),
    # The player type table has no MML counterpart.
    TAG_TYPE: (None, None),
    TAG_WEAPON_HUD: ("weapon_interface_definitions", Array(WeaponInterfaceDefinition, NUM_WEAPON_INTERFACES)),
}


def _expected_length(tag: bytes) -> int:
    expected = CHUNK_LENGTHS[tag]
    _, kind = KNOWN_CHUNKS[tag]
    if kind is not None and width(kind) != expected:
        raise SchemaMismatch(f"record layout for {tag!r} is {width(kind)} bytes, protocol says {expected}")
    return expected


def iter_chunks(data: bytes):
    """Yield (offset, tag, payload) for every chunk in the stream.

    A header shorter than 8 bytes ends the stream. A known tag whose declared
    length is not its protocol length raises SchemaMismatch before the payload
    is read; any other payload shorter than its declared length raises
    TruncatedInput.
    """
    cur = Cursor(data)
    while cur.remaining() >= CHUNK_HEADER_LEN:
        start_off = cur.tell()
        tag, length = cur.unpack(CHUNK_HEADER)
        if tag in KNOWN_CHUNKS:
            expected = _expected_length(tag)
            if length != expected:
                raise SchemaMismatch(
                    f"chunk {tag.decode('latin-1')!r} at offset {start_off} is {length} bytes, expected {expected}"
                )
        yield start_off, tag, cur.read(length)


def read_fux_state(data: bytes) -> FuxState:
    values: dict = {}
    tags: dict[bytes, bytes] = {}

    for _, tag, payload in iter_chunks(data):
        if tag not in KNOWN_CHUNKS:
            tags[tag] = payload
            continue

        name, kind = KNOWN_CHUNKS[tag]
        if name is None:
            continue
        values[name] = decode(Cursor(payload), kind)

    return FuxState(tags=tags, **values)


def load_fux_state(path: Path) -> FuxState:
    return read_fux_state(Path(path).read_bytes())
