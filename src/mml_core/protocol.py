"""mmldiff protocol constants.

Single source of truth for on-disk tags, chunk lengths and resource layouts.
Keep this file stable. Readers, writers and the diff engine must remain synchronized.
"""
import struct

# Tagged-chunk ("Fux!" state) container
# Header: [Tag(4) | Length(4)] = 8 bytes, big-endian
CHUNK_HEADER = struct.Struct(">4sI")
CHUNK_HEADER_LEN = 8

TAG_FADERS        = b"Clfx"
TAG_DAMAGE        = b"Damg"
TAG_INFRAVISION   = b"Ivcl"
TAG_MEDIA         = b"Mdia"
TAG_MAP_LINES     = b"Mpln"
TAG_MAP_NAME      = b"Mpnc"
TAG_MAP_POLYGONS  = b"Mppl"
TAG_MAP_TEXT      = b"Mptx"
TAG_PANELS        = b"Panl"
TAG_RANDOM_SOUNDS = b"Rand"
TAG_SCENERY       = b"Scnr"
TAG_TYPE          = b"Type"
TAG_WEAPON_HUD    = b"Wep2"

# Exact payload lengths for every known chunk
CHUNK_LENGTHS = {
    TAG_FADERS: 768,
    TAG_DAMAGE: 288,
    TAG_INFRAVISION: 24,
    TAG_MEDIA: 260,
    TAG_MAP_LINES: 42,
    TAG_MAP_NAME: 6,
    TAG_MAP_POLYGONS: 36,
    TAG_MAP_TEXT: 18,
    TAG_PANELS: 1188,
    TAG_RANDOM_SOUNDS: 10,
    TAG_SCENERY: 732,
    TAG_TYPE: 28,
    TAG_WEAPON_HUD: 580,
}

# Opaque tags that are reported rather than diffed
PHYSICS_TAGS = (b"Effx", b"Item", b"Mons", b"Proj", b"Wep1")
TAG_INFRAVISION_8BIT = b"Ivrm"

# Array cardinalities of the state file
NUM_CONTROL_PANELS = 54
NUM_DAMAGE_RESPONSES = 24
NUM_FADERS = 32
NUM_INFRAVISION_COLORS = 4
NUM_LINE_DEFINITIONS = 3
NUM_MEDIA = 5
NUM_POLYGON_COLORS = 6
NUM_RANDOM_SOUNDS = 5
NUM_SCENERY = 61
NUM_WEAPON_INTERFACES = 10

# Overhead map color slots for entries that are not polygon colors
LINE_COLOR_BASE_INDEX = 8
ANNOTATION_COLOR_INDEX = 16
MAP_NAME_COLOR_INDEX = 17

# Annotation font codes understood by the MML loader
FONT_NAMES = {
    4: "Monaco",
    22: "Courier",
}

# Fixed-point scales
FIXED_ONE = 65536
CHANNEL_MAX = 65535

# MacBinary envelope
MACBINARY_HEADER_LEN = 128
MACBINARY_CRC_SPAN = 124
MACBINARY_CRC_OFFSET = 124
MACBINARY_DATA_LENGTH_OFFSET = 83
MACBINARY_RSRC_LENGTH_OFFSET = 87
MACBINARY_MAX_FILENAME = 63
MACBINARY_MAX_MIN_VERSION = 0x81
MACBINARY_BLOCK = 128

# Classic resource fork
RSRC_HEADER = struct.Struct(">IIII")
RSRC_MAP_TYPE_LIST_OFFSET = 24
RSRC_TYPE_ENTRY = struct.Struct(">4sHH")
RSRC_REF_ENTRY = struct.Struct(">hHII")
RSRC_REF_ENTRY_LEN = 12
RSRC_DATA_OFFSET_MASK = 0x00FFFFFF

RES_STRINGS = b"STR#"
RES_CLUT = b"clut"
RES_RECTS = b"nrct"

INTERFACE_CLUT_ID = 130
INTERFACE_RECTS_ID = 128
FILENAMES_STR_ID = 129

NUM_INTERFACE_COLORS = 25
NUM_INTERFACE_RECTS = 18
