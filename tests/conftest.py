from pathlib import Path

import pytest

from mml_core.macroman import text_to_mac_roman
from mml_core.protocol import INTERFACE_CLUT_ID, INTERFACE_RECTS_ID, RES_CLUT, RES_RECTS, RES_STRINGS
from mml_core.records import Rect, RGBColor
from mml_read.writer import build_macbinary, build_resource_fork, encode_clut, encode_nrct, encode_str_list

REPO = Path(__file__).resolve().parents[1]


def interface_colors(n: int = 25) -> list[RGBColor]:
    return [RGBColor(i * 1000, i * 2000, 65535 - i) for i in range(n)]


def interface_rects(n: int = 18) -> list[Rect]:
    return [Rect(i, i + 1, i + 10, i + 20) for i in range(n)]


def make_macbinary(strings=None, colors=None, rects=None, extra=None, data_fork=b"") -> bytes:
    """MacBinary file around a fork holding the given resources.

    ``None`` for colors/rects means the default well-formed table; pass ``False``
    to leave the resource out.
    """
    strings = {128: ["alpha", "beta"]} if strings is None else strings
    resources = {}
    if extra:
        resources.update(extra)
    if strings:
        resources[RES_STRINGS] = {
            res_id: encode_str_list([text_to_mac_roman(s) for s in items])
            for res_id, items in strings.items()
        }
    if colors is not False:
        resources[RES_CLUT] = {INTERFACE_CLUT_ID: encode_clut(interface_colors() if colors is None else colors)}
    if rects is not False:
        resources[RES_RECTS] = {INTERFACE_RECTS_ID: encode_nrct(interface_rects() if rects is None else rects)}
    return build_macbinary(build_resource_fork(resources), data_fork=data_fork)


@pytest.fixture
def write_file(tmp_path):
    def _write(name: str, data: bytes) -> Path:
        p = tmp_path / name
        p.write_bytes(data)
        return p
    return _write
