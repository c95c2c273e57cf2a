from dataclasses import replace

import pytest

from conftest import interface_colors, interface_rects
from mml_core.errors import SchemaMismatch
from mml_core.records import Rect, RGBColor
from mml_diff.resources import RES_COMMENT, STR_COMMENT, diff_resources
from mml_read.snapshot import ResourceState

BASE = ResourceState(
    strings={128: (b"alpha", b"beta"), 129: (b"Map",)},
    interface_colors=tuple(interface_colors()),
    interface_rects=tuple(interface_rects()),
)


def test_identical_resources_give_empty_tree():
    tree = diff_resources(BASE, BASE)
    assert tree.comment == RES_COMMENT
    assert tree.is_empty()


def test_changed_string_is_decoded_from_mac_roman():
    mod = replace(BASE, strings={128: (b"alpha", b"Caf\x8e"), 129: (b"Map",)})
    (stringset,) = diff_resources(BASE, mod).find_all("stringset")
    assert stringset.attributes == {"index": 128}
    (string,) = stringset.children
    assert string.attributes == {"index": 1}
    assert string.text == "Café"


def test_file_name_strings_are_never_diffed():
    mod = replace(BASE, strings={128: (b"alpha", b"beta"), 129: (b"Other", b"Names")})
    assert diff_resources(BASE, mod).is_empty()


def test_string_count_change_is_schema_mismatch():
    mod = replace(BASE, strings={128: (b"alpha",), 129: (b"Map",)})
    with pytest.raises(SchemaMismatch):
        diff_resources(BASE, mod)


def test_string_set_missing_on_one_side_is_schema_mismatch():
    mod = replace(BASE, strings={128: (b"alpha", b"beta"), 129: (b"Map",), 131: (b"new",)})
    with pytest.raises(SchemaMismatch, match="base"):
        diff_resources(BASE, mod)


def test_interface_color_and_rect():
    colors = list(BASE.interface_colors)
    colors[24] = RGBColor(65535, 0, 65535)
    rects = list(BASE.interface_rects)
    rects[0] = Rect(1, 2, 3, 4)
    mod = replace(BASE, interface_colors=tuple(colors), interface_rects=tuple(rects))
    tree = diff_resources(BASE, mod)
    (interface,) = tree.root.children
    assert [c.name for c in interface.children] == ["color", "rect"]
    assert interface.children[0].attributes == {"index": 24, "red": 1.0, "green": 0.0, "blue": 1.0}
    assert interface.children[1].attributes == {"index": 0, "top": 1, "left": 2, "bottom": 3, "right": 4}


def test_strings_only_ignores_interface():
    mod = replace(BASE, interface_colors=None, interface_rects=None)
    tree = diff_resources(BASE, mod, strings_only=True)
    assert tree.comment == STR_COMMENT
    assert tree.is_empty()
    with pytest.raises(SchemaMismatch):
        diff_resources(BASE, mod)
