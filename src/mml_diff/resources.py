"""Diff engine for resource-fork snapshots: string sets, interface colors and rects."""
from __future__ import annotations

from mml_core.errors import SchemaMismatch
from mml_core.macroman import mac_roman_to_text
from mml_core.protocol import FILENAMES_STR_ID
from mml_read.snapshot import ResourceState

from .engine import diff_color
from .tree import ChangeNode, ChangeTree

RES_COMMENT = "Generated by resdiff"
STR_COMMENT = "Generated by strdiff"


def diff_stringset(res_id: int, base: tuple, mod: tuple) -> ChangeNode | None:
    if len(base) != len(mod):
        raise SchemaMismatch(
            f"STR# {res_id}: base has {len(base)} strings, modified has {len(mod)}"
        )
    node = ChangeNode("stringset").set("index", res_id)
    for i, (b, m) in enumerate(zip(base, mod)):
        if b != m:
            node.append(ChangeNode("string", text=mac_roman_to_text(m)).set("index", i))
    return node if node.children else None


def diff_rect(index: int, base, mod) -> ChangeNode | None:
    if base == mod:
        return None
    node = ChangeNode("rect")
    node.set("index", index)
    node.set("top", mod.top)
    node.set("left", mod.left)
    node.set("bottom", mod.bottom)
    node.set("right", mod.right)
    return node


def _diff_strings(tree: ChangeTree, base: dict, mod: dict) -> None:
    ids = sorted((set(base) | set(mod)) - {FILENAMES_STR_ID})
    for res_id in ids:
        if res_id not in base or res_id not in mod:
            side = "base" if res_id not in base else "modified"
            raise SchemaMismatch(f"STR# {res_id} is missing from the {side} file")
        node = diff_stringset(res_id, base[res_id], mod[res_id])
        if node is not None:
            tree.add("", node)


def _require(what: str, base, mod) -> None:
    if base is None or mod is None:
        raise SchemaMismatch(f"{what} must be present in both files")
    if len(base) != len(mod):
        raise SchemaMismatch(f"{what}: base has {len(base)} entries, modified has {len(mod)}")


def diff_resources(base: ResourceState, mod: ResourceState, strings_only: bool = False) -> ChangeTree:
    tree = ChangeTree(STR_COMMENT if strings_only else RES_COMMENT)
    _diff_strings(tree, base.strings, mod.strings)
    if strings_only:
        return tree

    _require("interface colors", base.interface_colors, mod.interface_colors)
    for i, (b, m) in enumerate(zip(base.interface_colors, mod.interface_colors)):
        node = diff_color(b, m, i)
        if node is not None:
            tree.add("interface", node)

    _require("interface rects", base.interface_rects, mod.interface_rects)
    for i, (b, m) in enumerate(zip(base.interface_rects, mod.interface_rects)):
        node = diff_rect(i, b, m)
        if node is not None:
            tree.add("interface", node)
    return tree
