"""Diff engine for tagged-chunk state files.

Every ``diff_*`` helper compares a base and a modified record and returns a
ChangeNode carrying the modified-side values, or None when nothing differs.
Traversal order is the declaration order of the state file, never the order
in which differences happen to be found.
"""
from __future__ import annotations

from mml_core.errors import ContractViolation, SchemaMismatch
from mml_core.layout import channel, fixed
from mml_core.protocol import (
    ANNOTATION_COLOR_INDEX,
    FONT_NAMES,
    LINE_COLOR_BASE_INDEX,
    MAP_NAME_COLOR_INDEX,
    PHYSICS_TAGS,
    TAG_INFRAVISION_8BIT,
)
from mml_core.records import split_shape
from mml_read.snapshot import FuxState

from .diagnostics import Diagnostic
from .tree import ChangeNode, ChangeTree

FUX_COMMENT = "Generated by fuxdiff"


def _differs(a, b, *names: str) -> bool:
    return any(getattr(a, n) != getattr(b, n) for n in names)


def _slot_nodes(name: str, base: tuple, mod: tuple):
    """One node per differing array slot: type=slot, which=modified value."""
    for i, (b, m) in enumerate(zip(base, mod)):
        if b != m:
            yield ChangeNode(name).set("type", i).set("which", m)


def _check_cardinality(what: str, base: tuple, mod: tuple) -> None:
    if len(base) != len(mod):
        raise SchemaMismatch(f"{what}: base has {len(base)} entries, modified has {len(mod)}")


def diff_color(base, mod, index: int | None = None) -> ChangeNode | None:
    if base == mod:
        return None
    node = ChangeNode("color")
    if index is not None:
        node.set("index", index)
    node.set("red", channel(mod.red))
    node.set("green", channel(mod.green))
    node.set("blue", channel(mod.blue))
    return node


def diff_panel(index: int, base, mod) -> ChangeNode | None:
    if base == mod:
        return None
    node = ChangeNode("panel")
    node.set("index", index)
    node.set("type", mod.panel_class)
    node.set("coll", mod.collection)
    node.set("active_frame", mod.active_shape)
    node.set("inactive_frame", mod.inactive_shape)
    node.set("pitch", fixed(mod.sound_frequency))
    node.set("item", mod.item)
    for child in _slot_nodes("sound", base.sounds, mod.sounds):
        node.append(child)
    return node


def diff_fader(index: int, base, mod) -> ChangeNode | None:
    if base == mod:
        return None
    node = ChangeNode("fader")
    node.set("index", index)
    node.set("type", mod.proc)
    node.set("initial_opacity", fixed(mod.initial_transparency))
    node.set("final_opacity", fixed(mod.final_transparency))
    node.set("period", mod.period)
    node.set("flags", mod.flags)
    node.set("priority", mod.priority)
    color = diff_color(base.color, mod.color)
    if color is not None:
        node.append(color)
    return node


def diff_pen_sizes(base_lines: tuple, mod_lines: tuple):
    for i, (b, m) in enumerate(zip(base_lines, mod_lines)):
        for j, (bw, mw) in enumerate(zip(b.pen_sizes, m.pen_sizes)):
            if bw != mw:
                yield ChangeNode("line").set("type", i).set("scale", j).set("width", mw)


def font_name(code: int) -> str:
    try:
        return FONT_NAMES[code]
    except KeyError:
        raise SchemaMismatch(f"unrecognized annotation font code {code}") from None


def diff_fonts(base, mod):
    for i, (bs, ms) in enumerate(zip(base.sizes, mod.sizes)):
        if base.font != mod.font or base.face != mod.face or bs != ms:
            node = ChangeNode("font")
            node.set("index", i)
            node.set("name", font_name(mod.font))
            node.set("size", ms)
            node.set("style", mod.face)
            yield node


def diff_damage_response(index: int, base, mod) -> ChangeNode | None:
    if base.type != mod.type:
        raise ContractViolation(
            f"damage response {index}: type {base.type} in base, {mod.type} in modified"
        )
    if not _differs(base, mod, "threshold", "fade", "sound", "death_sound", "death_action"):
        return None
    node = ChangeNode("damage")
    node.set("index", index)
    node.set("threshold", mod.threshold)
    node.set("fade", mod.fade)
    node.set("sound", mod.sound)
    node.set("death_sound", mod.death_sound)
    node.set("death_action", mod.death_action)
    return node


def diff_damage(base, mod) -> ChangeNode | None:
    if base == mod:
        return None
    node = ChangeNode("damage")
    node.set("type", mod.type)
    node.set("flags", mod.flags)
    node.set("base", mod.base)
    node.set("random", mod.random)
    node.set("scale", fixed(mod.scale))
    return node


def diff_media(index: int, base, mod) -> ChangeNode | None:
    damage = diff_damage(base.damage, mod.damage)
    # shape_frequency is not read by the engine, so it never triggers a node
    if damage is None and not _differs(
        base, mod,
        "collection", "shape", "shape_count", "transfer_mode", "damage_frequency",
        "detonation_effects", "sounds", "submerged_fade_effect",
    ):
        return None
    node = ChangeNode("liquid")
    node.set("index", index)
    node.set("coll", mod.collection)
    node.set("frame", mod.shape)
    node.set("transfer", mod.transfer_mode)
    node.set("damage_freq", mod.damage_frequency)
    if damage is not None:
        node.append(damage)
    for child in _slot_nodes("effect", base.detonation_effects, mod.detonation_effects):
        node.append(child)
    for child in _slot_nodes("sound", base.sounds, mod.sounds):
        node.append(child)
    node.set("submerged", mod.submerged_fade_effect)
    return node


def shape_node(descriptor: int) -> ChangeNode:
    node = ChangeNode("shape")
    for name, value in split_shape(descriptor).items():
        node.set(name, value)
    return node


def diff_scenery(index: int, base, mod) -> ChangeNode | None:
    if base == mod:
        return None
    node = ChangeNode("object")
    node.set("index", index)
    node.set("flags", mod.flags)
    node.set("radius", mod.radius)
    node.set("height", mod.height)
    node.set("destruction", mod.destroyed_effect)
    if base.shape != mod.shape:
        node.add_child("normal", shape_node(mod.shape))
    if base.destroyed_shape != mod.destroyed_shape:
        node.add_child("destroyed", shape_node(mod.destroyed_shape))
    return node


def diff_ammo(index: int, base, mod) -> ChangeNode | None:
    if base == mod:
        return None
    node = ChangeNode("ammo")
    node.set("index", index)
    node.set("type", mod.type)
    node.set("left", mod.screen_left)
    node.set("top", mod.screen_top)
    node.set("across", mod.ammo_across)
    node.set("down", mod.ammo_down)
    node.set("delta_x", mod.delta_x)
    node.set("delta_y", mod.delta_y)
    node.set("bullet_shape", mod.bullet)
    node.set("empty_shape", mod.empty_bullet)
    node.set("right_to_left", mod.right_to_left != 0)
    return node


def diff_weapon(index: int, base, mod, diagnostics: list) -> ChangeNode | None:
    if base.item_id != mod.item_id:
        diagnostics.append(Diagnostic(
            "W_UNSUPPORTED",
            f"Weapon HUD item for weapon {index} changed; MML does not support this",
        ))
    if not _differs(
        base, mod,
        "weapon_panel_shape", "weapon_name_start_y", "weapon_name_end_y",
        "weapon_name_start_x", "weapon_name_end_x",
        "standard_weapon_panel_top", "standard_weapon_panel_left",
        "multi_weapon", "ammo_data",
    ):
        return None
    node = ChangeNode("weapon")
    node.set("index", index)
    node.set("shape", mod.weapon_panel_shape)
    node.set("start_y", mod.weapon_name_start_y)
    node.set("end_y", mod.weapon_name_end_y)
    node.set("start_x", mod.weapon_name_start_x)
    node.set("end_x", mod.weapon_name_end_x)
    node.set("top", mod.standard_weapon_panel_top)
    node.set("left", mod.standard_weapon_panel_left)
    node.set("multiple", mod.multi_weapon != 0)
    for i, (b, m) in enumerate(zip(base.ammo_data, mod.ammo_data)):
        ammo = diff_ammo(i, b, m)
        if ammo is not None:
            node.append(ammo)
    return node


def diff_tags(base: dict, mod: dict) -> list[Diagnostic]:
    """Report differing opaque chunks; physics chunks collapse into one warning."""
    diagnostics = []
    physics_differ = False
    for tag in sorted(set(base) | set(mod)):
        before = base.get(tag, b"")
        after = mod.get(tag, b"")
        if before == after:
            continue
        label = tag.decode("latin-1")
        if tag in PHYSICS_TAGS:
            physics_differ = True
        elif tag == TAG_INFRAVISION_8BIT:
            diagnostics.append(Diagnostic(
                "W_UNSUPPORTED",
                f"'{label}' differs, but MML does not support 8-bit infravision",
                tag,
            ))
        else:
            diagnostics.append(Diagnostic("W_TAG_DIFFERS", f"{label} differs ({len(after)})", tag))
    if physics_differ:
        diagnostics.append(Diagnostic("W_PHYSICS", "Physics models differ"))
    return diagnostics


def _indexed(tree: ChangeTree, path: str, fn, base: tuple, mod: tuple) -> None:
    _check_cardinality(path, base, mod)
    for i, (b, m) in enumerate(zip(base, mod)):
        node = fn(i, b, m)
        if node is not None:
            tree.add(path, node)


def diff_fux(base: FuxState, mod: FuxState) -> ChangeTree:
    """Compare two state files; the result carries only modified-side values."""
    tree = ChangeTree(FUX_COMMENT)

    _indexed(tree, "control_panels", diff_panel, base.control_panels, mod.control_panels)
    _indexed(tree, "faders", diff_fader, base.fade_definitions, mod.fade_definitions)
    _indexed(tree, "infravision", lambda i, b, m: diff_color(b, m, i),
             base.infravision_colors, mod.infravision_colors)

    # overhead map colors
    _indexed(tree, "overhead_map", lambda i, b, m: diff_color(b, m, i),
             base.polygon_colors, mod.polygon_colors)
    _indexed(tree, "overhead_map", lambda i, b, m: diff_color(b.color, m.color, LINE_COLOR_BASE_INDEX + i),
             base.line_definitions, mod.line_definitions)
    for node in (
        diff_color(base.annotation_definition.color, mod.annotation_definition.color, ANNOTATION_COLOR_INDEX),
        diff_color(base.map_name_color, mod.map_name_color, MAP_NAME_COLOR_INDEX),
    ):
        if node is not None:
            tree.add("overhead_map", node)

    # overhead map lines and fonts
    for node in diff_pen_sizes(base.line_definitions, mod.line_definitions):
        tree.add("overhead_map", node)
    for node in diff_fonts(base.annotation_definition, mod.annotation_definition):
        tree.add("overhead_map", node)

    _indexed(tree, "player", diff_damage_response, base.damage_responses, mod.damage_responses)
    _indexed(tree, "liquids", diff_media, base.media_definitions, mod.media_definitions)

    _check_cardinality("sounds", base.random_sounds, mod.random_sounds)
    for i, (b, m) in enumerate(zip(base.random_sounds, mod.random_sounds)):
        if b != m:
            tree.add("sounds", ChangeNode("random").set("index", i).set("sound", m))

    _indexed(tree, "scenery", diff_scenery, base.scenery_definitions, mod.scenery_definitions)
    _indexed(tree, "interface", lambda i, b, m: diff_weapon(i, b, m, tree.diagnostics),
             base.weapon_interface_definitions, mod.weapon_interface_definitions)

    tree.diagnostics.extend(diff_tags(base.tags, mod.tags))
    return tree
