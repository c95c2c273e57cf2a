"""Record models of the simulation's persisted interface and physics state.

Field order is file order. Fixed-point fields hold their raw scaled integers;
``mml_core.layout.fixed`` and ``channel`` turn them into floats.
"""
from __future__ import annotations

from dataclasses import dataclass

from .layout import I16, I32, U16, U32, array, nested, scalar


@dataclass(frozen=True)
class RGBColor:
    red: int = scalar(U16)
    green: int = scalar(U16)
    blue: int = scalar(U16)


@dataclass(frozen=True)
class Rect:
    top: int = scalar(U16)
    left: int = scalar(U16)
    bottom: int = scalar(U16)
    right: int = scalar(U16)


@dataclass(frozen=True)
class AnnotationDefinition:
    color: RGBColor = nested(RGBColor)
    font: int = scalar(I16)
    face: int = scalar(I16)
    sizes: tuple = array(I16, 4)


@dataclass(frozen=True)
class ControlPanelDefinition:
    panel_class: int = scalar(I16)
    flags: int = scalar(U16)
    collection: int = scalar(I16)
    active_shape: int = scalar(I16)
    inactive_shape: int = scalar(I16)
    sounds: tuple = array(I16, 3)
    sound_frequency: int = scalar(I32)  # 16.16
    item: int = scalar(I16)


@dataclass(frozen=True)
class DamageDefinition:
    type: int = scalar(I16)
    flags: int = scalar(I16)
    base: int = scalar(I16)
    random: int = scalar(I16)
    scale: int = scalar(I32)  # 16.16


@dataclass(frozen=True)
class DamageResponse:
    type: int = scalar(I16)
    threshold: int = scalar(I16)
    fade: int = scalar(I16)
    sound: int = scalar(I16)
    death_sound: int = scalar(I16)
    death_action: int = scalar(I16)


@dataclass(frozen=True)
class FadeDefinition:
    proc: int = scalar(U32)
    color: RGBColor = nested(RGBColor)
    initial_transparency: int = scalar(I32)  # 16.16
    final_transparency: int = scalar(I32)  # 16.16
    period: int = scalar(I16)
    flags: int = scalar(U16)
    priority: int = scalar(I16)


@dataclass(frozen=True)
class LineDefinition:
    color: RGBColor = nested(RGBColor)
    pen_sizes: tuple = array(I16, 4)


@dataclass(frozen=True)
class MediaDefinition:
    collection: int = scalar(I16)
    shape: int = scalar(I16)
    shape_count: int = scalar(I16)
    shape_frequency: int = scalar(I16)  # unused by the engine
    transfer_mode: int = scalar(I16)
    damage_frequency: int = scalar(I16)
    damage: DamageDefinition = nested(DamageDefinition)
    detonation_effects: tuple = array(I16, 4)
    sounds: tuple = array(I16, 9)
    submerged_fade_effect: int = scalar(I16)


@dataclass(frozen=True)
class SceneryDefinition:
    flags: int = scalar(U16)
    shape: int = scalar(U16)
    radius: int = scalar(I16)
    height: int = scalar(I16)
    destroyed_effect: int = scalar(I16)
    destroyed_shape: int = scalar(U16)


@dataclass(frozen=True)
class WeaponInterfaceAmmoDefinition:
    type: int = scalar(I16)
    screen_left: int = scalar(I16)
    screen_top: int = scalar(I16)
    ammo_across: int = scalar(I16)
    ammo_down: int = scalar(I16)
    delta_x: int = scalar(I16)
    delta_y: int = scalar(I16)
    bullet: int = scalar(I16)
    empty_bullet: int = scalar(I16)
    right_to_left: int = scalar(U16)


@dataclass(frozen=True)
class WeaponInterfaceDefinition:
    item_id: int = scalar(I16)
    weapon_panel_shape: int = scalar(I16)
    weapon_name_start_y: int = scalar(I16)
    weapon_name_end_y: int = scalar(I16)
    weapon_name_start_x: int = scalar(I16)
    weapon_name_end_x: int = scalar(I16)
    standard_weapon_panel_top: int = scalar(I16)
    standard_weapon_panel_left: int = scalar(I16)
    multi_weapon: int = scalar(U16)
    ammo_data: tuple = array(WeaponInterfaceAmmoDefinition, 2)


def split_shape(descriptor: int) -> dict[str, int]:
    """Split a packed shape descriptor.

    Bits 0-7 are the sequence, 8-12 the collection and 13-15 its color table.
    The legacy tools shifted the color table by 11, overlapping the collection
    bits; this split keeps the three fields disjoint on purpose.
    """
    return {
        "coll": (descriptor >> 8) & 0x1F,
        "clut": descriptor >> 13,
        "seq": descriptor & 0xFF,
    }
