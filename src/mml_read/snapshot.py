"""Snapshot models: the fully decoded state of one input file."""
from __future__ import annotations

from dataclasses import dataclass, field

from mml_core.layout import I16, array, nested
from mml_core.protocol import (
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
)
from mml_core.records import (
    AnnotationDefinition,
    ControlPanelDefinition,
    DamageResponse,
    FadeDefinition,
    LineDefinition,
    MediaDefinition,
    Rect,
    RGBColor,
    SceneryDefinition,
    WeaponInterfaceDefinition,
)


@dataclass(frozen=True)
class FuxState:
    """Tagged-chunk state file: known records plus opaque chunks keyed by tag."""

    annotation_definition: AnnotationDefinition = nested(AnnotationDefinition)
    control_panels: tuple = array(ControlPanelDefinition, NUM_CONTROL_PANELS)
    damage_responses: tuple = array(DamageResponse, NUM_DAMAGE_RESPONSES)
    fade_definitions: tuple = array(FadeDefinition, NUM_FADERS)
    infravision_colors: tuple = array(RGBColor, NUM_INFRAVISION_COLORS)
    line_definitions: tuple = array(LineDefinition, NUM_LINE_DEFINITIONS)
    map_name_color: RGBColor = nested(RGBColor)
    media_definitions: tuple = array(MediaDefinition, NUM_MEDIA)
    polygon_colors: tuple = array(RGBColor, NUM_POLYGON_COLORS)
    random_sounds: tuple = array(I16, NUM_RANDOM_SOUNDS)
    scenery_definitions: tuple = array(SceneryDefinition, NUM_SCENERY)
    weapon_interface_definitions: tuple = array(WeaponInterfaceDefinition, NUM_WEAPON_INTERFACES)
    tags: dict[bytes, bytes] = field(default_factory=dict)


@dataclass(frozen=True)
class ResourceState:
    """Resources consumed from a MacBinary-wrapped resource fork.

    ``strings`` maps STR# ids to their raw Mac Roman strings in order.
    ``interface_colors`` and ``interface_rects`` are None when the fork has no
    clut 130 / nrct 128 and the caller did not require them.
    """

    strings: dict[int, tuple[bytes, ...]] = field(default_factory=dict)
    interface_colors: tuple[RGBColor, ...] | None = None
    interface_rects: tuple[Rect, ...] | None = None
