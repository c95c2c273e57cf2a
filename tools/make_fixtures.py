import random
from dataclasses import replace
from pathlib import Path

from mml_core.macroman import text_to_mac_roman
from mml_core.protocol import (
    INTERFACE_CLUT_ID,
    INTERFACE_RECTS_ID,
    NUM_INTERFACE_COLORS,
    NUM_INTERFACE_RECTS,
    RES_CLUT,
    RES_RECTS,
    RES_STRINGS,
)
from mml_core.records import AnnotationDefinition, Rect, RGBColor
from mml_read.snapshot import FuxState
from mml_read.writer import (
    build_macbinary,
    build_resource_fork,
    encode_clut,
    encode_nrct,
    encode_str_list,
    write_fux_state,
)

DEFAULT_STRINGS = {
    128: ["Marathon", "Durandal", "Tycho"],
    129: ["Map", "Shapes", "Sounds", "Physics"],
    130: ["Start New Game", "Continue Saved Game", "Preferences", "Quit"],
}


def sample_fux_state(rng: random.Random) -> FuxState:
    return FuxState(
        annotation_definition=AnnotationDefinition(
            color=RGBColor(0, 65535, 0), font=22, face=0, sizes=(5, 9, 12, 18)
        ),
        polygon_colors=tuple(RGBColor(rng.randrange(65536), rng.randrange(65536), 0) for _ in range(6)),
        random_sounds=tuple(rng.randrange(200) for _ in range(5)),
        tags={b"Mons": bytes(rng.randrange(256) for _ in range(64))},
    )


def tweak_fux_state(state: FuxState, rng: random.Random) -> FuxState:
    sounds = list(state.random_sounds)
    slot = rng.randrange(len(sounds))
    sounds[slot] = (sounds[slot] + 1) % 200
    tags = dict(state.tags)
    tags[b"Mons"] = bytes(reversed(tags[b"Mons"]))
    return replace(state, random_sounds=tuple(sounds), tags=tags)


def sample_resource_fork(strings: dict, colors, rects) -> bytes:
    resources = {
        RES_STRINGS: {
            res_id: encode_str_list([text_to_mac_roman(s) for s in items])
            for res_id, items in strings.items()
        },
        RES_CLUT: {INTERFACE_CLUT_ID: encode_clut(colors)},
        RES_RECTS: {INTERFACE_RECTS_ID: encode_nrct(rects)},
    }
    return build_resource_fork(resources)


def generate_fux_pair(output_dir: str, seed: int = 0) -> tuple[Path, Path]:
    rng = random.Random(seed)
    base = sample_fux_state(rng)
    modified = tweak_fux_state(base, rng)

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    (out / "base.fux").write_bytes(write_fux_state(base))
    (out / "modified.fux").write_bytes(write_fux_state(modified))
    print(f"GENERATED: {out}")
    return out / "base.fux", out / "modified.fux"


def generate_res_pair(output_dir: str, seed: int = 0) -> tuple[Path, Path]:
    rng = random.Random(seed)
    colors = [RGBColor(rng.randrange(65536), rng.randrange(65536), rng.randrange(65536))
              for _ in range(NUM_INTERFACE_COLORS)]
    rects = [Rect(i * 10, i * 20, i * 10 + 8, i * 20 + 16) for i in range(NUM_INTERFACE_RECTS)]

    mod_strings = {k: list(v) for k, v in DEFAULT_STRINGS.items()}
    mod_strings[130][1] = "Continuer la partie"
    mod_colors = list(colors)
    mod_colors[rng.randrange(NUM_INTERFACE_COLORS)] = RGBColor(65535, 0, 0)

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    (out / "base.bin").write_bytes(
        build_macbinary(sample_resource_fork(DEFAULT_STRINGS, colors, rects), filename=b"Base Engine")
    )
    (out / "modified.bin").write_bytes(
        build_macbinary(sample_resource_fork(mod_strings, mod_colors, rects), filename=b"Modified Engine")
    )
    print(f"GENERATED: {out}")
    return out / "base.bin", out / "modified.bin"


if __name__ == "__main__":
    import sys

    # Usage:
    #   python tools/make_fixtures.py OUT_DIR [--rsrc] [--seed N]

    args = [a for a in sys.argv[1:] if a]

    def pop_flag(arg_list: list[str], flag: str) -> tuple[bool, list[str]]:
        """Remove a boolean flag from an argv-style list."""
        if flag in arg_list:
            return True, [a for a in arg_list if a != flag]
        return False, arg_list

    rsrc, args = pop_flag(args, "--rsrc")

    seed = 0
    if "--seed" in args:
        i = args.index("--seed")
        if i + 1 >= len(args):
            raise SystemExit("--seed requires a value")
        seed = int(args[i + 1])
        args = args[:i] + args[i + 2:]

    out = args[0] if len(args) > 0 else "fixtures"

    if rsrc:
        generate_res_pair(out, seed=seed)
    else:
        generate_fux_pair(out, seed=seed)
