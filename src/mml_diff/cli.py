"""mmldiff - MML describing the difference between two snapshots."""
from __future__ import annotations

import json
import warnings
from pathlib import Path

import click

from mml_core.errors import MMLDiffError
from mml_core.macroman import mac_roman_to_text
from mml_read.chunks import iter_chunks, load_fux_state, read_fux_state
from mml_read.macbinary import read_macbinary_header
from mml_read.rsrc import load_resource_state, read_resource_state

from .diagnostics import UnsupportedFeatureWarning, emit, show_one_line
from .engine import diff_fux
from .ledger import file_sha256, write_ledger
from .markup import write_markup
from .resources import diff_resources

CANONICAL_JSON_KW = {"sort_keys": True, "separators": (",", ":"), "ensure_ascii": False}

_base = click.argument("base", type=click.Path(exists=True, dir_okay=False, path_type=Path))
_modified = click.argument("modified", type=click.Path(exists=True, dir_okay=False, path_type=Path))
_ledger = click.option(
    "--ledger",
    type=click.Path(file_okay=False, path_type=Path),
    help="Also write changes.parquet and diagnostics.parquet to this directory.",
)


def _fail(e: Exception) -> None:
    # Fail closed with a single-line reason and no markup.
    if isinstance(e, MMLDiffError):
        click.echo(f"FATAL {e.describe()}", err=True)
    else:
        click.echo(f"FATAL: {e}", err=True)
    raise SystemExit(1)


def _finish(tree, base: Path, modified: Path, ledger: Path | None) -> None:
    if ledger is not None:
        try:
            write_ledger(tree, ledger, file_sha256(base), file_sha256(modified))
        except OSError as e:
            _fail(e)

    write_markup(tree, click.get_text_stream("stdout"))

    with warnings.catch_warnings():
        warnings.simplefilter("always", UnsupportedFeatureWarning)
        warnings.showwarning = show_one_line
        emit(tree.diagnostics)


@click.group()
def main():
    pass


@main.command("fux")
@_base
@_modified
@_ledger
def fux_cmd(base: Path, modified: Path, ledger: Path | None):
    """Diff two tagged-chunk state files."""
    try:
        tree = diff_fux(load_fux_state(base), load_fux_state(modified))
    except (MMLDiffError, OSError) as e:
        _fail(e)
    _finish(tree, base, modified, ledger)


@main.command("res")
@_base
@_modified
@_ledger
def res_cmd(base: Path, modified: Path, ledger: Path | None):
    """Diff string sets, interface colors and rects of two MacBinary files."""
    try:
        tree = diff_resources(load_resource_state(base), load_resource_state(modified))
    except (MMLDiffError, OSError) as e:
        _fail(e)
    _finish(tree, base, modified, ledger)


@main.command("str")
@_base
@_modified
@_ledger
def str_cmd(base: Path, modified: Path, ledger: Path | None):
    """Diff only the string sets of two MacBinary files."""
    try:
        tree = diff_resources(
            load_resource_state(base, require_interface=False),
            load_resource_state(modified, require_interface=False),
            strings_only=True,
        )
    except (MMLDiffError, OSError) as e:
        _fail(e)
    _finish(tree, base, modified, ledger)


def summarize_fux(data: bytes) -> dict:
    state = read_fux_state(data)
    return {
        "kind": "fux",
        "chunks": [[tag.decode("latin-1"), len(payload)] for _, tag, payload in iter_chunks(data)],
        "opaque_tags": {tag.decode("latin-1"): len(payload) for tag, payload in state.tags.items()},
    }


def summarize_res(data: bytes) -> dict:
    header = read_macbinary_header(data)
    state = read_resource_state(data, require_interface=False)
    return {
        "kind": "res",
        "filename": mac_roman_to_text(header.filename),
        "data_length": header.data_length,
        "resource_length": header.resource_length,
        "string_sets": {str(k): len(v) for k, v in state.strings.items()},
        "interface_colors": None if state.interface_colors is None else len(state.interface_colors),
        "interface_rects": None if state.interface_rects is None else len(state.interface_rects),
    }


@main.command("inspect")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--kind", type=click.Choice(["fux", "res"]), required=True)
def inspect_cmd(path: Path, kind: str):
    """Print a JSON summary of one decoded file."""
    try:
        data = path.read_bytes()
        summary = summarize_fux(data) if kind == "fux" else summarize_res(data)
    except (MMLDiffError, OSError) as e:
        _fail(e)
    click.echo(json.dumps(summary, **CANONICAL_JSON_KW))


if __name__ == "__main__":
    main()
