"""Side-channel diagnostics for differences MML cannot express."""
from __future__ import annotations

from dataclasses import dataclass
from warnings import warn

import click


class UnsupportedFeatureWarning(UserWarning):
    pass


@dataclass(frozen=True)
class Diagnostic:
    code: str
    message: str
    tag: bytes | None = None


def emit(diagnostics) -> None:
    for d in diagnostics:
        warn(d.message, UnsupportedFeatureWarning, stacklevel=2)


def show_one_line(message, category, filename, lineno, file=None, line=None) -> None:
    """``warnings.showwarning`` replacement: the bare message on stderr."""
    click.echo(str(message), err=True)
