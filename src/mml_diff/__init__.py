"""mmldiff - diff engine, change tree and MML emission."""
from .engine import diff_fux
from .markup import render_markup, write_markup
from .resources import diff_resources
from .tree import ChangeNode, ChangeTree

__all__ = ["ChangeNode", "ChangeTree", "diff_fux", "diff_resources", "render_markup", "write_markup"]
