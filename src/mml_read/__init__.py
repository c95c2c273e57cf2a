"""mmldiff readers - tagged-chunk state files and MacBinary resource forks."""
from .chunks import load_fux_state, read_fux_state
from .macbinary import read_macbinary_header
from .rsrc import load_resource_state, read_resource_fork, read_resource_state
from .snapshot import FuxState, ResourceState

__all__ = [
    "FuxState",
    "ResourceState",
    "load_fux_state",
    "load_resource_state",
    "read_fux_state",
    "read_macbinary_header",
    "read_resource_fork",
    "read_resource_state",
]
