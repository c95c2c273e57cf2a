"""mmldiff core - shared byte layout, records and errors."""
from .errors import ContractViolation, FormatError, MMLDiffError, SchemaMismatch, TruncatedInput
from .layout import Cursor, channel, decode, encode, fixed, width
from .macroman import mac_roman_to_text, text_to_mac_roman

__all__ = [
    "ContractViolation",
    "FormatError",
    "MMLDiffError",
    "SchemaMismatch",
    "TruncatedInput",
    "Cursor",
    "channel",
    "decode",
    "encode",
    "fixed",
    "width",
    "mac_roman_to_text",
    "text_to_mac_roman",
]
