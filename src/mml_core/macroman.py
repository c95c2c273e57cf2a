"""Mac OS Roman text conversion."""
from __future__ import annotations

from types import MappingProxyType

# Built once from the codec; shared read-only by every caller.
MAC_ROMAN_TO_UNICODE = tuple(bytes([b]).decode("mac_roman") for b in range(256))
UNICODE_TO_MAC_ROMAN = MappingProxyType({ch: b for b, ch in enumerate(MAC_ROMAN_TO_UNICODE)})

REPLACEMENT = ord("?")


def mac_roman_to_text(raw: bytes) -> str:
    return "".join(MAC_ROMAN_TO_UNICODE[b] for b in raw)


def text_to_mac_roman(text: str) -> bytes:
    return bytes(UNICODE_TO_MAC_ROMAN.get(ch, REPLACEMENT) for ch in text)
