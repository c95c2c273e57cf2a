"""Error taxonomy shared by the readers and the diff engine."""
from __future__ import annotations

ERRORS = {
    "E_TRUNCATED": "Input ended before a field could be read",
    "E_FORMAT": "Container structure, magic, checksum or count invalid",
    "E_SCHEMA": "Decoded value violates a closed-set or length contract",
    "E_CONTRACT": "Base and modified snapshots are not comparable",
}


class MMLDiffError(Exception):
    code = "E_UNKNOWN"

    def describe(self) -> str:
        return f"[{self.code}] {ERRORS.get(self.code, 'Error')}: {self}"


class TruncatedInput(MMLDiffError):
    """A read needed more bytes than remained."""

    code = "E_TRUNCATED"

    def __init__(self, offset: int, needed: int, available: int):
        super().__init__(
            f"needed {needed} bytes at offset {offset}, only {max(available, 0)} available"
        )
        self.offset = offset
        self.needed = needed
        self.available = available


class FormatError(MMLDiffError):
    code = "E_FORMAT"


class SchemaMismatch(MMLDiffError):
    code = "E_SCHEMA"


class ContractViolation(MMLDiffError):
    code = "E_CONTRACT"
