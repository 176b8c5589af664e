"""
Error taxonomy for the BBS engine.

Every error carries the index and member of the bar group that failed so a
host can point the user at the offending row. All of them are ValueErrors:
the engine is a pure function and the only way it fails is bad input.
"""
from typing import Optional


class BBSError(ValueError):
    """Base class for all BBS computation failures."""

    def __init__(
        self,
        message: str,
        item_index: Optional[int] = None,
        member_id: Optional[str] = None,
        field: Optional[str] = None,
    ):
        self.item_index = item_index
        self.member_id = member_id
        self.field = field
        super().__init__(self._format(message))

    def _format(self, message: str) -> str:
        where = []
        if self.item_index is not None:
            where.append(f"item {self.item_index + 1}")
        if self.member_id:
            where.append(f"member '{self.member_id}'")
        if self.field:
            where.append(f"field '{self.field}'")
        if not where:
            return message
        return f"{', '.join(where)}: {message}"


class ValidationError(BBSError):
    """Missing or invalid required field on a bar group."""


class InvalidUnitError(BBSError):
    """Non-finite or negative numeric input."""


class InvalidGeometryError(BBSError):
    """Resolved cutting length is zero or negative."""


class UnknownMixOrCodeError(BBSError):
    """Unsupported design code."""
