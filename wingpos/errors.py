"""Error types raised by the point-of-sale core."""

from __future__ import annotations


class PosError(Exception):
    """Base class for wingpos errors."""


class ValidationError(PosError, ValueError):
    """A precondition failed; nothing was changed."""


class NotFoundError(PosError, LookupError):
    """An unknown id was referenced; nothing was changed."""

    def __init__(self, kind: str, item_id: str) -> None:
        super().__init__(f"{kind} '{item_id}' not found.")
        self.kind = kind
        self.item_id = item_id


class AdvisoryServiceError(PosError, RuntimeError):
    """An advisory (AI) call failed. Never escapes the advisory client."""
