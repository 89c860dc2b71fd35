"""
core/errors.py — Exceptions raised by StatClash.
"""

from __future__ import annotations


class FetchError(Exception):
    """Raised when the creature lookup service cannot produce a record.

    Covers transport failures, timeouts, non-200 responses and malformed
    payloads. Always transient from the game's point of view: the round
    loader retries, then stalls for a manual retry.

    Attributes:
        creature_id: The identifier that was requested, if known.
        status:      HTTP status code, if the service answered.
    """

    def __init__(
        self,
        message: str,
        creature_id: int | None = None,
        status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.creature_id = creature_id
        self.status = status
