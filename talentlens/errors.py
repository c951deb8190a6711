from __future__ import annotations

from typing import Optional


class TalentLensError(Exception):
    """Base class for errors raised by TalentLens."""


class InvalidArgumentError(TalentLensError, ValueError):
    """Raised before any computation when the caller passes bad paging arguments."""


class PartialDataError(TalentLensError):
    """
    A single malformed candidate record.

    Never escapes search(): the loader skips the record and reports it,
    the scorer degrades the candidate to the neutral score.
    """

    def __init__(self, reason: str, *, candidate_id: Optional[str] = None) -> None:
        self.candidate_id = candidate_id
        self.reason = reason
        label = candidate_id if candidate_id is not None else "<unknown>"
        super().__init__(f"candidate {label}: {reason}")
