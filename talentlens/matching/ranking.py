from __future__ import annotations

from typing import Callable, Dict, List, Sequence

from talentlens.errors import InvalidArgumentError
from talentlens.matching.types import RankedResult, ScoredCandidate, SortKey

_SORT_KEYS: Dict[SortKey, Callable[[ScoredCandidate], int]] = {
    SortKey.SCORE: lambda s: s.score,
    SortKey.EXPERIENCE: lambda s: s.candidate.experience_years,
    SortKey.VERIFICATION: lambda s: len(s.candidate.verification_badges),
}


def rank(scored: Sequence[ScoredCandidate], sort_by: SortKey = SortKey.SCORE) -> List[ScoredCandidate]:
    """
    Descending by the chosen key. sorted() is stable (also with reverse=True),
    so equal keys keep the pool's relative order and repeated calls agree.
    """
    key = _SORT_KEYS[parse_sort_key(sort_by)]
    return sorted(scored, key=key, reverse=True)


def parse_sort_key(sort_by) -> SortKey:
    try:
        return SortKey(sort_by)
    except ValueError:
        choices = ", ".join(k.value for k in SortKey)
        raise InvalidArgumentError(f"sort_by must be one of: {choices}; got {sort_by!r}") from None


def validate_paging(page: int, page_size: int) -> None:
    if isinstance(page, bool) or not isinstance(page, int) or page < 1:
        raise InvalidArgumentError(f"page must be an integer >= 1, got {page!r}")
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
        raise InvalidArgumentError(f"page_size must be an integer > 0, got {page_size!r}")


def paginate(ranked: Sequence[ScoredCandidate], page: int, page_size: int) -> RankedResult:
    """1-indexed slice. A page past the end is empty, not an error."""
    validate_paging(page, page_size)
    start = (page - 1) * page_size
    return RankedResult(
        items=list(ranked[start:start + page_size]),
        page=page,
        page_size=page_size,
        total_count=len(ranked),
        degraded_count=sum(1 for s in ranked if s.degraded),
    )
