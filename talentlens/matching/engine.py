from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from talentlens import config
from talentlens.core.logger import get_logger
from talentlens.matching.filters import filter_pool
from talentlens.matching.ranking import paginate, parse_sort_key, rank, validate_paging
from talentlens.matching.scoring import ScoreCalculator
from talentlens.matching.types import RankedResult, ScoredCandidate, SortKey
from talentlens.models import Candidate, SearchCriteria

logger = get_logger(__name__)


def score_pool(
        pool: Sequence[Candidate],
        criteria: SearchCriteria,
        *,
        workers: Optional[int] = None,
) -> List[ScoredCandidate]:
    """
    Score every candidate independently. With workers > 1 a thread pool is used;
    executor.map keeps input order, and rank() re-sorts deterministically anyway.
    """
    calculator = ScoreCalculator(criteria)
    n_workers = config.SCORING_WORKERS if workers is None else max(1, workers)
    if n_workers <= 1 or len(pool) < 2:
        return [calculator.score_candidate(c) for c in pool]
    with ThreadPoolExecutor(max_workers=n_workers) as executor:
        return list(executor.map(calculator.score_candidate, pool))


def search(
        pool: Iterable[Candidate],
        criteria: Optional[SearchCriteria] = None,
        page: int = 1,
        page_size: Optional[int] = None,
        *,
        sort_by: SortKey = SortKey.SCORE,
) -> RankedResult:
    """
    filter -> score -> rank -> paginate.

    Paging arguments are checked before any work is done. An empty pool is
    not an error: it yields an empty page with total_count == 0.
    """
    size = config.DEFAULT_PAGE_SIZE if page_size is None else page_size
    validate_paging(page, size)
    sort_key = parse_sort_key(sort_by)
    criteria = criteria or SearchCriteria()
    pool = list(pool)

    outcome = filter_pool(pool, criteria)
    scored = score_pool(outcome.candidates, criteria)
    ranked = rank(scored, sort_by=sort_key)
    result = paginate(ranked, page, size)

    if result.degraded_count:
        logger.warning(
            "%d candidate(s) could not be scored and received the neutral score",
            result.degraded_count,
        )
    logger.info(
        "search: pool=%d filtered=%d page=%d/%d",
        len(pool),
        len(outcome.candidates),
        page,
        result.total_pages,
    )
    return replace(result, relaxed_stages=outcome.relaxed_stages, fell_back=outcome.fell_back)
