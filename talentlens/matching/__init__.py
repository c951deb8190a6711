from .engine import score_pool, search
from .filters import filter_candidates, filter_pool
from .keywords import context_skill_tags, extract_keywords
from .ranking import paginate, rank
from .scoring import ScoreCalculator, score, score_candidate
from .types import FilterOutcome, MatchBreakdown, RankedResult, ScoredCandidate, SortKey

__all__ = [
    "search",
    "score_pool",
    "filter_pool",
    "filter_candidates",
    "extract_keywords",
    "context_skill_tags",
    "rank",
    "paginate",
    "score",
    "score_candidate",
    "ScoreCalculator",
    "FilterOutcome",
    "MatchBreakdown",
    "RankedResult",
    "ScoredCandidate",
    "SortKey",
]
