from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Tuple

from talentlens.models import Candidate, FieldKind


class SortKey(str, Enum):
    SCORE = "score"
    EXPERIENCE = "experience"
    VERIFICATION = "verification"


@dataclass(frozen=True)
class MatchBreakdown:
    # Credit in [0,1] per populated sub-factor, keyed by FieldKind value
    credits: Dict[str, float]
    # Effective weight per populated sub-factor (bucket weight renormalized)
    weights: Dict[str, float]
    total: float
    max_possible: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "credits": {k: round(v, 4) for k, v in self.credits.items()},
            "weights": {k: round(v, 4) for k, v in self.weights.items()},
            "total": round(self.total, 4),
            "maxPossible": round(self.max_possible, 4),
        }


EMPTY_BREAKDOWN = MatchBreakdown(credits={}, weights={}, total=0.0, max_possible=0.0)


@dataclass(frozen=True)
class ScoredCandidate:
    candidate: Candidate
    score: int
    matched_fields: FrozenSet[FieldKind] = frozenset()
    breakdown: MatchBreakdown = EMPTY_BREAKDOWN
    # True when scoring failed and the neutral default was substituted
    degraded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidate": self.candidate.to_dict(),
            "score": self.score,
            "matchedFields": sorted(f.value for f in self.matched_fields),
            "breakdown": self.breakdown.to_dict(),
            "degraded": self.degraded,
        }


@dataclass(frozen=True)
class RankedResult:
    items: List[ScoredCandidate]
    page: int
    page_size: int
    total_count: int
    degraded_count: int = 0
    relaxed_stages: Tuple[str, ...] = ()
    fell_back: bool = False

    @property
    def total_pages(self) -> int:
        if self.total_count == 0:
            return 0
        return (self.total_count + self.page_size - 1) // self.page_size

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [i.to_dict() for i in self.items],
            "page": self.page,
            "pageSize": self.page_size,
            "totalCount": self.total_count,
            "totalPages": self.total_pages,
            "degradedCount": self.degraded_count,
            "relaxedStages": list(self.relaxed_stages),
            "fellBack": self.fell_back,
        }


@dataclass(frozen=True)
class StageResult:
    survivors: List[Candidate]
    constraining: bool
    relaxed: bool = False


@dataclass(frozen=True)
class StageReport:
    name: str
    constraining: bool
    relaxed: bool
    before: int
    after: int


@dataclass(frozen=True)
class FilterOutcome:
    candidates: List[Candidate]
    reports: List[StageReport] = field(default_factory=list)
    fell_back: bool = False

    @property
    def relaxed_stages(self) -> Tuple[str, ...]:
        return tuple(r.name for r in self.reports if r.relaxed)
