from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, List, Optional, Tuple

from talentlens import config
from talentlens.core.logger import get_logger
from talentlens.core.text_processing import normalize
from talentlens.matching import fields
from talentlens.matching.keywords import extract_keywords
from talentlens.matching.types import MatchBreakdown, ScoredCandidate
from talentlens.models import Candidate, FieldKind, SearchCriteria

logger = get_logger(__name__)

# Bucket -> (bucket weight, {sub-factor: raw weight}).
# Raw weights are renormalized so each bucket sums to its bucket weight.
WEIGHT_TABLE: Dict[str, Tuple[float, Dict[FieldKind, float]]] = {
    "hiring_context": (
        50.0,
        {
            FieldKind.GOAL: 15.0,
            FieldKind.COMPANY_STAGE: 10.0,
            FieldKind.MILESTONES: 10.0,
            FieldKind.ACCOMPLISHMENTS: 10.0,
            FieldKind.CULTURAL_VALUES: 15.0,
        },
    ),
    "skills_experience": (
        30.0,
        {
            FieldKind.ROLE_TITLE: 10.0,
            FieldKind.SKILLS: 15.0,
            FieldKind.EXPERIENCE: 5.0,
        },
    ),
    "culture_trust": (
        20.0,
        {
            FieldKind.INDUSTRY: 10.0,
            FieldKind.VERIFICATION: 10.0,
        },
    ),
}


def _effective_weights() -> Dict[FieldKind, float]:
    out: Dict[FieldKind, float] = {}
    for bucket_weight, subs in WEIGHT_TABLE.values():
        raw_total = sum(subs.values())
        for kind, raw in subs.items():
            out[kind] = bucket_weight * raw / raw_total
    return out


EFFECTIVE_WEIGHTS: Dict[FieldKind, float] = _effective_weights()

# Sub-factors at or above this credit are reported in matched_fields.
MATCHED_THRESHOLD = 0.5


def goal_terms(criteria: SearchCriteria, *, max_keywords: Optional[int] = None) -> List[str]:
    """Goal words followed by context keywords, de-duplicated, first-seen order."""
    limit = config.CONTEXT_KEYWORD_LIMIT if max_keywords is None else max_keywords
    terms: List[str] = []
    for t in normalize(criteria.goal) + extract_keywords(criteria.free_text_context, limit):
        if t not in terms:
            terms.append(t)
    return terms


CreditFn = Callable[[Candidate], float]


def _credit_functions(criteria: SearchCriteria) -> Dict[FieldKind, CreditFn]:
    """One credit function per dimension the caller actually populated."""
    fns: Dict[FieldKind, CreditFn] = {}

    terms = goal_terms(criteria)
    if terms:
        fns[FieldKind.GOAL] = lambda c: fields.goal_keyword_credit(terms, c)
    if criteria.company_stage:
        fns[FieldKind.COMPANY_STAGE] = lambda c: fields.company_stage_credit(criteria.company_stage, c)
    if criteria.milestones:
        fns[FieldKind.MILESTONES] = lambda c: fields.milestone_credit(criteria.milestones, c)
    if criteria.accomplishments:
        fns[FieldKind.ACCOMPLISHMENTS] = lambda c: fields.accomplishment_credit(criteria.accomplishments, c)
    if criteria.cultural_values:
        fns[FieldKind.CULTURAL_VALUES] = lambda c: fields.cultural_value_credit(criteria.cultural_values, c)

    if criteria.role_title:
        fns[FieldKind.ROLE_TITLE] = lambda c: fields.role_title_credit(criteria.role_title, c)
    if criteria.skills:
        fns[FieldKind.SKILLS] = lambda c: fields.skill_overlap_fraction(criteria.skills, c)
    band = criteria.experience_band()
    if band is not None:
        fns[FieldKind.EXPERIENCE] = lambda c: fields.experience_band_credit(band, c.experience_years)

    if criteria.industry:
        fns[FieldKind.INDUSTRY] = lambda c: fields.industry_credit(criteria.industry, c)

    # Trust is not something the caller supplies; it only counts alongside a real query.
    if fns:
        fns[FieldKind.VERIFICATION] = fields.badge_credit
    return fns


def round_half_up(x: float) -> int:
    return int(Decimal(str(x)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def final_score(total: float, max_possible: float) -> int:
    if max_possible <= 0:
        return config.NEUTRAL_SCORE
    raw = config.SCORE_FLOOR + (config.SCORE_CEILING - config.SCORE_FLOOR) * total / max_possible
    raw = max(float(config.SCORE_FLOOR), min(float(config.SCORE_CEILING), raw))
    return round_half_up(raw)


def _evaluate(candidate: Candidate, fns: Dict[FieldKind, CreditFn]) -> ScoredCandidate:
    credits: Dict[str, float] = {}
    weights: Dict[str, float] = {}
    matched = set()
    total = 0.0
    max_possible = 0.0

    for kind, fn in fns.items():
        credit = fields.clamp01(float(fn(candidate)))
        weight = EFFECTIVE_WEIGHTS[kind]
        credits[kind.value] = credit
        weights[kind.value] = weight
        total += credit * weight
        max_possible += weight
        if credit >= MATCHED_THRESHOLD:
            matched.add(kind)

    return ScoredCandidate(
        candidate=candidate,
        score=final_score(total, max_possible),
        matched_fields=frozenset(matched),
        breakdown=MatchBreakdown(credits=credits, weights=weights, total=total, max_possible=max_possible),
    )


def _neutral(candidate: Candidate, *, degraded: bool) -> ScoredCandidate:
    return ScoredCandidate(candidate=candidate, score=config.NEUTRAL_SCORE, degraded=degraded)


class ScoreCalculator:
    """
    Multi-factor weighted scorer.

    Credit functions are built once per query, then applied per candidate.
    A failure on one candidate is logged and degrades only that candidate.
    """

    def __init__(self, criteria: SearchCriteria) -> None:
        self.criteria = criteria
        self._fns = _credit_functions(criteria)

    @property
    def populated(self) -> Tuple[FieldKind, ...]:
        return tuple(self._fns)

    def score_candidate(self, candidate: Candidate) -> ScoredCandidate:
        if not self._fns:
            return _neutral(candidate, degraded=False)
        try:
            return _evaluate(candidate, self._fns)
        except Exception:
            logger.exception(
                "Scoring failed for candidate %s; using neutral score %d",
                getattr(candidate, "id", "<unknown>"),
                config.NEUTRAL_SCORE,
            )
            return _neutral(candidate, degraded=True)


def score_candidate(candidate: Candidate, criteria: SearchCriteria) -> ScoredCandidate:
    return ScoreCalculator(criteria).score_candidate(candidate)


def score(candidate: Candidate, criteria: SearchCriteria) -> int:
    """Match score in the closed range [50, 100]; 60 when no criteria are supplied."""
    return score_candidate(candidate, criteria).score
