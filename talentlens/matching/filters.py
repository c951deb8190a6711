from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from talentlens.core.logger import get_logger
from talentlens.matching import fields
from talentlens.matching.keywords import context_skill_tags
from talentlens.matching.types import FilterOutcome, StageReport, StageResult
from talentlens.models import Candidate, SearchCriteria, years_in_band

logger = get_logger(__name__)

Predicate = Callable[[Candidate], bool]
Stage = Callable[[List[Candidate], SearchCriteria], StageResult]


def _matches(predicate: Predicate, candidate: Candidate) -> bool:
    try:
        return bool(predicate(candidate))
    except Exception:
        logger.exception(
            "Filter predicate failed for candidate %s; treated as no match",
            getattr(candidate, "id", "<unknown>"),
        )
        return False


def _apply(survivors: List[Candidate], predicates: Sequence[Predicate]) -> StageResult:
    """
    Try each predicate in turn and keep the first non-empty result.
    If every predicate would empty the set, the stage is relaxed (skipped).
    """
    for predicate in predicates:
        matches = [c for c in survivors if _matches(predicate, c)]
        if matches:
            return StageResult(survivors=matches, constraining=True)
    return StageResult(survivors=list(survivors), constraining=True, relaxed=bool(survivors))


def _unconstrained(survivors: List[Candidate]) -> StageResult:
    return StageResult(survivors=list(survivors), constraining=False)


def role_title_stage(survivors: List[Candidate], criteria: SearchCriteria) -> StageResult:
    role = criteria.role_title
    if not role:
        return _unconstrained(survivors)
    return _apply(
        survivors,
        [
            lambda c: fields.title_exact(role, c),
            lambda c: fields.title_contains(role, c),
            lambda c: fields.title_shares_word(role, c),
        ],
    )


def industry_stage(survivors: List[Candidate], criteria: SearchCriteria) -> StageResult:
    industry = criteria.industry
    if not industry:
        return _unconstrained(survivors)
    return _apply(survivors, [lambda c: fields.industry_matches(industry, c)])


def requested_skill_labels(criteria: SearchCriteria) -> List[str]:
    """Explicit skills followed by the pseudo-skills lifted from the hiring narrative."""
    labels: List[str] = list(criteria.skills or ())
    seen = {s.lower() for s in labels}
    for tag in context_skill_tags(criteria.free_text_context):
        if tag.label.lower() not in seen:
            labels.append(tag.label)
            seen.add(tag.label.lower())
    return labels


def skills_stage(survivors: List[Candidate], criteria: SearchCriteria) -> StageResult:
    labels = requested_skill_labels(criteria)
    if not labels:
        return _unconstrained(survivors)
    # Lenient OR: one matching skill is enough.
    return _apply(survivors, [lambda c: fields.any_skill_matches(labels, c)])


def experience_stage(survivors: List[Candidate], criteria: SearchCriteria) -> StageResult:
    band = criteria.experience_band()
    if band is None:
        return _unconstrained(survivors)
    return _apply(survivors, [lambda c: years_in_band(c.experience_years, band)])


def company_stage_stage(survivors: List[Candidate], criteria: SearchCriteria) -> StageResult:
    stage = criteria.company_stage
    if not stage:
        return _unconstrained(survivors)
    return _apply(survivors, [lambda c: fields.stage_matches(stage, c)])


def verification_stage(survivors: List[Candidate], criteria: SearchCriteria) -> StageResult:
    required = criteria.required_badges
    if not required:
        return _unconstrained(survivors)
    return _apply(survivors, [lambda c: fields.has_badges(required, c)])


def location_stage(survivors: List[Candidate], criteria: SearchCriteria) -> StageResult:
    if not criteria.cities and not criteria.remote_only:
        return _unconstrained(survivors)
    return _apply(
        survivors,
        [
            lambda c: fields.location_matches(
                c.location, cities=criteria.cities, remote_only=criteria.remote_only
            )
        ],
    )


# Fixed order; each stage sees only the survivors of the previous one.
STAGES: Tuple[Tuple[str, Stage], ...] = (
    ("role_title", role_title_stage),
    ("industry", industry_stage),
    ("skills", skills_stage),
    ("experience", experience_stage),
    ("company_stage", company_stage_stage),
    ("verification", verification_stage),
    ("location", location_stage),
)


def _fallback_to_full_pool(
        pool: List[Candidate],
        survivors: List[Candidate],
        reports: List[StageReport],
) -> Tuple[List[Candidate], bool]:
    """
    Terminal step: never hand back an empty result when data exists and
    something was actually filtering. Reset to the untouched pool instead.
    """
    if survivors or not pool or not any(r.constraining for r in reports):
        return survivors, False
    logger.warning(
        "Filters too strict: no candidates survived %d constraining stage(s); returning all %d candidates",
        sum(1 for r in reports if r.constraining),
        len(pool),
    )
    return list(pool), True


def filter_pool(
        pool: Sequence[Candidate],
        criteria: SearchCriteria,
        *,
        stages: Optional[Sequence[Tuple[str, Stage]]] = None,
) -> FilterOutcome:
    original = list(pool)
    survivors = list(original)
    reports: List[StageReport] = []

    for name, stage in (STAGES if stages is None else stages):
        before = len(survivors)
        result = stage(survivors, criteria)
        survivors = result.survivors
        reports.append(
            StageReport(
                name=name,
                constraining=result.constraining,
                relaxed=result.relaxed,
                before=before,
                after=len(survivors),
            )
        )
        if result.relaxed:
            logger.info("Filter stage %s matched nothing; skipped", name)
        else:
            logger.debug("After %s filter: %d", name, len(survivors))

    survivors, fell_back = _fallback_to_full_pool(original, survivors, reports)
    return FilterOutcome(candidates=survivors, reports=reports, fell_back=fell_back)


def filter_candidates(pool: Sequence[Candidate], criteria: SearchCriteria) -> List[Candidate]:
    """Filtered pool only; see filter_pool() for the per-stage report."""
    return filter_pool(pool, criteria).candidates
