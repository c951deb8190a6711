from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from talentlens.core.text_processing import fold, normalize, shared_words, significant_words
from talentlens.models import BadgeKind, Candidate, Location


def clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)


# Partial credit for substring containment, per dimension.
ROLE_SUBSTRING_CREDIT = 0.8
INDUSTRY_SUBSTRING_CREDIT = 0.7
PHRASE_SUBSTRING_CREDIT = 0.75

# Scale applied to the word-overlap fraction (rule 3 never beats rule 2).
ROLE_WORD_CREDIT = 0.6
INDUSTRY_WORD_CREDIT = 0.5
PHRASE_WORD_CREDIT = 0.6

OVERQUALIFIED_CREDIT = 0.6
STARTUP_HINT_CREDIT = 0.5
MAX_CREDITED_BADGES = 3

_STARTUP_HINTS = ("startup", "early stage")


# ---------------------------------------------------------------------------
# Phrase primitives
# ---------------------------------------------------------------------------

def contains_either(a: str, b: str) -> bool:
    fa, fb = fold(a), fold(b)
    if not fa or not fb:
        return False
    return fa in fb or fb in fa


def word_overlap_fraction(requested: str, candidate_value: str) -> float:
    """Share of the requested phrase's significant words found in the candidate phrase."""
    req = normalize(requested)
    if not req:
        return 0.0
    hits = shared_words(req, normalize(candidate_value))
    return len(hits) / len(req)


def phrase_credit(
        requested: str,
        candidate_value: str,
        *,
        substring_credit: float = PHRASE_SUBSTRING_CREDIT,
        word_credit: float = PHRASE_WORD_CREDIT,
) -> float:
    """
    Matching rules, first hit wins:
      1) exact (case-insensitive)  -> 1.0
      2) substring either way      -> substring_credit
      3) word-level overlap        -> fraction * word_credit
      4) nothing                   -> 0.0
    """
    fr, fc = fold(requested), fold(candidate_value)
    if not fr or not fc:
        return 0.0
    if fr == fc:
        return 1.0
    if fr in fc or fc in fr:
        return substring_credit
    return clamp01(word_overlap_fraction(fr, fc) * word_credit)


def best_phrase_credit(requested: str, candidate_values: Iterable[str], **kwargs) -> float:
    best = 0.0
    for value in candidate_values:
        best = max(best, phrase_credit(requested, value, **kwargs))
        if best >= 1.0:
            break
    return best


def phrase_set_credit(requested: Sequence[str], candidate_values: Sequence[str]) -> float:
    """Mean over requested phrases of the best credit each earns against the candidate."""
    if not requested:
        return 0.0
    total = sum(best_phrase_credit(r, candidate_values) for r in requested)
    return clamp01(total / len(requested))


# ---------------------------------------------------------------------------
# Scoring credits (0..1)
# ---------------------------------------------------------------------------

def role_title_credit(role_title: str, candidate: Candidate) -> float:
    return phrase_credit(
        role_title,
        candidate.title,
        substring_credit=ROLE_SUBSTRING_CREDIT,
        word_credit=ROLE_WORD_CREDIT,
    )


def industry_credit(industry: str, candidate: Candidate) -> float:
    return best_phrase_credit(
        industry,
        candidate.industries,
        substring_credit=INDUSTRY_SUBSTRING_CREDIT,
        word_credit=INDUSTRY_WORD_CREDIT,
    )


def skill_matches_label(skill: str, label: str) -> bool:
    return contains_either(skill, label)


def skill_overlap_fraction(required: Sequence[str], candidate: Candidate) -> float:
    """|matched required skills| / |required skills| over technical + soft labels."""
    if not required:
        return 0.0
    labels = candidate.skills.labels()
    matched = sum(1 for s in required if any(skill_matches_label(s, lb) for lb in labels))
    return matched / len(required)


def experience_band_credit(band: Tuple[int, Optional[int]], years: int) -> float:
    """1.0 inside the half-open [min, max) band, 0.0 below it, partial credit above it."""
    lo, hi = band
    if years < lo:
        return 0.0
    if hi is None or years < hi:
        return 1.0
    return OVERQUALIFIED_CREDIT


def _mentions_startup(candidate: Candidate) -> bool:
    texts = [fold(a) for a in candidate.achievements] + [fold(candidate.about)]
    return any(hint in t for t in texts for hint in _STARTUP_HINTS)


def company_stage_credit(stage: str, candidate: Candidate) -> float:
    credit = best_phrase_credit(stage, candidate.company_stage_history)
    if credit == 0.0 and _mentions_startup(candidate):
        return STARTUP_HINT_CREDIT
    return credit


def milestone_credit(milestones: Sequence[str], candidate: Candidate) -> float:
    return phrase_set_credit(milestones, candidate.achievements)


def accomplishment_credit(accomplishments: Sequence[str], candidate: Candidate) -> float:
    return phrase_set_credit(accomplishments, candidate.achievements)


def cultural_value_credit(values: Sequence[str], candidate: Candidate) -> float:
    return phrase_set_credit(values, candidate.cultural_values)


def profile_words(candidate: Candidate) -> List[str]:
    """Significant words of everything a hiring narrative could plausibly hit."""
    parts = [candidate.name, candidate.title, candidate.about]
    parts.extend(candidate.achievements)
    parts.extend(candidate.work_history)
    parts.extend(candidate.skills.labels())
    parts.extend(candidate.industries)
    words: List[str] = []
    for p in parts:
        words.extend(normalize(p))
    return words


def goal_keyword_credit(terms: Sequence[str], candidate: Candidate) -> float:
    if not terms:
        return 0.0
    hits = shared_words(terms, set(profile_words(candidate)))
    return len(hits) / len(terms)


def badge_credit(candidate: Candidate) -> float:
    return min(MAX_CREDITED_BADGES, len(candidate.verification_badges)) / MAX_CREDITED_BADGES


# ---------------------------------------------------------------------------
# Filter predicates
# ---------------------------------------------------------------------------

def title_exact(role_title: str, candidate: Candidate) -> bool:
    return fold(candidate.title) == fold(role_title)


def title_contains(role_title: str, candidate: Candidate) -> bool:
    return contains_either(role_title, candidate.title)


def title_shares_word(role_title: str, candidate: Candidate) -> bool:
    role_words = normalize(role_title)
    return bool(role_words) and bool(shared_words(role_words, significant_words(candidate.title)))


def industry_matches(industry: str, candidate: Candidate) -> bool:
    return any(contains_either(industry, i) for i in candidate.industries)


def any_skill_matches(skills: Sequence[str], candidate: Candidate) -> bool:
    labels = candidate.skills.labels()
    return any(skill_matches_label(s, lb) for s in skills for lb in labels)


def stage_matches(stage: str, candidate: Candidate) -> bool:
    return any(contains_either(stage, s) for s in candidate.company_stage_history)


def has_badges(required: Iterable[BadgeKind], candidate: Candidate) -> bool:
    held = set(candidate.verification_badges)
    return all(BadgeKind(b) in held for b in required)


def location_matches(
        location: Location,
        *,
        cities: Optional[Sequence[str]] = None,
        remote_only: Optional[bool] = None,
) -> bool:
    if remote_only and not location.remote:
        return False
    if cities and not any(contains_either(c, location.city) for c in cities):
        return False
    return True
