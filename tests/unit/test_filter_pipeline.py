from __future__ import annotations

import pytest

from talentlens.matching.filters import (
    STAGES,
    filter_candidates,
    filter_pool,
    requested_skill_labels,
)
from talentlens.matching.types import StageResult
from talentlens.models import BadgeKind, ExperienceLevel, SearchCriteria


def _ids(candidates) -> list:
    return [c.id for c in candidates]


def test_no_criteria_keeps_the_whole_pool_in_order(pool) -> None:
    outcome = filter_pool(pool, SearchCriteria())
    assert _ids(outcome.candidates) == ["c1", "c2", "c3", "4", "c5"]
    assert not any(r.constraining for r in outcome.reports)
    assert outcome.fell_back is False


def test_stage_order_is_fixed() -> None:
    assert [name for name, _ in STAGES] == [
        "role_title",
        "industry",
        "skills",
        "experience",
        "company_stage",
        "verification",
        "location",
    ]


def test_role_title_cascade_exact_then_substring_then_word(pool) -> None:
    assert _ids(filter_candidates(pool, SearchCriteria(role_title="Frontend Engineer"))) == ["c1"]
    assert _ids(filter_candidates(pool, SearchCriteria(role_title="frontend"))) == ["c1", "c3"]
    assert _ids(filter_candidates(pool, SearchCriteria(role_title="Frontend Developer"))) == [
        "c1",
        "c2",
        "c3",
    ]


def test_unmatched_industry_is_relaxed_not_emptied(pool) -> None:
    outcome = filter_pool(pool, SearchCriteria(industry="Quantum Computing"))
    assert len(outcome.candidates) == 5
    assert outcome.relaxed_stages == ("industry",)
    assert outcome.fell_back is False


def test_skills_use_or_semantics(pool) -> None:
    got = filter_candidates(pool, SearchCriteria(skills=["Python", "Figma"]))
    assert _ids(got) == ["c2", "4", "c5"]


def test_one_of_three_requested_skills_is_enough(pool) -> None:
    got = filter_candidates(pool, SearchCriteria(skills=["Python", "Rust", "Haskell"]))
    assert _ids(got) == ["c2", "4"]


def test_context_keywords_act_as_pseudo_skills(pool) -> None:
    criteria = SearchCriteria(free_text_context="Looking for Python talent")
    assert requested_skill_labels(criteria) == ["looking", "python", "talent"]
    assert _ids(filter_candidates(pool, criteria)) == ["c2", "4"]


def test_explicit_skills_come_before_context_keywords() -> None:
    criteria = SearchCriteria(skills=["Python"], free_text_context="python python django")
    assert requested_skill_labels(criteria) == ["Python", "django"]


@pytest.mark.parametrize(
    "level, expected",
    [
        (ExperienceLevel.ENTRY, ["4"]),
        (ExperienceLevel.MID, ["c2", "c5"]),
        (ExperienceLevel.SENIOR, ["c1"]),
        (ExperienceLevel.LEAD, ["c3"]),
    ],
)
def test_experience_band_filter(pool, level, expected) -> None:
    assert _ids(filter_candidates(pool, SearchCriteria(experience_level=level))) == expected


def test_explicit_year_range_narrows_inside_the_lead_band(pool) -> None:
    # c3 has 9 years: lead, but short of twelve
    assert _ids(filter_candidates(pool, SearchCriteria(min_years=5))) == ["c1", "c3"]
    criteria = SearchCriteria(experience_level=ExperienceLevel.LEAD, min_years=12)
    outcome = filter_pool(pool, criteria)
    assert outcome.relaxed_stages == ("experience",)


def test_twelve_plus_label_keeps_only_twelve_plus_years() -> None:
    from talentlens.io.pool_loader import candidates_from_payload
    from talentlens.io.schemas import criteria_from_dict

    pool = candidates_from_payload(
        [
            {"id": "nine", "title": "Lead Engineer", "experienceYears": 9},
            {"id": "thirteen", "title": "Principal Engineer", "experienceYears": 13},
        ]
    ).candidates
    twelve_plus = criteria_from_dict({"experienceLevel": "12-plus-years"})
    eight_to_twelve = criteria_from_dict({"experienceLevel": "8-12-years"})

    assert _ids(filter_candidates(pool, twelve_plus)) == ["thirteen"]
    assert _ids(filter_candidates(pool, eight_to_twelve)) == ["nine"]


def test_company_stage_filter(pool) -> None:
    assert _ids(filter_candidates(pool, SearchCriteria(company_stage="Series A"))) == ["c1", "c5"]


def test_verification_filter_requires_every_badge(pool) -> None:
    criteria = SearchCriteria(required_badges=[BadgeKind.SKILL, BadgeKind.IDENTITY])
    assert _ids(filter_candidates(pool, criteria)) == ["c1", "c3"]


def test_location_filter(pool) -> None:
    assert _ids(filter_candidates(pool, SearchCriteria(remote_only=True))) == ["c1", "c3"]
    assert _ids(filter_candidates(pool, SearchCriteria(cities=["Berlin"]))) == ["c2"]


def test_stages_narrow_cumulatively(pool) -> None:
    criteria = SearchCriteria(industry="FinTech", experience_level=ExperienceLevel.LEAD)
    outcome = filter_pool(pool, criteria)
    assert _ids(outcome.candidates) == ["c3"]
    reports = {r.name: r for r in outcome.reports}
    assert (reports["industry"].before, reports["industry"].after) == (5, 2)
    assert (reports["experience"].before, reports["experience"].after) == (2, 1)


def test_later_stage_relaxes_against_survivors_only(pool) -> None:
    # only c1 survives the role stage; it is not in Berlin, so location relaxes
    criteria = SearchCriteria(role_title="Frontend Engineer", cities=["Berlin"])
    outcome = filter_pool(pool, criteria)
    assert _ids(outcome.candidates) == ["c1"]
    assert outcome.relaxed_stages == ("location",)


@pytest.mark.parametrize(
    "criteria",
    [
        SearchCriteria(role_title="Astronaut", industry="Quantum Computing", skills=["COBOL"]),
        SearchCriteria(company_stage="IPO", cities=["Tokyo"], remote_only=True),
        SearchCriteria(experience_level=ExperienceLevel.LEAD, required_badges=["roleplay"]),
        SearchCriteria(free_text_context="zzzz qqqq"),
    ],
)
def test_non_empty_pool_never_filters_to_empty(pool, criteria) -> None:
    assert filter_candidates(pool, criteria)


def test_empty_pool_stays_empty() -> None:
    outcome = filter_pool([], SearchCriteria(role_title="Engineer"))
    assert outcome.candidates == []
    assert outcome.fell_back is False
    assert outcome.relaxed_stages == ()


def test_fallback_to_full_pool_when_a_stage_empties_the_set(pool, caplog) -> None:
    def drop_everyone(survivors, criteria):
        return StageResult(survivors=[], constraining=True)

    outcome = filter_pool(pool, SearchCriteria(), stages=[("custom", drop_everyone)])

    assert outcome.fell_back is True
    assert _ids(outcome.candidates) == ["c1", "c2", "c3", "4", "c5"]
    assert "Filters too strict" in caplog.text


def test_failing_predicate_is_treated_as_no_match(pool) -> None:
    broken = pool[0]
    object.__setattr__(broken, "industries", None)
    got = filter_candidates(pool, SearchCriteria(industry="HealthTech"))
    assert _ids(got) == ["c2", "4"]
