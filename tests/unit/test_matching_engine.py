from __future__ import annotations

import pytest

from talentlens.errors import InvalidArgumentError
from talentlens.io.schemas import criteria_from_dict
from talentlens.matching import search
from talentlens.matching.engine import score_pool
from talentlens.matching.types import SortKey
from talentlens.models import SearchCriteria


def _ids(result) -> list:
    return [s.candidate.id for s in result.items]


def test_search_without_criteria_returns_neutral_pool_order(pool) -> None:
    result = search(pool)
    assert _ids(result) == ["c1", "c2", "c3", "4", "c5"]
    assert all(s.score == 60 for s in result.items)
    assert result.page == 1
    assert result.page_size == 9
    assert result.total_count == 5


def test_search_wizard_criteria_picks_the_exact_match(pool, load_json) -> None:
    criteria = criteria_from_dict(load_json("criteria.json"))
    result = search(pool, criteria)
    assert _ids(result) == ["c1"]
    assert result.items[0].score == 92
    assert result.relaxed_stages == ()


def test_search_relaxes_unmatched_industry(pool) -> None:
    result = search(pool, SearchCriteria(industry="Quantum Computing"))
    assert result.total_count == 5
    assert result.relaxed_stages == ("industry",)
    assert all(50 <= s.score <= 100 for s in result.items)


def test_search_ranks_skill_matches_first(pool) -> None:
    result = search(pool, SearchCriteria(skills=["React", "GraphQL"]))
    # c1 has React; c3 has both and three badges
    assert _ids(result) == ["c3", "c1"]
    assert result.items[0].score > result.items[1].score


def test_search_sort_by_experience(pool) -> None:
    result = search(pool, sort_by=SortKey.EXPERIENCE)
    assert _ids(result) == ["c3", "c1", "c5", "c2", "4"]


def test_search_paging(pool) -> None:
    result = search(pool, page=2, page_size=2)
    assert _ids(result) == ["c3", "4"]
    assert result.total_pages == 3

    past_end = search(pool, page=99999, page_size=10)
    assert past_end.items == []
    assert past_end.total_count == 5


def test_search_accepts_a_one_shot_iterable(pool) -> None:
    result = search((c for c in pool), SearchCriteria(skills=["Python"]))
    assert _ids(result) == ["c2", "4"]
    assert result.total_count == 2


def test_search_empty_pool_is_not_an_error() -> None:
    result = search([], SearchCriteria(role_title="Engineer"))
    assert result.items == []
    assert result.total_count == 0


@pytest.mark.parametrize("page, page_size", [(0, 9), (1, 0), (1, -1)])
def test_search_rejects_bad_paging_before_work(page, page_size) -> None:
    # a pool that would blow up if iterated proves validation runs first
    class Exploding:
        def __iter__(self):
            raise AssertionError("pool was touched")

        def __len__(self):
            raise AssertionError("pool was touched")

    with pytest.raises(InvalidArgumentError):
        search(Exploding(), SearchCriteria(), page=page, page_size=page_size)


def test_search_rejects_unknown_sort_key(pool) -> None:
    with pytest.raises(InvalidArgumentError):
        search(pool, sort_by="salary")


def test_search_degrades_a_malformed_candidate(pool) -> None:
    broken = pool[1]
    object.__setattr__(broken, "achievements", None)

    result = search(pool, SearchCriteria(milestones=["Launched payments dashboard"]))

    assert result.total_count == 5
    assert result.degraded_count == 1
    degraded = [s for s in result.items if s.degraded]
    assert [s.candidate.id for s in degraded] == ["c2"]
    assert degraded[0].score == 60


def test_parallel_scoring_matches_sequential(pool, load_json) -> None:
    criteria = criteria_from_dict(load_json("criteria.json"))
    sequential = score_pool(pool, criteria, workers=1)
    parallel = score_pool(pool, criteria, workers=4)
    assert [(s.candidate.id, s.score) for s in parallel] == [
        (s.candidate.id, s.score) for s in sequential
    ]


def test_search_is_deterministic(pool, load_json) -> None:
    criteria = criteria_from_dict(load_json("criteria.json"))
    first = search(pool, criteria).to_dict()
    second = search(pool, criteria).to_dict()
    assert first == second


def test_result_to_dict_shape(pool) -> None:
    d = search(pool, page_size=2).to_dict()
    assert set(d) == {
        "items",
        "page",
        "pageSize",
        "totalCount",
        "totalPages",
        "degradedCount",
        "relaxedStages",
        "fellBack",
    }
    assert d["items"][0]["candidate"]["id"] == "c1"
    assert d["items"][0]["score"] == 60
