from __future__ import annotations

import json

import pytest

from talentlens.cli import main


def test_cli_json_output(fixtures_dir, capsys) -> None:
    main(["--pool", str(fixtures_dir / "candidates.json"), "--json"])
    out = json.loads(capsys.readouterr().out)

    assert out["totalCount"] == 5
    assert out["pageSize"] == 9
    assert out["skipped"] == []
    assert [i["score"] for i in out["items"]] == [60] * 5


def test_cli_json_with_criteria(fixtures_dir, capsys) -> None:
    main(
        [
            "--pool", str(fixtures_dir / "candidates.json"),
            "--criteria", str(fixtures_dir / "criteria.json"),
            "--json",
        ]
    )
    out = json.loads(capsys.readouterr().out)

    assert [i["candidate"]["id"] for i in out["items"]] == ["c1"]
    assert out["items"][0]["score"] == 92
    assert "role_title" in out["items"][0]["matchedFields"]


def test_cli_reports_skipped_records(fixtures_dir, capsys) -> None:
    main(["--pool", str(fixtures_dir / "pool_with_bad_rows.json"), "--json"])
    out = json.loads(capsys.readouterr().out)

    assert out["totalCount"] == 2
    assert [s["id"] for s in out["skipped"]] == ["b1", "b2", "g1", "b3", None]


def test_cli_human_summary(fixtures_dir, capsys) -> None:
    main(
        [
            "--pool", str(fixtures_dir / "candidates.json"),
            "--sort-by", "experience",
            "--page-size", "2",
        ]
    )
    out = capsys.readouterr().out

    assert "=== TalentLens Search ===" in out
    assert "Criteria: none (neutral scores)" in out
    assert "Matches: 5 | Page 1 of 3" in out
    assert "1) Carla Ruiz - Senior Frontend Engineer (Remote)  [id=c3]" in out
    assert "2) Ava Chen - Frontend Engineer (San Francisco)  [id=c1]" in out


def test_cli_human_summary_shows_relaxed_filters(tmp_path, fixtures_dir, capsys) -> None:
    criteria = tmp_path / "criteria.json"
    criteria.write_text(json.dumps({"industry": "Quantum Computing"}), encoding="utf-8")

    main(["--pool", str(fixtures_dir / "candidates.json"), "--criteria", str(criteria)])
    out = capsys.readouterr().out

    assert "Relaxed filters: industry" in out


def test_cli_missing_pool_exits_2(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--pool", str(tmp_path / "nope.json")])
    assert exc.value.code == 2
    assert "Pool file not found" in capsys.readouterr().err


def test_cli_missing_criteria_exits_2(tmp_path, fixtures_dir) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--pool", str(fixtures_dir / "candidates.json"), "--criteria", str(tmp_path / "nope.json")])
    assert exc.value.code == 2


@pytest.mark.parametrize("flag, value", [("--page", "0"), ("--page-size", "0"), ("--page-size", "-3")])
def test_cli_bad_paging_exits_2(fixtures_dir, capsys, flag, value) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--pool", str(fixtures_dir / "candidates.json"), flag, value])
    assert exc.value.code == 2
    assert "must be an integer" in capsys.readouterr().err


def test_cli_invalid_pool_shape_exits_2(tmp_path) -> None:
    path = tmp_path / "pool.json"
    path.write_text('"just a string"', encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["--pool", str(path)])
    assert exc.value.code == 2
