from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from talentlens import config
from talentlens.errors import InvalidArgumentError
from talentlens.io.pool_loader import LoadedPool, load_criteria, load_pool
from talentlens.matching.engine import search
from talentlens.matching.types import RankedResult, SortKey
from talentlens.models import SearchCriteria


def print_human_summary(result: RankedResult, pool: LoadedPool, criteria: SearchCriteria) -> None:
    print("\n=== TalentLens Search ===")
    print(f"Pool: {len(pool.candidates)} candidates | Skipped records: {len(pool.skipped)}")
    if criteria.is_empty():
        print("Criteria: none (neutral scores)")
    if result.relaxed_stages:
        print(f"Relaxed filters: {', '.join(result.relaxed_stages)}")
    if result.fell_back:
        print("Filters were too strict; showing all candidates.")
    print(f"Matches: {result.total_count} | Page {result.page} of {max(result.total_pages, 1)}")

    if not result.items:
        print("\nNo candidates on this page.")
        return

    start = (result.page - 1) * result.page_size
    for idx, item in enumerate(result.items, start=start + 1):
        c = item.candidate
        loc = c.location.city or ("Remote" if c.location.remote else "")
        loc = f" ({loc})" if loc else ""
        name = f"{c.name} - " if c.name else ""
        print(f"\n{idx}) {name}{c.title}{loc}  [id={c.id}]")
        print(f"   score: {item.score}" + ("  (neutral: scoring failed)" if item.degraded else ""))
        print(f"   experience: {c.experience_years}y")
        if item.matched_fields:
            print(f"   matched: {', '.join(sorted(f.value for f in item.matched_fields))}")

    for err in pool.skipped:
        print(f"\n[TalentLens] skipped record: {err}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rank a candidate pool against hiring criteria")
    parser.add_argument("--pool", required=True, help="Path to a JSON candidate pool")
    parser.add_argument("--criteria", default="", help="Path to a JSON criteria file (omit for no constraints)")
    parser.add_argument("--page", type=int, default=1, help="1-indexed page number")
    parser.add_argument("--page-size", type=int, default=config.DEFAULT_PAGE_SIZE, help="Candidates per page")
    parser.add_argument(
        "--sort-by",
        choices=[k.value for k in SortKey],
        default=SortKey.SCORE.value,
        help="Ranking key (descending, stable)",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON only (machine-readable)")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    pool_path = Path(args.pool)
    if not pool_path.exists():
        print(f"\n[TalentLens] Pool file not found: {pool_path}", file=sys.stderr)
        raise SystemExit(2)

    criteria = SearchCriteria()
    if args.criteria:
        criteria_path = Path(args.criteria)
        if not criteria_path.exists():
            print(f"\n[TalentLens] Criteria file not found: {criteria_path}", file=sys.stderr)
            raise SystemExit(2)
        try:
            criteria = load_criteria(criteria_path)
        except ValueError as exc:
            print(f"\n[TalentLens] Invalid criteria file: {exc}", file=sys.stderr)
            raise SystemExit(2)

    try:
        pool = load_pool(pool_path)
    except ValueError as exc:
        print(f"\n[TalentLens] Invalid pool file: {exc}", file=sys.stderr)
        raise SystemExit(2)

    try:
        result = search(
            pool.candidates,
            criteria,
            page=args.page,
            page_size=args.page_size,
            sort_by=SortKey(args.sort_by),
        )
    except InvalidArgumentError as exc:
        print(f"\n[TalentLens] {exc}", file=sys.stderr)
        raise SystemExit(2)

    payload = result.to_dict()
    payload["skipped"] = [{"id": e.candidate_id, "reason": e.reason} for e in pool.skipped]

    if args.json:
        print(json.dumps(payload, indent=2))
    else:
        print_human_summary(result, pool, criteria)


if __name__ == "__main__":
    main()
