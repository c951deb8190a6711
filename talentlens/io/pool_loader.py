from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError

from talentlens.core.logger import get_logger
from talentlens.errors import PartialDataError
from talentlens.io.schemas import CandidatePayload, criteria_from_dict
from talentlens.models import Candidate, SearchCriteria

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoadedPool:
    candidates: List[Candidate]
    # One entry per record that could not be normalized
    skipped: List[PartialDataError] = field(default_factory=list)


def _row_id(row: Any) -> Optional[str]:
    if isinstance(row, dict) and row.get("id") is not None:
        return str(row["id"])
    return None


def _describe(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        parts = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ())) or "record"
            parts.append(f"{loc}: {err.get('msg')}")
        return "; ".join(parts)
    return str(exc)


def candidates_from_payload(rows: Iterable[Any]) -> LoadedPool:
    """
    Normalize raw candidate rows at the boundary.
    A bad row is skipped and reported; it never aborts the batch.
    Duplicate ids are skipped too (ids are unique within a pool, first one wins).
    """
    candidates: List[Candidate] = []
    skipped: List[PartialDataError] = []
    seen = set()

    for index, row in enumerate(rows):
        row_id = _row_id(row)
        try:
            candidate = CandidatePayload.model_validate(row).to_candidate()
        except (ValidationError, ValueError, TypeError) as exc:
            err = PartialDataError(_describe(exc), candidate_id=row_id)
            logger.warning("Skipping candidate record #%d: %s", index, err)
            skipped.append(err)
            continue
        if candidate.id in seen:
            err = PartialDataError("duplicate id", candidate_id=candidate.id)
            logger.warning("Skipping candidate record #%d: %s", index, err)
            skipped.append(err)
            continue
        seen.add(candidate.id)
        candidates.append(candidate)

    return LoadedPool(candidates=candidates, skipped=skipped)


def load_pool(path: Path) -> LoadedPool:
    """
    Read a pool file: either a JSON list of candidates or {"candidates": [...]}.
    A file that is not valid JSON or has the wrong top-level shape raises ValueError.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("candidates")
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of candidates or an object with 'candidates'")
    return candidates_from_payload(data)


def load_criteria(path: Path) -> SearchCriteria:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object with search criteria")
    return criteria_from_dict(data)
