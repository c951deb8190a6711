from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple


class ExperienceLevel(str, Enum):
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"

    @property
    def band(self) -> Tuple[int, Optional[int]]:
        """Half-open [min, max) years; max is None for the open-ended lead band."""
        return _EXPERIENCE_BANDS[self]


_EXPERIENCE_BANDS: Dict[ExperienceLevel, Tuple[int, Optional[int]]] = {
    ExperienceLevel.ENTRY: (0, 2),
    ExperienceLevel.MID: (2, 5),
    ExperienceLevel.SENIOR: (5, 8),
    ExperienceLevel.LEAD: (8, None),
}


def years_in_band(years: int, band: Tuple[int, Optional[int]]) -> bool:
    lo, hi = band
    return years >= lo and (hi is None or years < hi)


class BadgeKind(str, Enum):
    SKILL = "skill"
    IDENTITY = "identity"
    ROLEPLAY = "roleplay"


class FieldKind(str, Enum):
    ROLE_TITLE = "role_title"
    INDUSTRY = "industry"
    SKILLS = "skills"
    EXPERIENCE = "experience"
    COMPANY_STAGE = "company_stage"
    GOAL = "goal"
    MILESTONES = "milestones"
    ACCOMPLISHMENTS = "accomplishments"
    CULTURAL_VALUES = "cultural_values"
    VERIFICATION = "verification"


def normalize_whitespace(text: Optional[str]) -> str:
    return " ".join((text or "").split()).strip()


def _unique_strings(items: Optional[Iterable[str]]) -> Tuple[str, ...]:
    """Whitespace-normalized, empty-dropped, case-insensitively unique, first-seen order."""
    out = []
    seen = set()
    for it in items or ():
        s = normalize_whitespace(it)
        if s and s.lower() not in seen:
            out.append(s)
            seen.add(s.lower())
    return tuple(out)


@dataclass(frozen=True)
class SkillTag:
    id: str
    label: str
    category: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "label", normalize_whitespace(self.label))
        object.__setattr__(self, "id", normalize_whitespace(self.id) or self.label.lower())

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"id": self.id, "label": self.label}
        if self.category is not None:
            d["category"] = self.category
        return d


def _unique_tags(tags: Optional[Iterable[SkillTag]]) -> Tuple[SkillTag, ...]:
    out = []
    seen = set()
    for t in tags or ():
        key = t.label.lower()
        if t.label and key not in seen:
            out.append(t)
            seen.add(key)
    return tuple(out)


@dataclass(frozen=True)
class CandidateSkills:
    technical: Tuple[SkillTag, ...] = ()
    soft: Tuple[SkillTag, ...] = ()

    def __post_init__(self) -> None:
        # Labels are unique within a set (not across sets).
        object.__setattr__(self, "technical", _unique_tags(self.technical))
        object.__setattr__(self, "soft", _unique_tags(self.soft))

    def labels(self) -> Tuple[str, ...]:
        return tuple(t.label for t in self.technical) + tuple(t.label for t in self.soft)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "technical": [t.to_dict() for t in self.technical],
            "soft": [t.to_dict() for t in self.soft],
        }


@dataclass(frozen=True)
class Location:
    city: str = ""
    country: str = ""
    remote: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "city", normalize_whitespace(self.city))
        object.__setattr__(self, "country", normalize_whitespace(self.country))

    def to_dict(self) -> Dict[str, Any]:
        return {"city": self.city, "country": self.country, "remote": self.remote}


@dataclass(frozen=True)
class Candidate:
    """
    The canonical candidate record used across TalentLens.
    Loaders MUST return this shape; the engine never sees raw payloads.
    """
    id: str
    title: str
    experience_years: int
    skills: CandidateSkills = field(default_factory=CandidateSkills)
    industries: Tuple[str, ...] = ()
    company_stage_history: Tuple[str, ...] = ()
    achievements: Tuple[str, ...] = ()
    cultural_values: Tuple[str, ...] = ()
    verification_badges: Tuple[BadgeKind, ...] = ()
    location: Location = field(default_factory=Location)

    # Optional presentation / narrative fields
    name: str = ""
    about: str = ""
    # One "title company description" line per past role
    work_history: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.experience_years, bool) or not isinstance(self.experience_years, int):
            raise TypeError(f"experience_years must be an int, got {type(self.experience_years).__name__}")
        if self.experience_years < 0:
            raise ValueError(f"experience_years must be >= 0, got {self.experience_years}")

        object.__setattr__(self, "title", normalize_whitespace(self.title))
        object.__setattr__(self, "name", normalize_whitespace(self.name))
        object.__setattr__(self, "about", normalize_whitespace(self.about))
        object.__setattr__(self, "industries", _unique_strings(self.industries))
        object.__setattr__(self, "company_stage_history", _unique_strings(self.company_stage_history))
        object.__setattr__(self, "cultural_values", _unique_strings(self.cultural_values))

        # Achievements are an ordered sequence; duplicates are meaningful.
        object.__setattr__(
            self,
            "achievements",
            tuple(a for a in (normalize_whitespace(x) for x in self.achievements or ()) if a),
        )
        object.__setattr__(
            self,
            "work_history",
            tuple(w for w in (normalize_whitespace(x) for x in self.work_history or ()) if w),
        )

        badges = []
        for b in self.verification_badges or ():
            kind = BadgeKind(b)
            if kind not in badges:
                badges.append(kind)
        object.__setattr__(self, "verification_badges", tuple(badges))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "title": self.title,
            "experienceYears": self.experience_years,
            "skills": self.skills.to_dict(),
            "industries": list(self.industries),
            "companyStageHistory": list(self.company_stage_history),
            "achievements": list(self.achievements),
            "culturalValues": list(self.cultural_values),
            "verificationBadges": [b.value for b in self.verification_badges],
            "location": self.location.to_dict(),
            "about": self.about,
            "workHistory": list(self.work_history),
        }


def _optional_text(value: Optional[str]) -> Optional[str]:
    s = normalize_whitespace(value)
    return s or None


def _optional_strings(items: Optional[Iterable[str]]) -> Optional[Tuple[str, ...]]:
    if items is None:
        return None
    if isinstance(items, str):
        items = [items]
    values = _unique_strings(items)
    return values or None


@dataclass(frozen=True)
class SearchCriteria:
    """
    What the hiring team wants. None on any field means "no constraint".

    Empty strings and empty collections are normalized to None here, so an
    empty field can never act as a "match nothing" filter downstream.
    """
    role_title: Optional[str] = None
    industry: Optional[str] = None
    experience_level: Optional[ExperienceLevel] = None
    skills: Optional[Tuple[str, ...]] = None
    free_text_context: Optional[str] = None
    company_stage: Optional[str] = None
    milestones: Optional[Tuple[str, ...]] = None
    accomplishments: Optional[Tuple[str, ...]] = None
    cultural_values: Optional[Tuple[str, ...]] = None

    # Wizard / sidebar extras
    goal: Optional[str] = None
    required_badges: Optional[Tuple[BadgeKind, ...]] = None
    cities: Optional[Tuple[str, ...]] = None
    remote_only: Optional[bool] = None

    # Explicit year range [min_years, max_years); overrides the level band where set
    min_years: Optional[int] = None
    max_years: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("role_title", "industry", "company_stage", "goal"):
            object.__setattr__(self, name, _optional_text(getattr(self, name)))

        context = (self.free_text_context or "").strip()
        object.__setattr__(self, "free_text_context", context or None)

        for name in ("skills", "milestones", "accomplishments", "cultural_values", "cities"):
            object.__setattr__(self, name, _optional_strings(getattr(self, name)))

        if self.experience_level is not None:
            raw_level = self.experience_level
            if isinstance(raw_level, str) and not isinstance(raw_level, ExperienceLevel):
                raw_level = raw_level.strip().lower() or None
            object.__setattr__(
                self, "experience_level", ExperienceLevel(raw_level) if raw_level else None
            )

        if self.required_badges is not None:
            required = self.required_badges
            if isinstance(required, str):
                required = [required]
            kinds = []
            for b in required:
                kind = BadgeKind(b)
                if kind not in kinds:
                    kinds.append(kind)
            object.__setattr__(self, "required_badges", tuple(kinds) or None)

        if self.remote_only is False:
            object.__setattr__(self, "remote_only", None)

        for name in ("min_years", "max_years"):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an int, got {type(value).__name__}")
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")
        if self.min_years is not None and self.max_years is not None and self.max_years <= self.min_years:
            raise ValueError(f"max_years ({self.max_years}) must be greater than min_years ({self.min_years})")

    def experience_band(self) -> Optional[Tuple[int, Optional[int]]]:
        """
        Half-open [min, max) years the caller asked for, or None when experience
        is unconstrained. Explicit year bounds win over the level's band.
        """
        if self.min_years is None and self.max_years is None:
            return self.experience_level.band if self.experience_level is not None else None
        lo, hi = self.experience_level.band if self.experience_level is not None else (0, None)
        if self.min_years is not None:
            lo = self.min_years
        if self.max_years is not None:
            hi = self.max_years
        return lo, hi

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in _CRITERIA_FIELDS)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "roleTitle": self.role_title,
            "industry": self.industry,
            "experienceLevel": self.experience_level.value if self.experience_level else None,
            "skills": list(self.skills) if self.skills else None,
            "freeTextContext": self.free_text_context,
            "companyStage": self.company_stage,
            "milestones": list(self.milestones) if self.milestones else None,
            "accomplishments": list(self.accomplishments) if self.accomplishments else None,
            "culturalValues": list(self.cultural_values) if self.cultural_values else None,
            "goal": self.goal,
            "requiredBadges": [b.value for b in self.required_badges] if self.required_badges else None,
            "cities": list(self.cities) if self.cities else None,
            "remoteOnly": self.remote_only,
            "minYears": self.min_years,
            "maxYears": self.max_years,
        }


_CRITERIA_FIELDS = (
    "role_title",
    "industry",
    "experience_level",
    "skills",
    "free_text_context",
    "company_stage",
    "milestones",
    "accomplishments",
    "cultural_values",
    "goal",
    "required_badges",
    "cities",
    "remote_only",
    "min_years",
    "max_years",
)
