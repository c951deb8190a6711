"""Pydantic schemas for the JSON boundary (candidate pool + search criteria).

Raw payloads can come in several shapes (bare int vs {"years": n} for
experience, tags as strings or objects, fields nested under "context").
Everything is normalized here so the engine only ever sees the canonical
dataclasses from talentlens.models.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from talentlens.models import (
    BadgeKind,
    Candidate,
    CandidateSkills,
    ExperienceLevel,
    Location,
    SearchCriteria,
    SkillTag,
)

# Range labels used by older search forms.
LEGACY_EXPERIENCE_LEVELS = {
    "0-2-years": ExperienceLevel.ENTRY,
    "2-5-years": ExperienceLevel.MID,
    "5-8-years": ExperienceLevel.SENIOR,
    "8-12-years": ExperienceLevel.LEAD,
    "12-plus-years": ExperienceLevel.LEAD,
}

# Labels narrower than their level's band carry their own half-open year range.
LEGACY_EXPERIENCE_BOUNDS = {
    "8-12-years": (8, 12),
    "12-plus-years": (12, None),
}

# Keys the legacy profile format nests under "context".
_CONTEXT_KEYS = {
    "industries": "industries",
    "startupStages": "companyStageHistory",
    "companyStageHistory": "companyStageHistory",
    "achievements": "achievements",
    "culturalValues": "culturalValues",
    "about": "about",
    "experience": "workHistory",
}


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TagPayload(_Payload):
    """A labeled tag; plain strings are accepted and become {label: <str>}."""

    id: Optional[str] = Field(default=None, description="Stable tag id")
    label: str = Field(..., min_length=1, description="Human label, e.g. 'React'")
    category: Optional[str] = Field(default=None, description="Optional grouping")

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"label": value}
        return value

    def to_tag(self) -> SkillTag:
        return SkillTag(id=self.id or "", label=self.label, category=self.category)


class SkillsPayload(_Payload):
    technical: List[TagPayload] = Field(default_factory=list)
    soft: List[TagPayload] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _from_flat_list(cls, value: Any) -> Any:
        if value is None:
            return {}
        # A flat list of skills is read as technical skills.
        if isinstance(value, list):
            return {"technical": value}
        return value


class ExperiencePayload(_Payload):
    years: int = Field(..., ge=0, description="Total years of experience")


class LocationPayload(_Payload):
    city: str = ""
    country: str = ""
    remote: bool = False


class WorkEntryPayload(_Payload):
    """One past role; plain strings are accepted as the description."""

    title: Optional[str] = None
    company: Optional[str] = None
    description: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"description": value}
        return value

    def to_text(self) -> str:
        return " ".join(p for p in (self.title, self.company, self.description) if p)


class CandidatePayload(_Payload):
    """One candidate record as supplied by a pool source."""

    id: str = Field(..., min_length=1)
    title: str = Field(..., description="Current or target title")
    name: str = ""
    about: str = ""
    experience_years: Optional[int] = Field(default=None, alias="experienceYears", ge=0)
    experience: Optional[Union[int, ExperiencePayload]] = None
    skills: SkillsPayload = Field(default_factory=SkillsPayload)
    industries: List[str] = Field(default_factory=list)
    company_stage_history: List[str] = Field(default_factory=list, alias="companyStageHistory")
    achievements: List[str] = Field(default_factory=list)
    cultural_values: List[str] = Field(default_factory=list, alias="culturalValues")
    verification_badges: List[BadgeKind] = Field(default_factory=list, alias="verificationBadges")
    location: LocationPayload = Field(default_factory=LocationPayload)
    work_history: List[WorkEntryPayload] = Field(default_factory=list, alias="workHistory")

    @model_validator(mode="before")
    @classmethod
    def _lift_context(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        context = data.pop("context", None)
        if isinstance(context, dict):
            for src, dst in _CONTEXT_KEYS.items():
                if src in context and dst not in data:
                    data[dst] = context[src]
        if "verification" in data and "verificationBadges" not in data:
            data["verificationBadges"] = data.pop("verification")
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator(
        "industries", "company_stage_history", "achievements", "cultural_values", "work_history",
        mode="before",
    )
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        # Sets may be empty but never absent.
        return [] if value is None else value

    @field_validator("verification_badges", mode="before")
    @classmethod
    def _badge_kinds(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        return [v.get("type") if isinstance(v, dict) else v for v in value]

    @model_validator(mode="after")
    def _require_experience(self) -> "CandidatePayload":
        if self.experience_years is None and self.experience is None:
            raise ValueError("missing experience (expected experienceYears or experience)")
        if isinstance(self.experience, int) and self.experience < 0:
            raise ValueError("experience must be >= 0")
        return self

    def canonical_years(self) -> int:
        if self.experience_years is not None:
            return self.experience_years
        if isinstance(self.experience, ExperiencePayload):
            return self.experience.years
        return int(self.experience)

    def to_candidate(self) -> Candidate:
        return Candidate(
            id=self.id,
            title=self.title,
            experience_years=self.canonical_years(),
            skills=CandidateSkills(
                technical=tuple(t.to_tag() for t in self.skills.technical),
                soft=tuple(t.to_tag() for t in self.skills.soft),
            ),
            industries=tuple(self.industries),
            company_stage_history=tuple(self.company_stage_history),
            achievements=tuple(self.achievements),
            cultural_values=tuple(self.cultural_values),
            verification_badges=tuple(self.verification_badges),
            location=Location(
                city=self.location.city,
                country=self.location.country,
                remote=self.location.remote,
            ),
            name=self.name,
            about=self.about,
            work_history=tuple(w.to_text() for w in self.work_history),
        )


def _labels(value: Any) -> Any:
    """Tag lists may hold strings or {label|id} objects; keep the label."""
    if not isinstance(value, list):
        return value
    out = []
    for v in value:
        if isinstance(v, dict):
            v = v.get("label") or v.get("id") or ""
        out.append(v)
    return out


class CriteriaPayload(_Payload):
    """Search criteria; every field optional. Also accepts the wizard's nested shape."""

    role_title: Optional[str] = Field(default=None, alias="roleTitle")
    industry: Optional[str] = None
    experience_level: Optional[ExperienceLevel] = Field(default=None, alias="experienceLevel")
    skills: Optional[List[str]] = None
    free_text_context: Optional[str] = Field(default=None, alias="freeTextContext")
    company_stage: Optional[str] = Field(default=None, alias="companyStage")
    milestones: Optional[List[str]] = None
    accomplishments: Optional[List[str]] = None
    cultural_values: Optional[List[str]] = Field(default=None, alias="culturalValues")
    goal: Optional[str] = None
    required_badges: Optional[List[BadgeKind]] = Field(default=None, alias="requiredBadges")
    cities: Optional[List[str]] = None
    remote_only: Optional[bool] = Field(default=None, alias="remoteOnly")
    min_years: Optional[int] = Field(default=None, alias="minYears", ge=0)
    max_years: Optional[int] = Field(default=None, alias="maxYears", ge=0)

    @model_validator(mode="before")
    @classmethod
    def _flatten_wizard(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        basic = data.pop("basicCriteria", None)
        hiring = data.pop("hiringContext", None)
        for section in (basic, hiring):
            if isinstance(section, dict):
                for key, value in section.items():
                    data.setdefault(key, value)
        # The wizard calls the hiring narrative "context".
        if "context" in data and "freeTextContext" not in data:
            data["freeTextContext"] = data.pop("context")
        level = data.get("experienceLevel", data.get("experience_level"))
        if isinstance(level, str) and level.strip().lower() in LEGACY_EXPERIENCE_BOUNDS:
            lo, hi = LEGACY_EXPERIENCE_BOUNDS[level.strip().lower()]
            if "minYears" not in data and "min_years" not in data:
                data["minYears"] = lo
            if "maxYears" not in data and "max_years" not in data:
                data["maxYears"] = hi
        return data

    @field_validator("role_title", mode="before")
    @classmethod
    def _first_role(cls, value: Any) -> Any:
        if isinstance(value, list):
            return next((v for v in value if isinstance(v, str) and v.strip()), None)
        return value

    @field_validator("experience_level", mode="before")
    @classmethod
    def _level(cls, value: Any) -> Any:
        if isinstance(value, str):
            key = value.strip().lower()
            if not key:
                return None
            return LEGACY_EXPERIENCE_LEVELS.get(key, key)
        return value

    @field_validator("skills", "milestones", "accomplishments", "cultural_values", mode="before")
    @classmethod
    def _tag_labels(cls, value: Any) -> Any:
        return _labels(value)

    def to_criteria(self) -> SearchCriteria:
        def _tuple(values: Optional[List[Any]]) -> Optional[tuple]:
            return tuple(values) if values else None

        return SearchCriteria(
            role_title=self.role_title,
            industry=self.industry,
            experience_level=self.experience_level,
            skills=_tuple(self.skills),
            free_text_context=self.free_text_context,
            company_stage=self.company_stage,
            milestones=_tuple(self.milestones),
            accomplishments=_tuple(self.accomplishments),
            cultural_values=_tuple(self.cultural_values),
            goal=self.goal,
            required_badges=_tuple(self.required_badges),
            cities=_tuple(self.cities),
            remote_only=self.remote_only,
            min_years=self.min_years,
            max_years=self.max_years,
        )


def criteria_from_dict(data: Dict[str, Any]) -> SearchCriteria:
    return CriteriaPayload.model_validate(data).to_criteria()
