"""
Typed decoding of model replies.

Two stages: ``extract_json`` pulls the JSON text out of the raw completion,
then the helpers here validate it against the resume-parse or scoring shape.
Both failure modes surface as ``MalformedModelResponseError``.
"""
import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from resume_ranker.utils.exceptions import MalformedModelResponseError
from resume_ranker.utils.utils import as_list, as_text, extract_json


class LLMPayload(BaseModel):
    """Base for model reply shapes: camelCase keys matched case-insensitively."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def match_keys_case_insensitively(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        lookup = {}
        for name, field in cls.model_fields.items():
            lookup[name.lower()] = field.alias or name
            if field.alias:
                lookup[field.alias.lower()] = field.alias
        return {lookup.get(str(k).lower(), k): v for k, v in data.items()}


class ParsedSkill(LLMPayload):
    name: str = ""
    years_of_experience: int = Field(default=0, alias="yearsOfExperience")
    level: str = ""

    @field_validator("name", "level", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return as_text(v)

    @field_validator("years_of_experience", mode="before")
    @classmethod
    def default_years(cls, v):
        return 0 if v is None or v == "" else v


class ParsedExperience(LLMPayload):
    company_name: str = Field(default="", alias="companyName")
    position: str = ""
    start_date: str = Field(default="", alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    description: Optional[str] = None
    is_current: bool = Field(default=False, alias="isCurrent")

    @field_validator("company_name", "position", "start_date", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return as_text(v)

    @field_validator("is_current", mode="before")
    @classmethod
    def default_flag(cls, v):
        return False if v is None else v


class ParsedEducation(LLMPayload):
    institution: str = ""
    degree: str = ""
    field_of_study: str = Field(default="", alias="fieldOfStudy")
    graduation_year: Optional[int] = Field(default=None, alias="graduationYear")
    gpa: Optional[float] = None

    @field_validator("institution", "degree", "field_of_study", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return as_text(v)


class ParsedResume(LLMPayload):
    full_name: Optional[str] = Field(default=None, alias="fullName")
    email: Optional[str] = None
    phone: Optional[str] = None
    skills: Optional[List[ParsedSkill]] = None
    experiences: Optional[List[ParsedExperience]] = None
    education: Optional[ParsedEducation] = None

    @field_validator("skills", mode="before")
    @classmethod
    def wrap_bare_skill_names(cls, v):
        if isinstance(v, list):
            return [{"name": s} if isinstance(s, str) else s for s in v]
        return v


class ScoringResponse(LLMPayload):
    skills_score: float = Field(default=0.0, alias="skillsScore")
    experience_score: float = Field(default=0.0, alias="experienceScore")
    education_score: float = Field(default=0.0, alias="educationScore")
    matched_skills: Optional[List[str]] = Field(default=None, alias="matchedSkills")
    missing_skills: Optional[List[str]] = Field(default=None, alias="missingSkills")
    total_years_experience: float = Field(default=0.0, alias="totalYearsExperience")
    number_of_companies: float = Field(default=0.0, alias="numberOfCompanies")
    average_years_per_company: float = Field(default=0.0, alias="averageYearsPerCompany")
    has_relevant_experience: bool = Field(default=False, alias="hasRelevantExperience")
    has_required_degree: bool = Field(default=False, alias="hasRequiredDegree")
    is_relevant_field: bool = Field(default=False, alias="isRelevantField")
    actual_degree: Optional[str] = Field(default=None, alias="actualDegree")
    actual_field: Optional[str] = Field(default=None, alias="actualField")
    summary: Optional[str] = None
    strengths: Optional[str] = None
    weaknesses: Optional[str] = None
    # only requested by the raw-text prompt
    candidate_name: Optional[str] = Field(default=None, alias="candidateName")
    candidate_email: Optional[str] = Field(default=None, alias="candidateEmail")
    candidate_phone: Optional[str] = Field(default=None, alias="candidatePhone")

    @field_validator("matched_skills", "missing_skills", mode="before")
    @classmethod
    def coerce_list(cls, v):
        return None if v is None else as_list(v)

    @field_validator("summary", "strengths", "weaknesses", "actual_degree", "actual_field", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return None if v is None else as_text(v)

    @field_validator(
        "skills_score", "experience_score", "education_score",
        "total_years_experience", "number_of_companies", "average_years_per_company",
        mode="before",
    )
    @classmethod
    def default_number(cls, v):
        return 0.0 if v is None else v

    @field_validator("has_relevant_experience", "has_required_degree", "is_relevant_field", mode="before")
    @classmethod
    def default_flag(cls, v):
        return False if v is None else v


def load_json_object(raw: str, schema: str, allow_null: bool = False) -> Dict[str, Any]:
    """Run the extractor over ``raw`` and decode the result into a dict.

    An empty reply becomes ``{}`` and decodes to defaults. A JSON ``null`` is
    read as ``{}`` only when ``allow_null`` is set.
    """
    text = extract_json(raw)
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedModelResponseError(
            f"Model response for {schema} is not valid JSON: {e}", schema=schema, cause=e
        ) from e
    if data is None and allow_null:
        return {}
    if not isinstance(data, dict):
        kind = "null" if data is None else type(data).__name__
        raise MalformedModelResponseError(
            f"Model response for {schema} is a JSON {kind}, expected an object",
            schema=schema,
        )
    return data


def decode_parsed_resume(raw: str) -> ParsedResume:
    data = load_json_object(raw, "resume", allow_null=True)
    try:
        return ParsedResume.model_validate(data)
    except ValidationError as e:
        raise MalformedModelResponseError(
            f"Resume response does not match the expected shape: {e.error_count()} error(s)",
            schema="resume",
            cause=e,
        ) from e


def decode_scoring_response(raw: str) -> ScoringResponse:
    data = load_json_object(raw, "scoring")
    try:
        return ScoringResponse.model_validate(data)
    except ValidationError as e:
        raise MalformedModelResponseError(
            f"Scoring response does not match the expected shape: {e.error_count()} error(s)",
            schema="scoring",
            cause=e,
        ) from e
