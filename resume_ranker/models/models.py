import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


def _new_id() -> str:
    return str(uuid.uuid4())


class Skill(BaseModel):
    name: str = ""
    years_of_experience: int = Field(default=0, ge=0)
    # Beginner / Intermediate / Advanced / Expert, passed through as given
    level: str = ""


class Experience(BaseModel):
    company_name: str = ""
    position: str = ""
    start_date: datetime = datetime.min
    end_date: Optional[datetime] = None
    description: str = ""
    is_current: bool = False

    @property
    def duration_in_months(self) -> int:
        """Whole months between start and end (or now), counted as days/30."""
        end = self.end_date or datetime.utcnow()
        days = (end - self.start_date).total_seconds() / 86400
        return int(days / 30)


class Education(BaseModel):
    institution: str = ""
    degree: str = ""
    field_of_study: str = ""
    graduation_year: Optional[int] = None
    gpa: Optional[float] = None


class ScoringWeights(BaseModel):
    skills: int = 40
    experience: int = 40
    education: int = 20


class JobRequirement(BaseModel):
    job_title: str = ""
    description: str = ""
    required_skills: List[str] = Field(default_factory=list)
    preferred_skills: List[str] = Field(default_factory=list)
    min_years_of_experience: int = 0
    max_years_of_experience: Optional[int] = None
    required_degree: str = ""
    preferred_fields_of_study: List[str] = Field(default_factory=list)
    # Not required to sum to 100; used as raw multipliers
    skills_weight: int = 40
    experience_weight: int = 40
    education_weight: int = 20

    @property
    def weights(self) -> ScoringWeights:
        return ScoringWeights(
            skills=self.skills_weight,
            experience=self.experience_weight,
            education=self.education_weight,
        )


class SkillsAnalysis(BaseModel):
    matched_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)
    matched_count: int = 0
    required_count: int = 0

    @property
    def match_percentage(self) -> float:
        if self.required_count <= 0:
            return 0.0
        return self.matched_count / self.required_count * 100


class ExperienceAnalysis(BaseModel):
    total_years_of_experience: float = 0.0
    required_years: int = 0
    number_of_companies: float = 0.0
    average_years_per_company: float = 0.0
    has_relevant_experience: bool = False


class EducationAnalysis(BaseModel):
    has_required_degree: bool = False
    is_relevant_field: bool = False
    actual_degree: str = ""
    actual_field: str = ""


class AnalysisResult(BaseModel):
    id: str = Field(default_factory=_new_id)
    candidate_id: str
    # Sub-scores are nominally 0-100 but never clamped
    skills_score: float = 0.0
    experience_score: float = 0.0
    education_score: float = 0.0
    total_score: float = 0.0
    skills_analysis: SkillsAnalysis = Field(default_factory=SkillsAnalysis)
    experience_analysis: ExperienceAnalysis = Field(default_factory=ExperienceAnalysis)
    education_analysis: EducationAnalysis = Field(default_factory=EducationAnalysis)
    ai_summary: str = ""
    strengths: str = ""
    weaknesses: str = ""
    # Identity recovered by the scoring call when the resume could not be parsed
    candidate_name: Optional[str] = None
    candidate_email: Optional[str] = None
    candidate_phone: Optional[str] = None
    analyzed_at: datetime = Field(default_factory=datetime.utcnow)


class Candidate(BaseModel):
    id: str = Field(default_factory=_new_id)
    full_name: str = ""
    email: str = ""
    phone: str = ""
    file_name: str = ""
    raw_content: str = ""
    uploaded_at: datetime = Field(default_factory=datetime.utcnow)
    # False only when structured extraction failed; raw_content is then authoritative
    parsed: bool = True
    skills: List[Skill] = Field(default_factory=list)
    experiences: List[Experience] = Field(default_factory=list)
    education: Optional[Education] = None
    analysis_result: Optional[AnalysisResult] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.file_name

    @property
    def total_years_of_experience(self) -> float:
        return sum(e.duration_in_months for e in self.experiences) / 12.0


class Session(BaseModel):
    session_id: str = Field(default_factory=_new_id)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    candidates: List[Candidate] = Field(default_factory=list)
    results: List[AnalysisResult] = Field(default_factory=list)


class CandidateOutcome(BaseModel):
    """What happened to one candidate in a batch: a result or an error message."""
    candidate: Candidate
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None


class BatchResult(BaseModel):
    session_id: str
    total_candidates: int = 0
    successfully_analyzed: int = 0
    failed_to_analyze: int = 0
    results: List[AnalysisResult] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    analyzed_at: datetime = Field(default_factory=datetime.utcnow)


class UploadSummary(BaseModel):
    session_id: str
    total_files: int = 0
    successfully_uploaded: int = 0
    failed_to_upload: int = 0
    candidates: List[Candidate] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
