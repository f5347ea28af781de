from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from resume_ranker.models.models import (
    AnalysisResult, Candidate, Education, Experience, JobRequirement, Skill,
    SkillsAnalysis, ExperienceAnalysis, EducationAnalysis,
)

# -------- LLM configuration --------
class ConfigureLLMRequest(BaseModel):
    api_key: str
    provider: Optional[str] = None  # falls back to the configured provider

class ConfigureLLMResponse(BaseModel):
    success: bool = True
    message: str
    provider: str
    model: str

class LLMStatusResponse(BaseModel):
    is_configured: bool
    current_provider: str
    current_model: Optional[str] = None

class LLMConfigResponse(BaseModel):
    provider: str
    model: str
    has_api_key: bool

# -------- Sessions --------
class SessionCreatedResponse(BaseModel):
    session_id: str

class SessionClearedResponse(BaseModel):
    success: bool = True
    message: str

# -------- Candidates --------
class ExperienceOut(BaseModel):
    company_name: str
    position: str
    start_date: datetime
    end_date: Optional[datetime] = None
    description: str
    is_current: bool
    duration_in_months: int

class CandidateOut(BaseModel):
    id: str
    full_name: str
    email: str
    phone: str
    file_name: str
    uploaded_at: datetime
    parsed: bool
    skills: List[Skill] = []
    experiences: List[ExperienceOut] = []
    education: Optional[Education] = None

# -------- Analysis --------
class SkillsAnalysisOut(BaseModel):
    matched_skills: List[str] = []
    missing_skills: List[str] = []
    matched_count: int = 0
    required_count: int = 0
    match_percentage: float = 0.0

class AnalysisResultOut(BaseModel):
    id: str
    candidate_id: str
    candidate: Optional[CandidateOut] = None
    skills_score: float
    experience_score: float
    education_score: float
    total_score: float
    skills_analysis: SkillsAnalysisOut
    experience_analysis: ExperienceAnalysis
    education_analysis: EducationAnalysis
    ai_summary: str
    strengths: str
    weaknesses: str
    candidate_name: Optional[str] = None
    candidate_email: Optional[str] = None
    candidate_phone: Optional[str] = None
    analyzed_at: datetime

class AnalyzeRequest(BaseModel):
    job_requirement: JobRequirement = Field(default_factory=JobRequirement)

class UploadResponse(BaseModel):
    session_id: str
    total_files: int = 0
    successfully_uploaded: int = 0
    failed_to_upload: int = 0
    candidates: List[CandidateOut] = []
    errors: List[str] = []

class AnalyzeResponse(BaseModel):
    session_id: str
    total_candidates: int = 0
    successfully_analyzed: int = 0
    failed_to_analyze: int = 0
    results: List[AnalysisResultOut] = []
    errors: List[str] = []
    analyzed_at: datetime = Field(default_factory=datetime.utcnow)


# -------- Mapping --------
def experience_to_out(experience: Experience) -> ExperienceOut:
    return ExperienceOut(
        company_name=experience.company_name,
        position=experience.position,
        start_date=experience.start_date,
        end_date=experience.end_date,
        description=experience.description,
        is_current=experience.is_current,
        duration_in_months=experience.duration_in_months,
    )

def candidate_to_out(candidate: Candidate) -> CandidateOut:
    return CandidateOut(
        id=candidate.id,
        full_name=candidate.full_name,
        email=candidate.email,
        phone=candidate.phone,
        file_name=candidate.file_name,
        uploaded_at=candidate.uploaded_at,
        parsed=candidate.parsed,
        skills=list(candidate.skills),
        experiences=[experience_to_out(e) for e in candidate.experiences],
        education=candidate.education,
    )

def skills_analysis_to_out(analysis: SkillsAnalysis) -> SkillsAnalysisOut:
    return SkillsAnalysisOut(
        matched_skills=analysis.matched_skills,
        missing_skills=analysis.missing_skills,
        matched_count=analysis.matched_count,
        required_count=analysis.required_count,
        match_percentage=analysis.match_percentage,
    )

def result_to_out(result: AnalysisResult, candidate: Optional[Candidate] = None) -> AnalysisResultOut:
    return AnalysisResultOut(
        id=result.id,
        candidate_id=result.candidate_id,
        candidate=candidate_to_out(candidate) if candidate else None,
        skills_score=result.skills_score,
        experience_score=result.experience_score,
        education_score=result.education_score,
        total_score=result.total_score,
        skills_analysis=skills_analysis_to_out(result.skills_analysis),
        experience_analysis=result.experience_analysis,
        education_analysis=result.education_analysis,
        ai_summary=result.ai_summary,
        strengths=result.strengths,
        weaknesses=result.weaknesses,
        candidate_name=result.candidate_name,
        candidate_email=result.candidate_email,
        candidate_phone=result.candidate_phone,
        analyzed_at=result.analyzed_at,
    )
