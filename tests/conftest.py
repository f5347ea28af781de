import json
import os

# Must be set before resume_ranker modules configure logging / read settings
os.environ["ENVIRONMENT"] = "testing"
os.environ["LLM_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from resume_ranker.models.llm_settings import LLMSettings
from resume_ranker.models.models import Candidate, Education, Experience, JobRequirement, Skill
from resume_ranker.services.analysis import AnalysisOrchestrator
from resume_ranker.services.providers import LLMClient
from resume_ranker.services.session_store import SessionStore


def scoring_reply(skills=80, experience=70, education=60, **extra) -> str:
    payload = {
        "skillsScore": skills,
        "experienceScore": experience,
        "educationScore": education,
        "matchedSkills": ["Python", "FastAPI"],
        "missingSkills": ["Kubernetes"],
        "totalYearsExperience": 6,
        "numberOfCompanies": 2,
        "averageYearsPerCompany": 3.0,
        "hasRelevantExperience": True,
        "hasRequiredDegree": True,
        "isRelevantField": True,
        "actualDegree": "Bachelor",
        "actualField": "Computer Science",
        "summary": "Solid backend engineer.",
        "strengths": "Python, APIs",
        "weaknesses": "No Kubernetes",
    }
    payload.update(extra)
    return json.dumps(payload)


def resume_reply(name="Jane Doe", **extra) -> str:
    payload = {
        "fullName": name,
        "email": "jane@example.com",
        "phone": "+1 555 0100",
        "skills": [{"name": "Python", "yearsOfExperience": 5, "level": "Expert"}],
        "experiences": [{
            "companyName": "Acme",
            "position": "Backend Engineer",
            "startDate": "2019-01",
            "endDate": "2022-01",
            "description": "APIs",
            "isCurrent": False,
        }],
        "education": {
            "institution": "State University",
            "degree": "Bachelor",
            "fieldOfStudy": "Computer Science",
            "graduationYear": 2018,
        },
    }
    payload.update(extra)
    return json.dumps(payload)


@pytest.fixture
def requirement():
    return JobRequirement(
        job_title="Backend Engineer",
        description="Build APIs",
        required_skills=["Python", "FastAPI", "Kubernetes"],
        preferred_skills=["Docker"],
        min_years_of_experience=3,
        required_degree="Bachelor",
        preferred_fields_of_study=["Computer Science"],
        skills_weight=40,
        experience_weight=40,
        education_weight=20,
    )


@pytest.fixture
def parsed_candidate():
    return Candidate(
        full_name="Jane Doe",
        email="jane@example.com",
        file_name="jane.pdf",
        raw_content="Jane Doe - Python developer",
        skills=[Skill(name="Python", years_of_experience=5, level="Expert")],
        experiences=[Experience(company_name="Acme", position="Engineer")],
        education=Education(degree="Bachelor", field_of_study="Computer Science"),
    )


@pytest.fixture
def unparsed_candidate():
    return Candidate(
        full_name="",
        file_name="scan.pdf",
        raw_content="JOHN SMITH john@smith.io Java developer 8 years",
        parsed=False,
    )


@pytest.fixture
def llm_client():
    return LLMClient(LLMSettings(provider="openai", api_key="test-key"))


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def orchestrator(llm_client, store):
    return AnalysisOrchestrator(llm_client, store, max_workers=4)


@pytest.fixture
def unconfigured_orchestrator(store):
    return AnalysisOrchestrator(LLMClient(LLMSettings()), store, max_workers=4)


def _client_for(orchestrator):
    from resume_ranker.main import app

    original = app.state.orchestrator
    app.state.orchestrator = orchestrator
    try:
        yield TestClient(app)
    finally:
        app.state.orchestrator = original


@pytest.fixture
def client(orchestrator):
    """API client backed by a configured orchestrator and an empty store"""
    yield from _client_for(orchestrator)


@pytest.fixture
def unconfigured_client(unconfigured_orchestrator):
    yield from _client_for(unconfigured_orchestrator)
