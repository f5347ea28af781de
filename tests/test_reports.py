from unittest.mock import patch

import pytest

from resume_ranker.models.models import Candidate
from resume_ranker.utils.exceptions import ProviderError

from conftest import scoring_reply

REQUIREMENT = {
    "job_requirement": {
        "job_title": "Backend Engineer",
        "required_skills": ["Python", "FastAPI", "Kubernetes"],
        "min_years_of_experience": 3,
        "skills_weight": 40,
        "experience_weight": 40,
        "education_weight": 20,
    }
}


@pytest.fixture
def seeded_session(orchestrator):
    candidates = [
        Candidate(full_name="Alice", file_name="alice.pdf", raw_content="Alice"),
        Candidate(full_name="Bob", file_name="bob.pdf", raw_content="Bob"),
        Candidate(full_name="Carol", file_name="carol.pdf", raw_content="Carol"),
    ]
    orchestrator.store.append_candidates("s-report", candidates)
    return "s-report"


def _answer(prompt):
    if "Name: Alice\n" in prompt:
        return scoring_reply(skills=50, experience=50, education=50)
    if "Name: Bob\n" in prompt:
        return scoring_reply(skills=90, experience=90, education=90)
    raise ProviderError("OpenAI", status_or_reason=500, body="server error")


class TestReportsRouter:
    """Test cases for analysis and result endpoints"""

    def test_analyze(self, client, llm_client, seeded_session):
        with patch.object(llm_client, "complete", side_effect=_answer):
            response = client.post(f"/api/resume/analyze/{seeded_session}", json=REQUIREMENT)

        assert response.status_code == 200
        data = response.json()
        assert data["total_candidates"] == 3
        assert data["successfully_analyzed"] == 2
        assert data["failed_to_analyze"] == 1
        assert data["errors"][0].startswith("Error analyzing candidate (Carol):")

        top = data["results"][0]
        assert top["candidate"]["full_name"] == "Bob"
        assert top["total_score"] == 90.0
        assert top["skills_analysis"]["match_percentage"] == pytest.approx(66.666, rel=1e-3)
        assert [r["candidate"]["full_name"] for r in data["results"]] == ["Bob", "Alice"]

    def test_results_and_top_candidates(self, client, llm_client, seeded_session):
        with patch.object(llm_client, "complete", side_effect=_answer):
            client.post(f"/api/resume/analyze/{seeded_session}", json=REQUIREMENT)

        results = client.get(f"/api/resume/results/{seeded_session}").json()
        assert [r["total_score"] for r in results] == [90.0, 50.0]

        top = client.get(f"/api/resume/top-candidates/{seeded_session}", params={"count": 1}).json()
        assert len(top) == 1
        assert top[0]["candidate"]["full_name"] == "Bob"

        assert client.get(f"/api/resume/top-candidates/{seeded_session}", params={"count": 0}).json() == []
        assert len(client.get(f"/api/resume/top-candidates/{seeded_session}").json()) == 2

    def test_results_before_analysis(self, client, seeded_session):
        response = client.get(f"/api/resume/results/{seeded_session}")
        assert response.status_code == 200
        assert response.json() == []

    def test_results_unknown_session(self, client):
        assert client.get("/api/resume/results/missing").json() == []
        assert client.get("/api/resume/top-candidates/missing").json() == []

    def test_analyze_not_configured(self, unconfigured_client, unconfigured_orchestrator):
        unconfigured_orchestrator.store.append_candidates("s-1", [Candidate(full_name="A")])

        response = unconfigured_client.post("/api/resume/analyze/s-1", json=REQUIREMENT)

        assert response.status_code == 400
        assert response.json()["error"]["error_code"] == "NOT_CONFIGURED"

    def test_analyze_unknown_session(self, client):
        response = client.post("/api/resume/analyze/missing", json=REQUIREMENT)

        assert response.status_code == 404
        assert response.json()["error"]["details"]["session_id"] == "missing"

    def test_analyze_empty_session(self, client):
        session_id = client.post("/api/resume/session").json()["session_id"]

        response = client.post(f"/api/resume/analyze/{session_id}", json=REQUIREMENT)

        assert response.status_code == 400
        assert response.json()["error"]["error_code"] == "NO_CANDIDATES"

    def test_unparsed_candidate_identity(self, client, llm_client, orchestrator, unparsed_candidate):
        orchestrator.store.append_candidates("s-raw", [unparsed_candidate])
        reply = scoring_reply(candidateName="John Smith", candidateEmail="john@smith.io")

        with patch.object(llm_client, "complete", return_value=reply):
            data = client.post("/api/resume/analyze/s-raw", json=REQUIREMENT).json()

        result = data["results"][0]
        assert result["candidate_name"] == "John Smith"
        assert result["candidate_email"] == "john@smith.io"
        assert result["candidate"]["file_name"] == "scan.pdf"
