from resume_ranker.helpers.prompts import (
    build_direct_scoring_prompt, build_parse_prompt, build_scoring_prompt,
    select_scoring_prompt, uses_direct_scoring,
)
from resume_ranker.models.models import Candidate


class TestPromptBuilder:

    def test_parse_prompt_embeds_resume_and_schema(self):
        prompt = build_parse_prompt("Jane Doe {not a template}")
        assert "Jane Doe {not a template}" in prompt
        for key in ("fullName", "yearsOfExperience", "companyName", "startDate", "isCurrent", "fieldOfStudy", "graduationYear"):
            assert f'"{key}"' in prompt

    def test_structured_prompt_embeds_candidate_and_requirement(self, parsed_candidate, requirement):
        prompt = build_scoring_prompt(parsed_candidate, requirement)
        assert "Jane Doe" in prompt
        assert "Skills: Python" in prompt
        assert "Number of Companies: 1" in prompt
        assert "Bachelor - Computer Science" in prompt
        assert "Required Skills: Python, FastAPI, Kubernetes" in prompt
        assert "Maximum Experience: Not specified years" in prompt
        assert "Skills Weight: 40%" in prompt
        assert "Education Weight: 20%" in prompt
        assert '"skillsScore"' in prompt
        assert "candidateName" not in prompt

    def test_structured_prompt_without_education(self, requirement):
        candidate = Candidate(full_name="Al", raw_content="x")
        prompt = build_scoring_prompt(candidate, requirement)
        assert "Education: Not specified - Not specified" in prompt
        assert "Total Experience: 0.0 years" in prompt

    def test_direct_prompt_embeds_raw_text_and_requests_identity(self, requirement):
        requirement.max_years_of_experience = 10
        prompt = build_direct_scoring_prompt("RAW CV TEXT", requirement)
        assert "RAW CV TEXT" in prompt
        assert "Maximum Experience: 10 years" in prompt
        for key in ("candidateName", "candidateEmail", "candidatePhone", "skillsScore"):
            assert f'"{key}"' in prompt

    def test_selection_uses_direct_variant_for_unparsed(self, unparsed_candidate, requirement):
        assert uses_direct_scoring(unparsed_candidate)
        prompt = select_scoring_prompt(unparsed_candidate, requirement)
        assert unparsed_candidate.raw_content in prompt
        assert "candidateName" in prompt

    def test_selection_uses_direct_variant_for_nameless(self, requirement):
        candidate = Candidate(full_name="", raw_content="some text", parsed=True)
        assert uses_direct_scoring(candidate)
        assert "candidateName" in select_scoring_prompt(candidate, requirement)

    def test_selection_uses_structured_variant(self, parsed_candidate, requirement):
        assert not uses_direct_scoring(parsed_candidate)
        prompt = select_scoring_prompt(parsed_candidate, requirement)
        assert "candidateName" not in prompt
        assert "Name: Jane Doe" in prompt
