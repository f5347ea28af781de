import json

import pytest

from resume_ranker.helpers.decoding import decode_parsed_resume, decode_scoring_response
from resume_ranker.utils.exceptions import MalformedModelResponseError
from resume_ranker.utils.utils import as_list, as_text, extract_json

from conftest import resume_reply, scoring_reply


class TestExtractJson:
    """Recovering the JSON object from free-form model replies"""

    def test_empty_input_yields_empty_object(self):
        assert extract_json("") == "{}"
        assert extract_json("   \n\t") == "{}"
        assert extract_json(None) == "{}"

    @pytest.mark.parametrize("clean", ['{"a":1}', '{}', '{"a":{"b":[1,2]}}'])
    def test_clean_json_is_returned_unchanged(self, clean):
        assert extract_json(clean) == clean

    def test_fenced_block_with_json_tag(self):
        assert extract_json('Here you go:\n```json\n{"a":1}\n```') == '{"a":1}'

    def test_fenced_block_tag_is_case_insensitive(self):
        assert extract_json('```JSON\n{"a": 2}\n```\nthanks') == '{"a": 2}'

    def test_fenced_block_without_tag(self):
        assert extract_json('```\n  {"a": 3}  \n```') == '{"a": 3}'

    def test_fence_wins_over_outer_braces(self):
        raw = 'note {x} then ```json\n{"a":1}\n``` and {y}'
        assert extract_json(raw) == '{"a":1}'

    def test_prose_around_object(self):
        assert extract_json('prefix {"a":1} suffix') == '{"a":1}'

    def test_outermost_braces_are_inclusive(self):
        raw = 'x {"a": {"b": 1}} y {"c": 2} z'
        assert extract_json(raw) == '{"a": {"b": 1}} y {"c": 2}'

    def test_no_braces_returns_input(self):
        assert extract_json("no json here") == "no json here"

    def test_closing_before_opening_returns_input(self):
        assert extract_json("} backwards {") == "} backwards {"


class TestCoercion:

    def test_as_text_joins_lists(self):
        assert as_text(["Good communicator", " ", "Team lead"]) == "Good communicator Team lead"
        assert as_text(None) == ""

    def test_as_list_splits_strings(self):
        assert as_list("Python, Go; Rust") == ["Python", "Go", "Rust"]
        assert as_list(["a", None, " b "]) == ["a", "b"]
        assert as_list(42) == []


class TestDecodeParsedResume:

    def test_decodes_full_payload(self):
        parsed = decode_parsed_resume("Sure!\n```json\n" + resume_reply() + "\n```")
        assert parsed.full_name == "Jane Doe"
        assert parsed.skills[0].years_of_experience == 5
        assert parsed.experiences[0].start_date == "2019-01"
        assert parsed.education.field_of_study == "Computer Science"

    def test_keys_match_case_insensitively(self):
        parsed = decode_parsed_resume('{"FULLNAME": "Ann", "Skills": [{"NAME": "Go", "yearsofexperience": "3"}]}')
        assert parsed.full_name == "Ann"
        assert parsed.skills[0].name == "Go"
        assert parsed.skills[0].years_of_experience == 3

    def test_bare_skill_names_are_accepted(self):
        parsed = decode_parsed_resume('{"fullName": "Ann", "skills": ["Go", "SQL"]}')
        assert [s.name for s in parsed.skills] == ["Go", "SQL"]

    def test_nulls_are_tolerated(self):
        parsed = decode_parsed_resume('{"fullName": null, "email": null, "education": null, "experiences": [{"companyName": "X", "endDate": null, "isCurrent": null}]}')
        assert parsed.full_name is None
        assert parsed.education is None
        assert parsed.experiences[0].end_date is None
        assert parsed.experiences[0].is_current is False

    def test_invalid_json_is_malformed(self):
        with pytest.raises(MalformedModelResponseError):
            decode_parsed_resume("I could not read this resume.")

    def test_non_object_is_malformed(self):
        with pytest.raises(MalformedModelResponseError):
            decode_parsed_resume("[1, 2, 3]")

    @pytest.mark.parametrize("reply", ["", "   ", "{}", "null"])
    def test_empty_reply_decodes_to_defaults(self, reply):
        parsed = decode_parsed_resume(reply)
        assert parsed.full_name is None
        assert parsed.skills is None
        assert parsed.education is None

    def test_shape_mismatch_is_malformed(self):
        with pytest.raises(MalformedModelResponseError) as exc_info:
            decode_parsed_resume('{"fullName": "Ann", "skills": "lots"}')
        assert exc_info.value.details["schema"] == "resume"

    def test_wrong_number_type_is_malformed(self):
        with pytest.raises(MalformedModelResponseError):
            decode_parsed_resume('{"fullName": "Ann", "skills": [{"name": "Go", "yearsOfExperience": "many"}]}')


class TestDecodeScoringResponse:

    def test_decodes_scores_and_flags(self):
        analysis = decode_scoring_response(scoring_reply(skills=85.5))
        assert analysis.skills_score == 85.5
        assert analysis.matched_skills == ["Python", "FastAPI"]
        assert analysis.has_required_degree is True
        assert analysis.candidate_name is None

    def test_numbers_may_arrive_as_strings(self):
        analysis = decode_scoring_response(scoring_reply(skills="90", experience="75.5"))
        assert analysis.skills_score == 90.0
        assert analysis.experience_score == 75.5

    def test_list_valued_text_is_joined(self):
        analysis = decode_scoring_response(scoring_reply(strengths=["Python", "APIs"]))
        assert analysis.strengths == "Python APIs"

    def test_identity_fields_from_raw_text_prompt(self):
        analysis = decode_scoring_response(scoring_reply(candidateName="John Smith", candidateEmail="john@smith.io"))
        assert analysis.candidate_name == "John Smith"
        assert analysis.candidate_email == "john@smith.io"

    def test_missing_fields_default(self):
        analysis = decode_scoring_response(json.dumps({"skillsScore": 50}))
        assert analysis.experience_score == 0.0
        assert analysis.matched_skills is None
        assert analysis.summary is None

    @pytest.mark.parametrize("reply", ["", "{}"])
    def test_empty_reply_scores_zero(self, reply):
        analysis = decode_scoring_response(reply)
        assert (analysis.skills_score, analysis.experience_score, analysis.education_score) == (0.0, 0.0, 0.0)
        assert analysis.has_required_degree is False

    def test_null_reply_is_malformed(self):
        with pytest.raises(MalformedModelResponseError) as exc_info:
            decode_scoring_response("null")
        assert exc_info.value.details["schema"] == "scoring"

    def test_non_numeric_score_is_malformed(self):
        with pytest.raises(MalformedModelResponseError):
            decode_scoring_response(scoring_reply(skills="excellent"))
