import json

import pytest

from app.helpers.parsing import (
    clean_text, estimate_experience_years, extract_emails, extract_phones, find_date_ranges,
    mentions_term, parse_validation_response,
)
from app.services.duration_parser import DurationParser
from app.utils.exceptions import MalformedServiceResponse
from tests.conftest import field, make_reply


class TestParseValidationResponse:
    """Service reply to FieldAssessmentSet"""

    def test_plain_json(self):
        result = parse_validation_response(json.dumps(make_reply()))
        assert result.name.is_match is True
        assert result.name.extracted_value == "Jane Doe"
        assert result.overall_confidence == 0.9

    def test_json_wrapped_in_prose(self):
        raw = "Here you go: " + json.dumps(make_reply()) + " thanks"
        result = parse_validation_response(raw)
        assert result.summary == "Form data is consistent with the CV."
        assert result.skills.extracted_value == ["Python", "React"]

    def test_json_in_markdown_fence(self):
        raw = "```json\n" + json.dumps(make_reply()) + "\n```"
        assert parse_validation_response(raw).email.confidence == 0.95

    def test_no_braces(self):
        with pytest.raises(MalformedServiceResponse):
            parse_validation_response("I could not compare these documents.")

    def test_empty_reply(self):
        with pytest.raises(MalformedServiceResponse):
            parse_validation_response("")

    def test_undecodable_span(self):
        with pytest.raises(MalformedServiceResponse):
            parse_validation_response("{ name: not json }")

    @pytest.mark.parametrize("key", ["name", "email", "phone", "experience", "skills", "overallConfidence", "summary"])
    def test_missing_required_key(self, key):
        reply = make_reply()
        del reply[key]
        with pytest.raises(MalformedServiceResponse) as exc_info:
            parse_validation_response(json.dumps(reply))
        assert exc_info.value.details["missing_key"] == key

    def test_bad_field_shape(self):
        reply = make_reply(email={"confidence": 0.9})
        with pytest.raises(MalformedServiceResponse):
            parse_validation_response(json.dumps(reply))

    def test_null_confidence_is_malformed(self):
        reply = make_reply(phone=field(confidence=None))
        with pytest.raises(MalformedServiceResponse):
            parse_validation_response(json.dumps(reply))

    def test_confidence_clamped(self):
        reply = make_reply(name=field(confidence=1.4), overallConfidence=-0.2)
        result = parse_validation_response(json.dumps(reply))
        assert result.name.confidence == 1.0
        assert result.overall_confidence == 0.0

    def test_numeric_skill_values_become_strings(self):
        reply = make_reply(skills=field(cv_value=["C", 99]))
        assert parse_validation_response(json.dumps(reply)).skills.extracted_value == ["C", "99"]

    def test_result_is_frozen(self):
        result = parse_validation_response(json.dumps(make_reply()))
        with pytest.raises(Exception):
            result.summary = "changed"

    def test_as_mapping(self):
        mapping = parse_validation_response(json.dumps(make_reply())).as_mapping()
        assert list(mapping) == ["name", "email", "phone", "experience", "skills"]


class TestResumeTextHelpers:

    def test_clean_text(self):
        assert clean_text("  Jane\n\n  Doe\t ") == "Jane Doe"

    def test_extract_emails(self):
        assert extract_emails("Mail: Jane@Example.com or jane@example.com") == ["jane@example.com"]

    def test_extract_phones(self):
        assert extract_phones("Call +1 (555) 123-4567 today") == ["15551234567"]

    def test_find_date_ranges(self):
        text = "Acme 01/2021 - 03/2024. Beta Jan 2019 to Dec 2020. Gamma 2015-2017"
        assert find_date_ranges(text) == ["01/2021 - 03/2024", "Jan 2019 to Dec 2020", "2015-2017"]

    def test_estimate_experience_years(self):
        text = "Acme 01/2021 - 03/2024; Beta 2018 - 2020"
        # 38 months + 24 months
        assert estimate_experience_years(text, DurationParser(2024, 3)) == round(62 / 12, 2)

    def test_mentions_term(self):
        assert mentions_term("Skills: Java, Node.js", "node.js")
        assert not mentions_term("Skills: JavaScript", "java")

    def test_mentions_term_ignores_dotted_suffix(self):
        assert not mentions_term("Frontend: React.js, Vue", "js")
        assert mentions_term("Frontend: React.js, Vue", "react.js")
        assert mentions_term("Languages: JS, TS", "js")
