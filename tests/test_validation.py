"""Tests for topicsync.validation."""

import pytest

from topicsync.validation import (
    MAX_TOPIC_DESCRIPTION_LENGTH,
    MAX_TOPIC_NAME_LENGTH,
    TOPIC_FIELDS,
    editable_fields,
    sanitize_string,
    validate_backend_url,
    validate_topic,
    validate_topic_log,
)

# ============================================================================
# validate_topic
# ============================================================================


class TestValidateTopic:
    def test_valid(self):
        assert validate_topic({"name": "Reading", "description": "x", "pin_weight": 1}) == []

    def test_missing_name(self):
        assert validate_topic({}) == ["name cannot be empty"]

    def test_whitespace_name(self):
        assert validate_topic({"name": "   "}) == ["name cannot be empty"]

    def test_name_at_limit_ok(self):
        assert validate_topic({"name": "n" * MAX_TOPIC_NAME_LENGTH}) == []

    def test_name_too_long(self):
        errors = validate_topic({"name": "n" * (MAX_TOPIC_NAME_LENGTH + 1)})
        assert errors == [f"name cannot exceed {MAX_TOPIC_NAME_LENGTH} characters"]

    def test_description_too_long(self):
        errors = validate_topic(
            {"name": "ok", "description": "d" * (MAX_TOPIC_DESCRIPTION_LENGTH + 1)}
        )
        assert len(errors) == 1
        assert "description" in errors[0]

    def test_reports_every_violation(self):
        errors = validate_topic({"name": "", "pin_weight": -1})
        assert "name cannot be empty" in errors
        assert "pin_weight must be a non-negative integer" in errors

    def test_partial_allows_missing_name(self):
        assert validate_topic({"pin_weight": 3}, partial=True) == []

    def test_partial_still_checks_present_name(self):
        assert validate_topic({"name": ""}, partial=True) == ["name cannot be empty"]

    def test_bool_pin_weight_rejected(self):
        assert validate_topic({"name": "x", "pin_weight": True}) != []


# ============================================================================
# validate_topic_log
# ============================================================================


class TestValidateTopicLog:
    def test_valid(self):
        data = {"topic_id": 5, "topic_type": 2, "content": "note", "mark": 1}
        assert validate_topic_log(data) == []

    @pytest.mark.parametrize("topic_type", [0, 5, None, "1"])
    def test_invalid_topic_type(self, topic_type):
        data = {"topic_id": 5, "topic_type": topic_type, "content": "note"}
        assert validate_topic_log(data) == ["topic_type is invalid"]

    @pytest.mark.parametrize("topic_id", [0, -3, None])
    def test_invalid_topic_id(self, topic_id):
        data = {"topic_id": topic_id, "topic_type": 1, "content": "note"}
        assert validate_topic_log(data) == ["topic_id is invalid"]

    def test_empty_content(self):
        data = {"topic_id": 5, "topic_type": 1, "content": " "}
        assert validate_topic_log(data) == ["content cannot be empty"]

    def test_extra_data_must_be_object(self):
        data = {"topic_id": 5, "topic_type": 1, "content": "x", "extra_data": [1]}
        assert validate_topic_log(data) == ["extra_data must be an object"]

    def test_partial_only_checks_present(self):
        assert validate_topic_log({"content": "edited"}, partial=True) == []


# ============================================================================
# helpers
# ============================================================================


class TestEditableFields:
    def test_drops_read_only_unknown_and_none(self):
        data = {"id": 9, "create_time": 1, "name": "n", "bogus": 1, "description": None}
        assert editable_fields(data, TOPIC_FIELDS) == {"name": "n"}


class TestSanitizeString:
    def test_strips_control_characters(self):
        assert sanitize_string("a\x00b\x07c\nd", "field") == "abc\nd"

    def test_required_empty_raises(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            sanitize_string("  ", "name")

    def test_optional_none(self):
        assert sanitize_string(None, "description", required=False) == ""

    def test_too_long(self):
        with pytest.raises(ValueError, match="too long"):
            sanitize_string("x" * 11, "name", max_length=10)


class TestValidateBackendUrl:
    def test_https_ok(self):
        assert validate_backend_url("https://api.example.com") == "https://api.example.com"

    def test_localhost_http_ok(self):
        assert validate_backend_url("http://localhost:8000") == "http://localhost:8000"

    def test_remote_http_rejected(self, caplog):
        assert validate_backend_url("http://api.example.com") is None
        assert "non-local http" in caplog.text

    def test_bad_scheme_rejected(self):
        assert validate_backend_url("ftp://example.com") is None

    def test_empty(self):
        assert validate_backend_url("") is None
