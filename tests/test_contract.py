"""
Unit tests for the vision-output JSON gate: strip_json_fence and validate_description.
"""

import pytest

from askproxy.agent.contract import strip_json_fence, validate_description
from askproxy.core.errors import ErrorKind, Failure


class TestStripJsonFence:
    """Tests for strip_json_fence()."""

    def test_plain_json_is_only_trimmed(self) -> None:
        assert strip_json_fence('  {"a": 1}\n') == '{"a": 1}'

    def test_fenced_json_is_unwrapped(self) -> None:
        assert strip_json_fence('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_fence_without_closing_marker(self) -> None:
        assert strip_json_fence('```json {"a": 1}') == '{"a": 1}'

    def test_untagged_fence_is_left_alone(self) -> None:
        # Only the ```json opener is recognized
        assert strip_json_fence('```\n{"a": 1}\n```') == '```\n{"a": 1}\n```'


class TestValidateDescription:
    """Tests for validate_description()."""

    def test_valid_json_returns_stripped_string_unchanged(self) -> None:
        raw = '{"main_window": "Settings",  "visual_state_notes": []}'
        assert validate_description(raw) == raw

    def test_fenced_json_returns_inner_text(self) -> None:
        inner = '{\n  "main_window": null\n}'
        assert validate_description(f"```json\n{inner}\n```") == inner

    def test_prose_is_rejected(self) -> None:
        result = validate_description("Here is the description: a window.")
        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.INVALID_JSON_CONTRACT
        assert result.status == 500
        assert result.message == "AI description step failed: Output was not valid JSON"

    def test_truncated_json_is_rejected(self) -> None:
        assert isinstance(validate_description('{"main_window": "Sett'), Failure)

    def test_any_json_value_passes_syntax_check(self) -> None:
        # Schema is not enforced; only syntax
        assert validate_description("[1, 2, 3]") == "[1, 2, 3]"
        assert validate_description('"just a string"') == '"just a string"'

    @pytest.mark.parametrize(
        "raw",
        ['{"value": NaN}', '{"value": Infinity}', '[-Infinity]', "NaN"],
    )
    def test_non_standard_constants_are_rejected(self, raw: str) -> None:
        result = validate_description(raw)
        assert isinstance(result, Failure)
        assert result.kind is ErrorKind.INVALID_JSON_CONTRACT

    def test_constant_names_inside_strings_are_fine(self) -> None:
        raw = '{"ocr_full_text": "NaN Infinity"}'
        assert validate_description(raw) == raw
