"""
Normalization and suppression of log-call arguments.
"""

from __future__ import annotations

import pytest

from logbridge.normalize import NormalizedMessage, is_suppressed, normalize


class WeirdError(Exception):
    def __init__(self, message: str, code: int):
        super().__init__(message)
        self.code = code


class TestNormalize:
    def test_string_passes_through(self) -> None:
        assert normalize("Test Error") == NormalizedMessage("Test Error", True)

    def test_whitespace_string_is_kept_verbatim(self) -> None:
        assert normalize("   ").text == "   "

    def test_none_becomes_empty_string(self) -> None:
        assert normalize(None) == NormalizedMessage("", False)

    def test_structure_keys_are_sorted(self) -> None:
        assert normalize({"b": 1, "a": {"d": 2, "c": 3}}).text == '{"a":{"c":3,"d":2},"b":1}'

    def test_same_structure_same_text(self) -> None:
        assert normalize({"x": 1, "y": 2}).text == normalize({"y": 2, "x": 1}).text

    @pytest.mark.parametrize(("value", "expected"), [(0, "0"), (False, "false"), ([], "[]"), (1.5, "1.5")])
    def test_falsy_primitives_are_not_empty(self, value: object, expected: str) -> None:
        message = normalize(value)
        assert message.text == expected
        assert not message.is_string

    def test_unencodable_values_use_str(self) -> None:
        assert normalize({"ids": {3}}).text == '{"ids":"{3}"}'

    def test_integers_beyond_64_bits_keep_their_value(self) -> None:
        assert normalize(2**70).text == "1180591620717411303424"
        assert normalize({"b": 2**70, "a": "x"}).text == '{"a":"x","b":1180591620717411303424}'

    def test_exception_keeps_message_and_fields(self) -> None:
        text = normalize(WeirdError("Something went wrong.", code=42)).text

        assert "Something went wrong." in text
        assert '"code":42' in text
        assert '"type":"WeirdError"' in text
        assert "traceback" not in text

    def test_raised_exception_includes_traceback(self) -> None:
        try:
            raise WeirdError("Something went wrong.", code=7)
        except WeirdError as err:
            text = normalize(err).text

        assert '"traceback":' in text
        assert "test_raised_exception_includes_traceback" in text

    def test_cyclic_structure_falls_back_to_placeholder(self) -> None:
        cyclic: dict[str, object] = {}
        cyclic["self"] = cyclic

        assert normalize(cyclic).text == "<unserializable dict>"

    def test_broken_str_falls_back_to_placeholder(self) -> None:
        class Broken:
            def __str__(self) -> str:
                raise RuntimeError("no")

        assert normalize([Broken()]).text == "<unserializable list>"


class TestSuppression:
    @pytest.mark.parametrize("text", ["", "{}"])
    def test_empty_encodings_are_suppressed(self, text: str) -> None:
        assert is_suppressed(text)

    @pytest.mark.parametrize("text", [" ", "\n", "0", "false", "[]", "{ }", "null"])
    def test_everything_else_is_forwarded(self, text: str) -> None:
        assert not is_suppressed(text)

    def test_empty_dict_normalizes_to_suppressed_text(self) -> None:
        assert is_suppressed(normalize({}).text)
        assert not is_suppressed(normalize({"a": 1}).text)
