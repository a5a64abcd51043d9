"""
Pytest configuration and shared fixtures for jvariant tests.

Provides immutable test data fixtures and keeps the ``JVARIANT_*``
environment variables from leaking into tests that do not set them.
"""

from dataclasses import dataclass
from typing import Any

import pytest

from jvariant import ErrorKind


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "JVARIANT_STRICT",
        "JVARIANT_MAX_DEPTH",
        "JVARIANT_DUPLICATE_KEYS",
    ):
        monkeypatch.delenv(name, raising=False)


@dataclass(frozen=True)
class JsonTestCase:
    """
    Immutable container for JSON test case data.

    Holds test input and expected behavior for consistent test execution.
    """

    description: str
    input_data: str
    should_fail: bool = False
    expected_output: Any = None
    skip_reason: str = ""
    error_kind: ErrorKind | None = None


@pytest.fixture
def json_fail_cases() -> list[JsonTestCase]:
    """
    Provides documents that strict parsing must reject.

    The JSON_checker failure suite plus the simplejson control character
    case, each tagged with the error kind the top-level failure carries.
    """
    fail_docs = [
        # https://json.org/JSON_checker/test/fail1.json
        ('"A JSON payload should be an object or array, not a string."', None),
        # https://json.org/JSON_checker/test/fail2.json
        ('["Unclosed array"', ErrorKind.UNTERMINATED_CONTAINER),
        # https://json.org/JSON_checker/test/fail3.json
        ('{unquoted_key: "keys must be quoted"}', ErrorKind.MALFORMED_ELEMENT),
        # https://json.org/JSON_checker/test/fail4.json
        ('["extra comma",]', ErrorKind.TRAILING_COMMA),
        # https://json.org/JSON_checker/test/fail5.json
        ('["double extra comma",,]', ErrorKind.MALFORMED_ELEMENT),
        # https://json.org/JSON_checker/test/fail6.json
        ('[   , "<-- missing value"]', ErrorKind.MALFORMED_ELEMENT),
        # https://json.org/JSON_checker/test/fail7.json
        ('["Comma after the close"],', ErrorKind.EXTRA_DATA),
        # https://json.org/JSON_checker/test/fail8.json
        ('["Extra close"]]', ErrorKind.EXTRA_DATA),
        # https://json.org/JSON_checker/test/fail9.json
        ('{"Extra comma": true,}', ErrorKind.TRAILING_COMMA),
        # https://json.org/JSON_checker/test/fail10.json
        (
            '{"Extra value after close": true} "misplaced quoted value"',
            ErrorKind.EXTRA_DATA,
        ),
        # https://json.org/JSON_checker/test/fail11.json
        ('{"Illegal expression": 1 + 2}', ErrorKind.MISSING_SEPARATOR),
        # https://json.org/JSON_checker/test/fail12.json
        ('{"Illegal invocation": alert()}', ErrorKind.MALFORMED_ELEMENT),
        # https://json.org/JSON_checker/test/fail13.json
        (
            '{"Numbers cannot have leading zeroes": 013}',
            ErrorKind.MALFORMED_ELEMENT,
        ),
        # https://json.org/JSON_checker/test/fail14.json
        ('{"Numbers cannot be hex": 0x14}', ErrorKind.MISSING_SEPARATOR),
        # https://json.org/JSON_checker/test/fail15.json
        ('["Illegal backslash escape: \\x15"]', ErrorKind.MALFORMED_ELEMENT),
        # https://json.org/JSON_checker/test/fail16.json
        ("[\\naked]", ErrorKind.MALFORMED_ELEMENT),
        # https://json.org/JSON_checker/test/fail17.json
        ('["Illegal backslash escape: \\017"]', ErrorKind.MALFORMED_ELEMENT),
        # https://json.org/JSON_checker/test/fail18.json - SKIPPED (within max_depth)
        ('[[[[[[[[[[[[[[[[[[[["Too deep"]]]]]]]]]]]]]]]]]]]]', None),
        # https://json.org/JSON_checker/test/fail19.json
        ('{"Missing colon" null}', ErrorKind.MISSING_SEPARATOR),
        # https://json.org/JSON_checker/test/fail20.json
        ('{"Double colon":: null}', ErrorKind.MALFORMED_ELEMENT),
        # https://json.org/JSON_checker/test/fail21.json
        ('{"Comma instead of colon", null}', ErrorKind.MISSING_SEPARATOR),
        # https://json.org/JSON_checker/test/fail22.json
        ('["Colon instead of comma": false]', ErrorKind.MISSING_SEPARATOR),
        # https://json.org/JSON_checker/test/fail23.json
        ('["Bad value", truth]', ErrorKind.MALFORMED_ELEMENT),
        # https://json.org/JSON_checker/test/fail24.json
        ("['single quote']", ErrorKind.MALFORMED_ELEMENT),
        # https://json.org/JSON_checker/test/fail25.json
        ('["\ttab\tcharacter\tin\tstring\t"]', ErrorKind.MALFORMED_ELEMENT),
        # https://json.org/JSON_checker/test/fail26.json
        ('["tab\\   character\\   in\\  string\\  "]', ErrorKind.MALFORMED_ELEMENT),
        # https://json.org/JSON_checker/test/fail27.json
        ('["line\nbreak"]', ErrorKind.MALFORMED_ELEMENT),
        # https://json.org/JSON_checker/test/fail28.json
        ('["line\\\nbreak"]', ErrorKind.MALFORMED_ELEMENT),
        # https://json.org/JSON_checker/test/fail29.json
        ("[0e]", ErrorKind.MISSING_SEPARATOR),
        # https://json.org/JSON_checker/test/fail30.json
        ("[0e+]", ErrorKind.MISSING_SEPARATOR),
        # https://json.org/JSON_checker/test/fail31.json
        ("[0e+-1]", ErrorKind.MISSING_SEPARATOR),
        # https://json.org/JSON_checker/test/fail32.json
        (
            '{"Comma instead if closing brace": true,',
            ErrorKind.UNTERMINATED_CONTAINER,
        ),
        # https://json.org/JSON_checker/test/fail33.json
        ('["mismatch"}', ErrorKind.MISSING_SEPARATOR),
        # https://code.google.com/archive/p/simplejson/issues/3
        ('["A\u001fZ control characters in string"]', ErrorKind.MALFORMED_ELEMENT),
    ]

    # Cases that are skipped with reasons
    skips = {
        1: "a bare string is a valid document",
        18: "twenty levels is well within the nesting limit",
    }

    return [
        JsonTestCase(
            description=f"fail{idx + 1}.json",
            input_data=doc,
            should_fail=True,
            skip_reason=skips.get(idx + 1, ""),
            error_kind=kind,
        )
        for idx, (doc, kind) in enumerate(fail_docs)
    ]


@pytest.fixture
def json_pass_cases() -> list[JsonTestCase]:
    """
    Provides JSON documents that must parse in both lenient and strict mode.
    """
    return [
        JsonTestCase(
            description="pass1.json - complex nested structure",
            input_data="""[
    "JSON Test Pattern pass1",
    {"object with 1 member":["array with 1 element"]},
    {},
    [],
    -42,
    true,
    false,
    null,
    {
        "integer": 1234567890,
        "real": -9876.543210,
        "e": 0.123456789e-12,
        "E": 1.234567890E+34,
        "":  23456789012E66,
        "zero": 0,
        "one": 1,
        "space": " ",
        "quote": "\\"",
        "backslash": "\\\\",
        "controls": "\\b\\f\\n\\r\\t",
        "slash": "/ & \\/",
        "alpha": "abcdefghijklmnopqrstuvwyz",
        "ALPHA": "ABCDEFGHIJKLMNOPQRSTUVWYZ",
        "digit": "0123456789",
        "0123456789": "digit",
        "special": "`1~!@#$%^&*()_+-={':[,]}|;.</>?",
        "true": true,
        "false": false,
        "null": null,
        "array":[  ],
        "object":{  },
        "address": "50 St. James Street",
        "url": "https://www.JSON.org/",
        "comment": "// /* <!-- --",
        "# -- --> */": " ",
        " s p a c e d " :[1,2 , 3

,

4 , 5        ,          6           ,7        ],"compact":[1,2,3,4,5,6,7],
        "jsontext": "{\\"object with 1 member\\":[\\"array with 1 element\\"]}"
    }
]""",
        ),
        JsonTestCase(
            description="pass2.json - deep nesting",
            input_data='[[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]',
        ),
        JsonTestCase(
            description="pass3.json - simple object",
            input_data='{"JSON Test Pattern pass3": {"The outermost value": "must be an object or array.", "In this test": "It is an object."}}',
        ),
    ]


@pytest.fixture
def basic_json_values() -> list[JsonTestCase]:
    """
    Provides basic JSON value test cases for fundamental parsing.

    Covers all value kinds and basic container structures.
    """
    return [
        JsonTestCase("null value", "null", False, None),
        JsonTestCase("true boolean", "true", False, True),
        JsonTestCase("false boolean", "false", False, False),
        JsonTestCase("integer", "42", False, 42),
        JsonTestCase("negative integer", "-17", False, -17),
        JsonTestCase("float", "3.14", False, 3.14),
        JsonTestCase("empty string", '""', False, ""),
        JsonTestCase("simple string", '"hello"', False, "hello"),
        JsonTestCase("empty array", "[]", False, []),
        JsonTestCase("empty object", "{}", False, {}),
        JsonTestCase("simple array", "[1, 2, 3]", False, [1, 2, 3]),
        JsonTestCase(
            "simple object", '{"key": "value"}', False, {"key": "value"}
        ),
    ]
