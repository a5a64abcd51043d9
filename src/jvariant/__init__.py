"""
Recursive-descent JSON parser producing an immutable tagged value tree.

Parses JSON text into ``Value`` trees with typed accessors, reports every
failure as an explicit error carrying the input offset, and offers a
``loads``/``load`` convenience layer returning plain Python objects.
"""

import logging
import os
import time
from dataclasses import dataclass
from enum import Enum
from typing import IO
from typing import Any
from typing import Final

from jvariant._printer import describe
from jvariant._scanners import JSON_WHITESPACE
from jvariant._scanners import LENIENT_WHITESPACE
from jvariant._scanners import NUMBER_START
from jvariant._scanners import resolve_escape
from jvariant._scanners import scan_number
from jvariant._scanners import skip_whitespace
from jvariant._value import Kind
from jvariant._value import PythonValue
from jvariant._value import Value
from jvariant._value import ValueKindError

__version__ = "0.1.0"

type Position = int

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH: Final = 200

# Profiling infrastructure - zero-cost when disabled
PROFILE_HOT_PATHS = __debug__ and "JVARIANT_PROFILE" in os.environ

_TRUTHY: Final = frozenset({"1", "true", "yes", "on"})


@dataclass
class HotPathStats:
    """Statistics for profiling hot paths during parsing."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        """Records a function call with timing and character processing info."""
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Context manager for profiling hot paths."""

        def __init__(self, func_name: str, chars: int = 0) -> None:
            self.func_name = func_name
            self.chars = chars
            self.start_time = 0

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            stats = _hot_path_stats.setdefault(
                self.func_name, HotPathStats(self.func_name)
            )
            stats.record_call(duration, self.chars)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns current profiling statistics."""
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        """Clears profiling statistics."""
        _hot_path_stats.clear()

else:

    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str, chars: int = 0) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


class ErrorKind(Enum):
    """Categories of parse failure."""

    EMPTY_INPUT = "empty_input"
    UNRECOGNIZED_LITERAL = "unrecognized_literal"
    MALFORMED_NUMBER = "malformed_number"
    UNTERMINATED_STRING = "unterminated_string"
    UNTERMINATED_CONTAINER = "unterminated_container"
    NON_TEXT_KEY = "non_text_key"
    MALFORMED_ELEMENT = "malformed_element"
    INVALID_ESCAPE = "invalid_escape"
    CONTROL_CHARACTER = "control_character"
    MISSING_SEPARATOR = "missing_separator"
    TRAILING_COMMA = "trailing_comma"
    DUPLICATE_KEY = "duplicate_key"
    DEPTH_EXCEEDED = "depth_exceeded"
    EXTRA_DATA = "extra_data"


class JSONDecodeError(ValueError):
    """
    Describes why and where parsing stopped.

    ``pos`` is the offset into ``doc`` of the construct that failed. A
    container that fails because one of its elements failed is reported as
    MALFORMED_ELEMENT at the element's offset, with the element's own error
    chained as ``__cause__``.
    """

    def __init__(
        self, kind: ErrorKind, msg: str, doc: str = "", pos: Position = 0
    ) -> None:
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.kind = kind
        self.msg = msg
        self.doc = doc
        self.pos = pos

        super().__init__(f"{msg} at offset {pos}")

    @property
    def root_cause(self) -> "JSONDecodeError":
        """Innermost error along the MALFORMED_ELEMENT chain."""
        error = self
        while error.kind is ErrorKind.MALFORMED_ELEMENT and isinstance(
            error.__cause__, JSONDecodeError
        ):
            error = error.__cause__
        return error


class DuplicateKeyPolicy(str, Enum):
    """What an object does with a key it has already seen."""

    FIRST_WINS = "first"
    LAST_WINS = "last"
    REJECT = "reject"


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures parsing behavior with immutable settings.

    The default is the lenient grammar: unchecked literal spelling, optional
    separators, trailing commas and the extended whitespace and escape sets.
    ``strict`` switches all of those to plain JSON rules.
    """

    strict: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH
    duplicate_keys: DuplicateKeyPolicy = DuplicateKeyPolicy.FIRST_WINS

    def __post_init__(self) -> None:
        if not isinstance(self.strict, bool):
            raise TypeError("strict must be a boolean")
        if isinstance(self.max_depth, bool) or not isinstance(
            self.max_depth, int
        ):
            raise TypeError("max_depth must be an integer")
        if self.max_depth < 1:
            raise ValueError("max_depth must be positive")
        if not isinstance(self.duplicate_keys, DuplicateKeyPolicy):
            object.__setattr__(
                self, "duplicate_keys", DuplicateKeyPolicy(self.duplicate_keys)
            )

    @classmethod
    def from_env(cls, **overrides: Any) -> "ParseConfig":
        """
        Builds a config from ``JVARIANT_*`` environment variables.

        Explicit keyword arguments take priority over the environment. A
        value the config cannot accept raises ``ValueError`` naming the
        variable.
        """
        settings: dict[str, Any] = {}
        if (strict := os.environ.get("JVARIANT_STRICT")) is not None:
            settings["strict"] = strict.strip().lower() in _TRUTHY
        if max_depth := os.environ.get("JVARIANT_MAX_DEPTH"):
            try:
                settings["max_depth"] = int(max_depth)
            except ValueError:
                raise ValueError(
                    f"JVARIANT_MAX_DEPTH must be an integer, got {max_depth!r}"
                ) from None
        if policy := os.environ.get("JVARIANT_DUPLICATE_KEYS"):
            settings["duplicate_keys"] = policy.strip().lower()
        settings.update(overrides)
        return cls(**settings)


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of ``parse``: a value and the characters it consumed, or an error.

    A successful result unpacks as ``value, consumed = result``; unpacking a
    failed one raises its error.
    """

    value: Value | None
    consumed: int
    error: JSONDecodeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> tuple[Value, int]:
        if self.error is not None:
            raise self.error
        if self.value is None:
            raise ValueError("result carries neither a value nor an error")
        return self.value, self.consumed

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self.unwrap())


class _StringState(Enum):
    RAW = "raw"
    ESCAPED = "escaped"


_TRUE: Final = Value(Kind.BOOL, True)
_FALSE: Final = Value(Kind.BOOL, False)
_NULL: Final = Value(Kind.NULL)

_LITERALS: Final = {
    "t": ("true", _TRUE),
    "f": ("false", _FALSE),
    "n": ("null", _NULL),
}


def _is_identifier_char(char: str) -> bool:
    return char.isalnum() or char == "_"


class Parser:
    """
    Recursive-descent engine over one immutable document.

    Every production takes the cursor where it starts and returns the value
    it built together with the cursor just past it; failures raise
    ``JSONDecodeError`` and unwind the whole parse.
    """

    def __init__(self, text: str, config: ParseConfig | None = None) -> None:
        self.text = text
        self.length = len(text)
        self.config = config if config is not None else ParseConfig()
        self._whitespace = (
            JSON_WHITESPACE if self.config.strict else LENIENT_WHITESPACE
        )

    def error(self, kind: ErrorKind, msg: str, pos: Position) -> JSONDecodeError:
        return JSONDecodeError(kind, msg, self.text, pos)

    def skip_whitespace(self, pos: Position) -> Position:
        return skip_whitespace(self.text, pos, self._whitespace)

    def parse_at(self, pos: Position = 0) -> tuple[Value, Position]:
        """
        Parses one value starting at ``pos``.

        Returns the value and the cursor just past it. A blank remainder
        yields Null without moving the cursor. Nesting that exhausts the
        interpreter stack before ``max_depth`` is reached is reported as
        DEPTH_EXCEEDED at the start of the value.
        """
        start = self.skip_whitespace(pos)
        if start >= self.length:
            return _NULL, pos
        try:
            return self._parse_value(start, 0)
        except RecursionError:
            raise self.error(
                ErrorKind.DEPTH_EXCEEDED, "Nesting exhausted the stack", start
            ) from None

    def _parse_value(
        self, pos: Position, depth: int
    ) -> tuple[Value, Position]:
        # Callers only dispatch on a non-blank remainder.
        pos = self.skip_whitespace(pos)
        char = self.text[pos]
        if char in _LITERALS:
            return self._parse_literal(pos)
        elif char in NUMBER_START:
            return self._parse_number(pos)
        elif char == '"':
            return self._parse_string(pos)
        elif char == "[":
            return self._parse_array(pos, depth)
        elif char == "{":
            return self._parse_object(pos, depth)
        else:
            raise self.error(
                ErrorKind.UNRECOGNIZED_LITERAL,
                f"Expecting value, found {char!r}",
                pos,
            )

    def _parse_literal(self, pos: Position) -> tuple[Value, Position]:
        word, value = _LITERALS[self.text[pos]]
        end = pos + len(word)
        if end > self.length:
            raise self.error(
                ErrorKind.UNRECOGNIZED_LITERAL,
                f"Truncated literal, expecting {word!r}",
                pos,
            )
        if self.config.strict and (
            self.text[pos:end] != word
            or (end < self.length and _is_identifier_char(self.text[end]))
        ):
            raise self.error(
                ErrorKind.UNRECOGNIZED_LITERAL,
                f"Invalid literal, expecting {word!r}",
                pos,
            )
        return value, end

    def _parse_number(self, pos: Position) -> tuple[Value, Position]:
        with ProfileContext("parse_number"):
            match = scan_number(self.text, pos, strict=self.config.strict)
            if match is None:
                raise self.error(
                    ErrorKind.MALFORMED_NUMBER, "Invalid number", pos
                )
            kind = Kind.INT if match.is_integer else Kind.DOUBLE
            return Value(kind, match.number), match.end

    def _parse_string(self, pos: Position) -> tuple[Value, Position]:
        """Scans a string literal with a raw/escaped two-state machine."""
        with ProfileContext("parse_string"):
            text = self.text
            strict = self.config.strict
            chars: list[str] = []
            state = _StringState.RAW
            cursor = pos + 1

            while cursor < self.length:
                char = text[cursor]
                if state is _StringState.ESCAPED:
                    resolved = resolve_escape(char, strict=strict)
                    if resolved is None:
                        raise self.error(
                            ErrorKind.INVALID_ESCAPE,
                            f"Invalid escape sequence: \\{char}",
                            cursor - 1,
                        )
                    chars.append(resolved)
                    state = _StringState.RAW
                elif char == "\\":
                    state = _StringState.ESCAPED
                elif char == '"':
                    return Value(Kind.TEXT, "".join(chars)), cursor + 1
                elif strict and char < " ":
                    raise self.error(
                        ErrorKind.CONTROL_CHARACTER,
                        "Invalid control character in string",
                        cursor,
                    )
                else:
                    chars.append(char)
                cursor += 1

            raise self.error(
                ErrorKind.UNTERMINATED_STRING,
                "Unterminated string starting at",
                pos,
            )

    def _enter(self, pos: Position, depth: int) -> int:
        depth += 1
        if depth > self.config.max_depth:
            raise self.error(
                ErrorKind.DEPTH_EXCEEDED,
                f"Nesting deeper than {self.config.max_depth} levels",
                pos,
            )
        return depth

    def _parse_element(
        self, pos: Position, depth: int, what: str
    ) -> tuple[Value, Position]:
        try:
            return self._parse_value(pos, depth)
        except JSONDecodeError as exc:
            if exc.kind is ErrorKind.DEPTH_EXCEEDED:
                raise
            raise self.error(
                ErrorKind.MALFORMED_ELEMENT, f"Malformed {what}", pos
            ) from exc

    def _skip_separator(
        self, pos: Position, separator: str, closer: str
    ) -> Position:
        """
        Consumes an optional separator after a container element.

        Strict mode requires the separator unless the closer follows, and
        rejects a separator directly before the closer.
        """
        pos = self.skip_whitespace(pos)
        if pos >= self.length:
            return pos

        char = self.text[pos]
        if char == separator:
            after = self.skip_whitespace(pos + 1)
            if (
                self.config.strict
                and after < self.length
                and self.text[after] == closer
            ):
                raise self.error(
                    ErrorKind.TRAILING_COMMA,
                    f"Illegal trailing comma before {closer!r}",
                    pos,
                )
            return after
        if self.config.strict and char != closer:
            raise self.error(
                ErrorKind.MISSING_SEPARATOR,
                f"Expecting {separator!r} delimiter",
                pos,
            )
        return pos

    def _parse_array(
        self, pos: Position, depth: int
    ) -> tuple[Value, Position]:
        with ProfileContext("parse_array"):
            depth = self._enter(pos, depth)
            items: list[Value] = []
            cursor = self.skip_whitespace(pos + 1)

            while True:
                if cursor >= self.length:
                    raise self.error(
                        ErrorKind.UNTERMINATED_CONTAINER,
                        "Unterminated array starting at",
                        pos,
                    )
                if self.text[cursor] == "]":
                    return Value(Kind.LIST, items), cursor + 1

                item, cursor = self._parse_element(
                    cursor, depth, "array element"
                )
                items.append(item)
                cursor = self._skip_separator(cursor, ",", "]")

    def _parse_object(
        self, pos: Position, depth: int
    ) -> tuple[Value, Position]:
        with ProfileContext("parse_object"):
            depth = self._enter(pos, depth)
            entries: dict[str, Value] = {}
            cursor = self.skip_whitespace(pos + 1)

            while True:
                if cursor >= self.length:
                    raise self.error(
                        ErrorKind.UNTERMINATED_CONTAINER,
                        "Unterminated object starting at",
                        pos,
                    )
                if self.text[cursor] == "}":
                    return Value(Kind.DICT, entries), cursor + 1

                key_pos = cursor
                key, cursor = self._parse_element(cursor, depth, "object key")
                if key.kind is not Kind.TEXT:
                    raise self.error(
                        ErrorKind.NON_TEXT_KEY,
                        "Expecting property name enclosed in double quotes",
                        key_pos,
                    )

                cursor = self.skip_whitespace(cursor)
                if cursor < self.length and self.text[cursor] == ":":
                    cursor = self.skip_whitespace(cursor + 1)
                elif self.config.strict and cursor < self.length:
                    raise self.error(
                        ErrorKind.MISSING_SEPARATOR,
                        "Expecting ':' delimiter",
                        cursor,
                    )
                if cursor >= self.length:
                    raise self.error(
                        ErrorKind.UNTERMINATED_CONTAINER,
                        "Unterminated object starting at",
                        pos,
                    )

                value, cursor = self._parse_element(
                    cursor, depth, "object value"
                )
                self._store(entries, key.payload, value, key_pos)  # type: ignore[arg-type]
                cursor = self._skip_separator(cursor, ",", "}")

    def _store(
        self,
        entries: dict[str, Value],
        key: str,
        value: Value,
        key_pos: Position,
    ) -> None:
        if key not in entries:
            entries[key] = value
            return

        match self.config.duplicate_keys:
            case DuplicateKeyPolicy.FIRST_WINS:
                pass
            case DuplicateKeyPolicy.LAST_WINS:
                entries[key] = value
            case DuplicateKeyPolicy.REJECT:
                raise self.error(
                    ErrorKind.DUPLICATE_KEY, f"Duplicate key {key!r}", key_pos
                )


def parse(text: str, config: ParseConfig | None = None) -> ParseResult:
    """
    Parses the value at the start of ``text``.

    Never raises for malformed input: failures come back as a result with
    ``ok`` false and the error attached. Content after the value is left
    unconsumed and is not inspected. Without an explicit config the
    ``JVARIANT_*`` environment variables apply, and an invalid setting there
    raises ``ValueError`` before any parsing starts.
    """
    if not isinstance(text, str):
        raise TypeError(
            f"the JSON object must be str, not {type(text).__name__}"
        )

    parser = Parser(text, config if config is not None else ParseConfig.from_env())
    with ProfileContext("parse", len(text)):
        try:
            value, end = parser.parse_at(0)
        except JSONDecodeError as exc:
            logger.debug("parse failed (%s): %s", exc.kind.value, exc)
            return ParseResult(None, 0, exc)

    return ParseResult(value, end)


def parse_value(s: str, **kwargs: Any) -> Value:
    """
    Parses a whole JSON document into a value tree.

    Unlike ``parse``, a blank document and anything but whitespace after the
    value are errors. Keyword arguments are ``ParseConfig`` fields.
    """
    if not isinstance(s, str):
        raise TypeError(f"the JSON object must be str, not {type(s).__name__}")

    parser = Parser(s, ParseConfig.from_env(**kwargs))
    start = parser.skip_whitespace(0)
    if start >= parser.length:
        raise parser.error(ErrorKind.EMPTY_INPUT, "Expecting value", start)

    value, end = parser.parse_at(start)
    end = parser.skip_whitespace(end)
    if end < parser.length:
        raise parser.error(ErrorKind.EXTRA_DATA, "Extra data", end)
    return value


def loads(s: str, **kwargs: Any) -> PythonValue:
    """
    Parses a JSON document into plain Python objects.

    Objects become ``dict``, arrays ``list`` and scalars the matching
    built-in types.
    """
    return parse_value(s, **kwargs).to_python()


def load(fp: IO[str], **kwargs: Any) -> PythonValue:
    """
    Parses JSON from a text file-like object.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return loads(fp.read(), **kwargs)


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "DuplicateKeyPolicy",
    "ErrorKind",
    "HotPathStats",
    "JSONDecodeError",
    "Kind",
    "ParseConfig",
    "ParseResult",
    "Parser",
    "Value",
    "ValueKindError",
    "clear_hot_path_stats",
    "describe",
    "get_hot_path_stats",
    "load",
    "loads",
    "parse",
    "parse_value",
]
