"""Tagged value tree produced by the parser."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any
from typing import Final

INT32_MIN: Final = -(2**31)
INT32_MAX: Final = 2**31 - 1

type Payload = (
    None | bool | int | float | str | tuple[Value, ...] | Mapping[str, Value]
)
type PythonValue = (
    None
    | bool
    | int
    | float
    | str
    | list[PythonValue]
    | dict[str, PythonValue]
)


class Kind(Enum):
    """
    Tags of the seven value variants.

    The enum values double as the display names used by the tree printer.
    """

    NULL = "null"
    BOOL = "bool"
    INT = "int"
    DOUBLE = "double"
    TEXT = "string"
    LIST = "list"
    DICT = "dict"


class ValueKindError(TypeError):
    """Raised when a payload is requested under a tag that is not active."""

    def __init__(self, requested: Kind, actual: Kind) -> None:
        self.requested = requested
        self.actual = actual
        super().__init__(
            f"requested {requested.value} payload from a {actual.value} value"
        )


@dataclass(frozen=True, slots=True, repr=False)
class Value:
    """
    Immutable tagged union over the JSON value kinds.

    Exactly one kind is active and the payload always matches it: ``None``
    for NULL, ``bool``, a 32-bit ``int``, ``float``, ``str``, a tuple of
    values for LIST and a read-only ``str`` -> value mapping for DICT.
    """

    kind: Kind
    payload: Payload = None

    def __post_init__(self) -> None:
        payload = self.payload
        match self.kind:
            case Kind.NULL:
                if payload is not None:
                    raise TypeError("null value cannot carry a payload")
            case Kind.BOOL:
                if not isinstance(payload, bool):
                    raise TypeError(_mismatch(self.kind, payload))
            case Kind.INT:
                if isinstance(payload, bool) or not isinstance(payload, int):
                    raise TypeError(_mismatch(self.kind, payload))
                if not INT32_MIN <= payload <= INT32_MAX:
                    raise ValueError(
                        f"integer {payload} does not fit in 32 bits"
                    )
            case Kind.DOUBLE:
                if not isinstance(payload, float):
                    raise TypeError(_mismatch(self.kind, payload))
            case Kind.TEXT:
                if not isinstance(payload, str):
                    raise TypeError(_mismatch(self.kind, payload))
            case Kind.LIST:
                if not isinstance(payload, list | tuple):
                    raise TypeError(_mismatch(self.kind, payload))
                items = tuple(payload)
                for item in items:
                    if not isinstance(item, Value):
                        raise TypeError(
                            f"list items must be Value, not {type(item).__name__}"
                        )
                object.__setattr__(self, "payload", items)
            case Kind.DICT:
                if not isinstance(payload, Mapping):
                    raise TypeError(_mismatch(self.kind, payload))
                entries = dict(payload)
                for key, item in entries.items():
                    if not isinstance(key, str):
                        raise TypeError(
                            f"keys must be str, not {type(key).__name__}"
                        )
                    if not isinstance(item, Value):
                        raise TypeError(
                            f"dict values must be Value, not {type(item).__name__}"
                        )
                object.__setattr__(self, "payload", MappingProxyType(entries))

    @classmethod
    def null(cls) -> "Value":
        return cls(Kind.NULL)

    @classmethod
    def of(cls, obj: Any) -> "Value":
        """
        Builds a value tree from plain Python objects.

        Integers outside the 32-bit range become DOUBLE, the same way the
        parser classifies an overflowing integer literal.
        """
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return cls(Kind.NULL)
        if isinstance(obj, bool):
            return cls(Kind.BOOL, obj)
        if isinstance(obj, int):
            if INT32_MIN <= obj <= INT32_MAX:
                return cls(Kind.INT, obj)
            return cls(Kind.DOUBLE, float(obj))
        if isinstance(obj, float):
            return cls(Kind.DOUBLE, obj)
        if isinstance(obj, str):
            return cls(Kind.TEXT, obj)
        if isinstance(obj, list | tuple):
            return cls(Kind.LIST, tuple(cls.of(item) for item in obj))
        if isinstance(obj, Mapping):
            return cls(
                Kind.DICT, {key: cls.of(item) for key, item in obj.items()}
            )
        raise TypeError(
            f"Object of type {type(obj).__name__} has no value kind"
        )

    def is_kind(self, kind: Kind) -> bool:
        return self.kind is kind

    def get(self, kind: Kind) -> Payload:
        """Returns the payload, provided ``kind`` is the active tag."""
        if self.kind is not kind:
            raise ValueKindError(kind, self.kind)
        return self.payload

    def to_python(self) -> PythonValue:
        """Converts the tree into plain ``list``/``dict``/scalar objects."""
        match self.kind:
            case Kind.LIST:
                return [item.to_python() for item in self.payload]  # type: ignore[union-attr]
            case Kind.DICT:
                return {
                    key: item.to_python()
                    for key, item in self.payload.items()  # type: ignore[union-attr]
                }
            case _:
                return self.payload  # type: ignore[return-value]

    def __hash__(self) -> int:
        # Mapping proxies are unhashable; dict equality ignores order.
        if self.kind is Kind.DICT:
            entries = frozenset(self.payload.items())  # type: ignore[union-attr]
            return hash((self.kind, entries))
        return hash((self.kind, self.payload))

    def __repr__(self) -> str:
        match self.kind:
            case Kind.NULL:
                return "Null"
            case Kind.BOOL:
                return f"Bool({self.payload})"
            case Kind.INT:
                return f"Int({self.payload})"
            case Kind.DOUBLE:
                return f"Double({self.payload!r})"
            case Kind.TEXT:
                return f"Text({self.payload!r})"
            case Kind.LIST:
                items = ", ".join(repr(item) for item in self.payload)  # type: ignore[union-attr]
                return f"List[{items}]"
            case Kind.DICT:
                entries = ", ".join(
                    f"{key!r}: {item!r}"
                    for key, item in self.payload.items()  # type: ignore[union-attr]
                )
                return f"Dict{{{entries}}}"


def _mismatch(kind: Kind, payload: object) -> str:
    return f"{kind.value} value cannot hold {type(payload).__name__}"
