"""Human-readable description of a parsed tree, one line per shown value."""

from jvariant._value import Kind
from jvariant._value import Value


def _format_payload(value: Value) -> str:
    match value.kind:
        case Kind.NULL:
            return "null"
        case Kind.BOOL:
            return "true" if value.payload else "false"
        case Kind.INT | Kind.DOUBLE:
            return str(value.payload)
        case Kind.TEXT:
            return value.payload  # type: ignore[return-value]
        case Kind.LIST | Kind.DICT:
            return repr(value)


def _describe_member(value: Value) -> str:
    # Members are only shown one level deep; anything else is opaque.
    match value.kind:
        case Kind.BOOL:
            return f"bool is: {_format_payload(value)}"
        case Kind.INT | Kind.DOUBLE | Kind.TEXT:
            return f"{value.kind.value} value is: {_format_payload(value)}"
        case Kind.NULL | Kind.LIST | Kind.DICT:
            return f"unknown value type, value is: {_format_payload(value)}"


def describe(value: Value) -> list[str]:
    """
    Describes a tree the way a consumer walking it by tag would print it.

    A scalar root gives one ``"<kind> is: <payload>"`` line. A list root
    gives one line per item and a dict root one ``"key is: <key>, ..."``
    line per entry. Containers nested below the root are not expanded.
    """
    match value.kind:
        case Kind.BOOL | Kind.INT | Kind.DOUBLE | Kind.TEXT:
            return [f"{value.kind.value} is: {_format_payload(value)}"]
        case Kind.NULL:
            return [f"unknown object is: {_format_payload(value)}"]
        case Kind.LIST:
            return [_describe_member(item) for item in value.payload]  # type: ignore[union-attr]
        case Kind.DICT:
            return [
                f"key is: {key}, {_describe_member(item)}"
                for key, item in value.payload.items()  # type: ignore[union-attr]
            ]
