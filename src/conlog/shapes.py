"""
Argument-shape resolver.

Logger methods are variadic. Which optional fields the caller meant
(title, message, error, data, basics) is decided from the shapes of the
positional values::

    log.info("Saved")                        # message
    log.info("Sync", "Saved 3 files")        # title, message
    log.info("Saved", {"files": 3})          # message, data
    log.error("Sync", exc)                   # title, error
    log.info({"title": "Sync", "message": "Saved", "border_top": 20})

Shapes are tried in declaration order and the first one whose types all
match wins. Nothing here raises: arguments that fit no shape fall back to
"first argument is the message".
"""

from dataclasses import fields
from numbers import Number
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from .record import UNSET, LogRecord, merge_record, record_values


# Declared shapes, tried in order. Each constraint is "field:type|type";
# "*" accepts anything, and the field "this" merges a mapping's own keys.
SHAPES: Tuple[Tuple[str, ...], ...] = (
    ("message:error|string|function",),
    ("title:string", "message:string|function"),
    ("basics:object", "message:string|function"),
    ("title:string", "error:error"),
    ("message:string|function", "data:object|array|number|boolean"),
    ("title:string", "message:string|function", "error:error"),
    ("title:string", "message:string|function", "data:*"),
    ("basics:object", "title:string", "message:string|function"),
    ("basics:object", "message:string", "data:*"),
    ("basics:object", "title:string", "message:string|function",
     "error:error"),
    ("basics:object", "title:string", "message:string|function", "data:*"),
    ("this:object",),
)


def true_type(value: Any) -> str:
    """Name the shape-relevant type of a value.

    Unlike ``type()``, this separates the cases a caller can mean
    differently: errors, callables, sequences, and mappings.

    Returns:
        One of 'null', 'record', 'boolean', 'number', 'string', 'error',
        'object', 'array', 'function'
    """
    if value is None:
        return "null"
    if isinstance(value, LogRecord):
        return "record"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, Number):
        return "number"
    if isinstance(value, (str, bytes, bytearray)):
        return "string"
    if isinstance(value, BaseException):
        return "error"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple, set, frozenset)):
        return "array"
    if callable(value):
        return "function"
    return "object"


def parse_shape(shape: Sequence[str]) -> List[Tuple[str, Tuple[str, ...]]]:
    """Split ``("title:string", "message:string|function")`` into pairs."""
    parsed = []
    for constraint in shape:
        name, _, types = constraint.partition(":")
        parsed.append((name, tuple(types.split("|")) if types else ("*",)))
    return parsed


def shape_matches(shape: Sequence[str], args: Sequence[Any]) -> bool:
    """True when args has the shape's length and every type fits."""
    if len(shape) != len(args):
        return False
    for (_, types), arg in zip(parse_shape(shape), args):
        if "*" in types:
            continue
        if true_type(arg) not in types:
            return False
    return True


def match_shape(args: Sequence[Any],
                shapes: Sequence[Sequence[str]] = SHAPES) -> Dict[str, Any]:
    """Map positional args onto field names using the first matching shape.

    Returns:
        Field values from the matched shape, or ``{'message': args[0]}``
        when no shape fits (empty dict for no arguments).
    """
    for shape in shapes:
        if not shape_matches(shape, args):
            continue
        values: Dict[str, Any] = {}
        for (name, _), arg in zip(parse_shape(shape), args):
            if name == "this" and isinstance(arg, Mapping):
                values.update(record_values(arg))
            elif name == "this":
                values["message"] = arg
            else:
                values[name] = arg
        return values
    if args:
        return {"message": args[0]}
    return {}


def explicit_fields(record: LogRecord) -> Dict[str, Any]:
    """Fields of a caller-built LogRecord, minus the ones left UNSET.

    Explicit values win even when they equal a default, so
    ``LogRecord(color=None)`` turns the level color off.
    """
    return {f.name: getattr(record, f.name) for f in fields(LogRecord)
            if getattr(record, f.name) is not UNSET}


def resolve_record(args: Sequence[Any], defaults: LogRecord) -> LogRecord:
    """Resolve a call's positional arguments into a LogRecord.

    Args:
        args: Positional arguments as received by a logger method
        defaults: Per-level defaults (color, suffix) to fill in

    Returns:
        A new LogRecord; ``defaults`` is not modified
    """
    if len(args) == 1 and isinstance(args[0], LogRecord):
        return merge_record(defaults, explicit_fields(args[0]))
    return merge_record(defaults, match_shape(args))
