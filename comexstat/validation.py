# =============================================================================
# comexstat/validation.py - Argument Validation
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Checks the raw, loosely-typed arguments of one tool call against that
#   tool's pydantic model (strict mode) and returns a normalized copy:
#     - required fields present with their declared type
#     - optional fields filled with their default, or left out entirely
#     - enum fields inside their allowed set, pattern fields matching
#     - unknown keys dropped
#
#   Validation is all-or-nothing: the first violation raises ValidationError
#   naming the offending field (dotted path, e.g. "filters[0].values[2]").
#   No network activity happens here.
#
# ERROR PATHS:
#   pydantic reports a location such as
#       ("filters", 0, "values", "list[union[int,float]]", 1, "int")
#   where the non-navigable parts are union member tags.  The path is walked
#   against the input and cut at the first tag; errors that share the cut
#   path are merged into one "must be X or Y" constraint.
# =============================================================================

import logging
from typing import Any

import pydantic

from comexstat.errors import ValidationError
from comexstat.registry import MONTH_HINT, MONTH_PATTERN, get_operation

logger = logging.getLogger(__name__)

_TYPE_LABELS = {
    "string_type": "a string",
    "int_type": "a number",
    "float_type": "a number",
    "bool_type": "a boolean",
    "list_type": "an array",
    "dict_type": "an object",
    "model_type": "an object",
    "model_attributes_type": "an object",
}

_PLURALS = {
    "a string": "strings",
    "a number": "numbers",
    "a boolean": "booleans",
    "an array": "arrays",
    "an object": "objects",
}

_MISSING = object()


def validate_arguments(operation: str, arguments: Any) -> dict:
    """Validate and normalize the arguments of one tool call.

    Args:
        operation: Tool name, e.g. "queryData".
        arguments: The raw argument object from the caller (None means {}).

    Returns:
        A new dict holding only declared parameters.

    Raises:
        ValidationError: On an unknown operation or any schema violation.
    """
    spec = get_operation(operation)
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise ValidationError("arguments", "must be an object")

    raw = _drop_none(arguments)
    try:
        model = spec.parameters.model_validate(raw, strict=True)
    except pydantic.ValidationError as exc:
        raise _translate(exc, raw) from None

    declared = {info.alias or name for name, info in spec.parameters.model_fields.items()}
    extra = [key for key in raw if key not in declared]
    if extra:
        logger.debug("Dropping undeclared arguments of %s: %s", operation, extra)
    return model.model_dump(by_alias=True, exclude_none=True)


def _drop_none(value: Any) -> Any:
    # None counts as "not given" at every object level.
    if isinstance(value, dict):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_none(item) for item in value]
    return value


# -----------------------------------------------------------------------------
# pydantic error -> ValidationError(field, constraint)
# -----------------------------------------------------------------------------
def _translate(exc: pydantic.ValidationError, raw: dict) -> ValidationError:
    errors = exc.errors()
    path, rest = _split_location(errors[0], raw)
    if not any(isinstance(part, str) for part in rest):
        return ValidationError(path, _constraint(errors[0]))

    # The value sits under a union: describe every alternative it missed.
    labels: list[str] = []
    for error in errors:
        other_path, other_rest = _split_location(error, raw)
        if other_path != path:
            continue
        label = _TYPE_LABELS.get(error["type"], "a valid value")
        if any(isinstance(part, int) for part in other_rest):
            label = f"an array of {_PLURALS.get(label, 'valid values')}"
        if label not in labels:
            labels.append(label)
    return ValidationError(path, f"must be {' or '.join(labels)}")


def _split_location(error: dict, raw: dict) -> tuple[str, tuple]:
    """Return the dotted path inside the input, and the unconsumed location."""
    location = error["loc"]
    current: Any = raw
    path = ""
    for index, part in enumerate(location):
        last = index == len(location) - 1
        if isinstance(part, str) and isinstance(current, dict) and (
            part in current or (last and error["type"] == "missing")
        ):
            path = f"{path}.{part}" if path else part
            current = current.get(part, _MISSING)
        elif isinstance(part, int) and isinstance(current, list) and part < len(current):
            path = f"{path}[{part}]"
            current = current[part]
        else:
            return path or "arguments", tuple(location[index:])
    return path or "arguments", ()


def _constraint(error: dict) -> str:
    kind = error["type"]
    ctx = error.get("ctx") or {}
    if kind == "missing":
        return "is required"
    if kind == "literal_error":
        choices = str(ctx.get("expected", "")).replace("'", "").replace(" or ", ", ")
        return f"must be one of: {choices}"
    if kind == "string_pattern_mismatch":
        pattern = ctx.get("pattern")
        return f"must match {MONTH_HINT if pattern == MONTH_PATTERN else pattern}"
    if kind in _TYPE_LABELS:
        return f"must be {_TYPE_LABELS[kind]}"
    return f"is invalid: {error['msg']}"
