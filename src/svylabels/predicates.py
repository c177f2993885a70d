"""
Predicate evaluation over label entries.

Predicates run against the (value, label) pairs of a LabelMap, never
against the data vector, so their cost scales with the number of labels.

Three predicate forms are accepted and normalised once, by
as_lbl_function(), into a plain function of (val, lbl):

    - a callable taking two positional arguments
          lambda val, lbl: val >= 90
    - mini-lambda text over .val and .lbl
          ".val >= 90 | .lbl == 'Maybe'"
    - the name of a function visible to the caller
          "na_function"
"""

import builtins
import inspect
from collections import ChainMap
from typing import Any, Callable, List, Mapping, Optional, Tuple

from svylabels.errors import ConfigurationError, ValidationError
from svylabels.lambdas import compile_lambda, is_missing
from svylabels.model import LabelMap


LblFunction = Callable[[Any, str], Any]
Labeller = Callable[[Any], str]


def caller_env(depth: int = 1) -> Mapping[str, Any]:
    """
    Namespace of a calling frame, for resolving predicates given by name.

    Args:
        depth: 1 is the caller of the function calling caller_env()

    Returns:
        Locals, then globals, then builtins of that frame
    """
    frame = inspect.currentframe()
    try:
        for _ in range(depth + 1):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            return ChainMap(vars(builtins))
        return ChainMap(dict(frame.f_locals), frame.f_globals, vars(builtins))
    finally:
        del frame


def _check_arity(func: Callable, params: Tuple[str, ...] = ("val", "lbl")) -> None:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        # some builtins expose no signature
        return
    try:
        signature.bind(*(None for _ in params))
    except TypeError:
        raise ConfigurationError(
            f"Function {getattr(func, '__name__', func)!r} must accept "
            f"{len(params)} argument(s) ({', '.join(params)})"
        )


def _is_function_name(text: str) -> bool:
    name = text.strip()
    return name.isidentifier() and name not in ("True", "False", "None")


def _lookup_function(text: str, env: Mapping[str, Any]) -> Callable:
    name = text.strip()
    func = env.get(name)
    if func is None:
        raise ConfigurationError(f"Could not find a function named {name!r}")
    if not callable(func):
        raise ConfigurationError(f"{name!r} is not a function")
    return func


def as_lbl_function(predicate: Any, env: Optional[Mapping[str, Any]] = None) -> LblFunction:
    """
    Normalise any accepted predicate form to a function of (val, lbl).

    Args:
        predicate: Callable, mini-lambda text, or function name
        env: Namespace to resolve function names in (defaults to the caller's)

    Raises:
        ConfigurationError: Wrong arity, unknown name, or unsupported type
        LambdaParseError: Malformed mini-lambda text
    """
    if callable(predicate):
        _check_arity(predicate)
        return predicate

    if isinstance(predicate, str):
        if _is_function_name(predicate):
            func = _lookup_function(predicate, env if env is not None else caller_env())
            _check_arity(func)
            return func
        return compile_lambda(predicate)

    raise ConfigurationError(
        f"Can't convert {type(predicate).__name__} to a label function"
    )


def as_labeller(labeller: Any, env: Optional[Mapping[str, Any]] = None) -> Labeller:
    """
    Normalise a labeller to a function of one value.

    Accepts the same three forms as as_lbl_function(), except that a
    callable takes only the value. Mini-lambda text sees the value as
    .val, and .lbl is None.

        str
        "'$' + str(.val)"
        "dollar_label"

    Raises:
        ConfigurationError: Wrong arity, unknown name, or unsupported type
        LambdaParseError: Malformed mini-lambda text
    """
    if callable(labeller):
        _check_arity(labeller, ("val",))
        return labeller

    if isinstance(labeller, str):
        if _is_function_name(labeller):
            func = _lookup_function(labeller, env if env is not None else caller_env())
            _check_arity(func, ("val",))
            return func
        lbl_function = compile_lambda(labeller)
        return lambda value: lbl_function(value, None)

    raise ConfigurationError(
        f"Can't convert {type(labeller).__name__} to a labeller"
    )


def evaluate_predicate(predicate: LblFunction, label_map: LabelMap) -> List[Any]:
    """Apply a normalised predicate to every entry, in entry order."""
    return [predicate(entry.value, entry.label) for entry in label_map]


def _is_boolean(result: Any) -> bool:
    # compared with == so that 0/1 and numpy booleans count
    return result is True or result is False or result in (0, 1)


def select_entries(predicate: LblFunction, label_map: LabelMap, operation: str) -> List[bool]:
    """
    Evaluate a selection predicate, requiring a definite boolean per entry.

    Results equal to True or False (including 0 and 1) are accepted.

    Raises:
        ValidationError: If any entry's result is None, NaN, or not boolean
    """
    results = evaluate_predicate(predicate, label_map)
    undefined = [e.value for e, r in zip(label_map, results) if is_missing(r)]
    if undefined:
        raise ValidationError(
            f"Predicates cannot evaluate to missing in {operation}() "
            f"(values: {', '.join(str(v) for v in undefined)})"
        )
    not_bool = [e.value for e, r in zip(label_map, results) if not _is_boolean(r)]
    if not_bool:
        raise ValidationError(
            f"Predicates must evaluate to True or False in {operation}() "
            f"(values: {', '.join(str(v) for v in not_bool)})"
        )
    return [bool(r) for r in results]


def map_entries(func: LblFunction, label_map: LabelMap, operation: str) -> List[Any]:
    """
    Evaluate a value-producing function, requiring a defined result per entry.

    Raises:
        ValidationError: If any entry's result is None or NaN
    """
    results = evaluate_predicate(func, label_map)
    undefined = [e.value for e, r in zip(label_map, results) if is_missing(r)]
    if undefined:
        raise ValidationError(
            f"Functions cannot evaluate to missing in {operation}() "
            f"(values: {', '.join(str(v) for v in undefined)})"
        )
    return results
