"""
Argument binding

Reconciles the ``params`` of a JSON-RPC call, given either as an ordered list or
as a name-keyed mapping, against the formal parameters of the target callable.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple, Union

from jsonrpc_kit.exceptions import ArityError

Arguments = Union[Sequence[Any], Mapping[Any, Any]]

_NO_DEFAULT = inspect.Parameter.empty


@dataclass(frozen=True)
class ParameterSpec:
    """One formal parameter of a procedure target"""
    name: str
    position: int
    has_default: bool = False
    default: Any = None
    keyword_only: bool = False


def parameters_of(target: Callable) -> List[ParameterSpec]:
    """Reflect the parameter list of a callable

    ``*args`` and ``**kwargs`` are not part of the result; bound methods do not
    report ``self``.

    Args:
        target: Function, bound method or other callable

    Returns:
        List[ParameterSpec]: Parameters in declaration order
    """
    params = []
    for parameter in inspect.signature(target).parameters.values():
        if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        has_default = parameter.default is not _NO_DEFAULT
        params.append(ParameterSpec(
            name=parameter.name,
            position=len(params),
            has_default=has_default,
            default=parameter.default if has_default else None,
            keyword_only=parameter.kind == inspect.Parameter.KEYWORD_ONLY,
        ))
    return params


def is_positional_arguments(arguments: Arguments) -> bool:
    """Tell whether an argument collection is positional

    A collection is positional when its keys are exactly ``0..n-1`` in order.
    Lists and tuples always are; mappings only with dense integer keys, given
    as ints or as their decimal strings (JSON object keys are always strings).
    """
    if isinstance(arguments, Mapping):
        keys = list(arguments.keys())
        indexes = range(len(keys))
        return keys == list(indexes) or keys == [str(i) for i in indexes]
    return isinstance(arguments, (list, tuple))


def bind_arguments(arguments: Arguments, params: Sequence[ParameterSpec]) -> List[Any]:
    """Produce the ordered argument vector for ``params``

    The argument count is checked first for both shapes: fewer values than
    required parameters or more values than parameters fail. Named arguments
    are then matched by parameter name, falling back to defaults; unknown
    names are ignored.

    Args:
        arguments: List of values or mapping of parameter name to value
        params: Target parameters in position order

    Returns:
        List: One value per parameter

    Raises:
        ArityError: Too many, too few or a missing required argument
    """
    if arguments is None:
        arguments = []

    supplied = len(arguments)
    required = sum(1 for p in params if not p.has_default)

    if supplied < required:
        raise ArityError(ArityError.TOO_FEW)
    if supplied > len(params):
        raise ArityError(ArityError.TOO_MANY)

    if is_positional_arguments(arguments):
        values = list(arguments.values()) if isinstance(arguments, Mapping) else list(arguments)
        for param in params[supplied:]:
            if not param.has_default:
                # only reachable for a required keyword-only parameter
                raise ArityError(ArityError.MISSING, missing=param.name)
            values.append(param.default)
        return values

    values = []
    for param in params:
        if param.name in arguments:
            values.append(arguments[param.name])
        elif param.has_default:
            values.append(param.default)
        else:
            raise ArityError(ArityError.MISSING, missing=param.name)
    return values


def split_call_arguments(values: Sequence[Any], params: Sequence[ParameterSpec]) -> Tuple[List[Any], Dict[str, Any]]:
    """Split a bound vector into positional and keyword-only call arguments"""
    args, kwargs = [], {}
    for param, value in zip(params, values):
        if param.keyword_only:
            kwargs[param.name] = value
        else:
            args.append(value)
    return args, kwargs
