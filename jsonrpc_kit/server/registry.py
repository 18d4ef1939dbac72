"""
Procedure registry

Maps external procedure names to bindings. A binding is either a plain callable
or a (class-or-instance, method name) pair; the latter is resolved only when the
procedure is called, so missing classes and methods surface at call time.
"""

import importlib
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from jsonrpc_kit.exceptions import MethodNotFoundError, ProcedureNotFoundError, TargetNotFoundError

logger = logging.getLogger(__name__)

TargetRef = Union[str, type, object]


class BindingKind:
    """Binding variant constants"""
    FUNCTION = "function"
    CLASS_METHOD = "class_method"
    INSTANCE_METHOD = "instance_method"


@dataclass(frozen=True)
class ProcedureBinding:
    """How to satisfy a call for one procedure name"""
    name: str
    kind: str
    function: Optional[Callable] = None
    target: Optional[TargetRef] = None
    method_name: Optional[str] = None

    def resolve(self) -> Callable:
        """Return the callable to invoke

        Raises:
            TargetNotFoundError: The bound class cannot be located or instantiated
            MethodNotFoundError: The method is absent on the target
        """
        if self.kind == BindingKind.FUNCTION:
            return self.function

        target = self.target
        if isinstance(target, str):
            target = _import_target(target)

        if not hasattr(target, self.method_name):
            raise MethodNotFoundError(f"{_describe(target)}.{self.method_name}")

        if inspect.isclass(target):
            static = inspect.getattr_static(target, self.method_name)
            if not isinstance(static, (staticmethod, classmethod)):
                try:
                    target = target()
                except Exception as e:
                    logger.warning(f"Unable to instantiate {_describe(target)} for {self.name}: {e}")
                    raise TargetNotFoundError(f"{_describe(target)} cannot be instantiated") from e

        method = getattr(target, self.method_name)
        if not callable(method):
            raise MethodNotFoundError(f"{_describe(target)}.{self.method_name} is not callable")
        return method


def _describe(target: Any) -> str:
    if inspect.isclass(target):
        return target.__qualname__
    return type(target).__qualname__


def _import_target(path: str) -> Any:
    """Locate a class from a dotted ``package.module.Name`` path"""
    module_name, _, attr = path.rpartition(".")
    if not module_name:
        raise TargetNotFoundError(path)
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise TargetNotFoundError(path) from e
    try:
        return getattr(module, attr)
    except AttributeError as e:
        raise TargetNotFoundError(path) from e


class ProcedureRegistry:
    """Procedure name to binding table (last registration wins)"""

    def __init__(self):
        self._bindings: Dict[str, ProcedureBinding] = {}

    def register(self, name: str, function: Callable) -> ProcedureBinding:
        """Register a callable under ``name``

        Args:
            name: Procedure name
            function: Any callable

        Returns:
            ProcedureBinding: The stored binding
        """
        if not callable(function):
            raise TypeError(f"procedure {name!r} must be callable")
        binding = ProcedureBinding(name=name, kind=BindingKind.FUNCTION, function=function)
        self._store(binding)
        return binding

    def bind(self, name: str, target: TargetRef, method_name: str) -> ProcedureBinding:
        """Bind ``name`` to a method of a class or an object

        Args:
            name: Procedure name
            target: Class, dotted class path, or instance
            method_name: Name of the method to call on the target

        Returns:
            ProcedureBinding: The stored binding
        """
        if isinstance(target, str) or inspect.isclass(target):
            kind = BindingKind.CLASS_METHOD
        else:
            kind = BindingKind.INSTANCE_METHOD
        binding = ProcedureBinding(name=name, kind=kind, target=target, method_name=method_name)
        self._store(binding)
        return binding

    def resolve(self, name: str) -> ProcedureBinding:
        """Look up the binding for ``name``

        Raises:
            ProcedureNotFoundError: ``name`` is not registered
        """
        try:
            return self._bindings[name]
        except KeyError:
            raise ProcedureNotFoundError(name) from None

    def names(self) -> List[str]:
        return list(self._bindings)

    def __contains__(self, name: str) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def _store(self, binding: ProcedureBinding) -> None:
        if binding.name in self._bindings:
            logger.debug(f"Replacing procedure binding: {binding.name}")
        self._bindings[binding.name] = binding
        logger.debug(f"Registered procedure {binding.name} ({binding.kind})")
