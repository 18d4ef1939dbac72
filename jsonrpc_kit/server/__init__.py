"""
JSON-RPC 2.0 Server Module

- registry: procedure name to binding table
- binder: argument reconciliation against target signatures
- dispatcher: procedure execution, batches and raw payload handling
- encoder: response serialization
"""

from .binder import ParameterSpec, bind_arguments, is_positional_arguments, parameters_of
from .dispatcher import Server
from .encoder import ResponseEncoder
from .models import Invocation, RpcResponse
from .registry import BindingKind, ProcedureBinding, ProcedureRegistry

__all__ = [
    "Server",
    "ProcedureRegistry",
    "ProcedureBinding",
    "BindingKind",
    "ParameterSpec",
    "Invocation",
    "RpcResponse",
    "ResponseEncoder",
    "bind_arguments",
    "is_positional_arguments",
    "parameters_of",
]
