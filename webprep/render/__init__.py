"""Rendering engine boundary: typed operation requests and their executor."""

from webprep.render.executor import CommandExecutor, Executor
from webprep.render.operations import OperationKind, OperationRequest

__all__ = [
    "CommandExecutor",
    "Executor",
    "OperationKind",
    "OperationRequest",
]
