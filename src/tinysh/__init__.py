"""tinysh - a tiny UNIX shell."""

from .core import DispatchStatus, ExecutionContext, dispatch

__version__ = "0.1.0"

__all__ = ["DispatchStatus", "ExecutionContext", "dispatch"]
