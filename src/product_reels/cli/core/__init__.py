"""Shared CLI plumbing: consoles, result types and logging."""

from .console import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
    progress_console,
)
from .types import Failure, Result, Success

__all__ = [
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "progress_console",
    "Failure",
    "Result",
    "Success",
]
