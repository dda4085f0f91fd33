"""Pure spending chart engine.

This package contains deterministic, testable computations that operate on
in-memory inputs and return DTOs. It must not import Django or perform any
network I/O.
"""

from .engine import build_spending_chart

__all__ = ["build_spending_chart"]
