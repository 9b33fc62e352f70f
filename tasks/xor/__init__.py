"""The XOR benchmark task."""

from __future__ import annotations

from .evaluator import XOR_CASES, XOREvaluator

__all__ = ["XOR_CASES", "XOREvaluator"]
