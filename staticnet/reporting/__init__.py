"""Reporting utilities for staticnet."""

from .layout import describe_layout, write_layout
from .summary import summarize_state

__all__ = ["describe_layout", "summarize_state", "write_layout"]
