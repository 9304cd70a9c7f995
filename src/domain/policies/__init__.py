"""Domain policies package."""

from .statement_filters import is_reportable_row

__all__ = ["is_reportable_row"]
