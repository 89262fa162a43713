"""Exceptions raised for caller misuse. Findings are never exceptions."""

from __future__ import annotations


class ResultFinalizedError(RuntimeError):
    """A finding was added to a result whose status has already been derived."""
