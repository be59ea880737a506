"""Errors the session reports to the operator without ending the run."""

from __future__ import annotations


class MalformedBaudInput(ValueError):
    """Typed baud rate is empty, not a number or out of range."""
