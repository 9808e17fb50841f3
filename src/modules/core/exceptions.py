"""Exceptions shared by more than one module."""

from __future__ import annotations


class UserNotFound(Exception):
    """The user referenced by a cart or order does not exist."""
