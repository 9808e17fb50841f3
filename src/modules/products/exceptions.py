"""Product domain exceptions.

Raised by the Service Layer (and by the inventory ledger / checkout when
they resolve products).  The API layer catches these and translates them
into HTTP responses.
"""

from __future__ import annotations


class ProductNotFound(Exception):
    """The requested product does not exist or has been soft-deleted."""
