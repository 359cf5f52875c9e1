"""Exception types raised by idealmask."""

from __future__ import annotations


class InvalidInput(ValueError):
    """Raised when a call argument fails validation.

    Validation happens before any transform work, so no partial results are
    ever produced when this is raised.
    """
