"""
Errors raised by the sheet and admin glue.

The CSV decoder and the description formatter never raise.
"""

from __future__ import annotations

from typing import Optional


class CatalogError(Exception):
    """Base class; the message is shown to the user as-is."""


class SheetNotConfigured(CatalogError):
    pass


class SheetFetchError(CatalogError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AdminError(CatalogError):
    pass
