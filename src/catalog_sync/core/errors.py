"""Error taxonomy shared by the synchronization core and the API layer.

- ValidationError: the request itself is unusable (missing tenant, bad id)
- NotFoundError: no such document for this tenant; absence and tenant
  mismatch are reported identically
- InternalError: a store failed on the critical path; the cause is logged,
  never exposed
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for catalog synchronization errors."""

    code = "Error"

    def __init__(self, text: str):
        self.text = text
        super().__init__(text)


class ValidationError(CatalogError):
    code = "BadRequest"


class NotFoundError(CatalogError):
    code = "NotFound"

    def __init__(self, text: str = "Not found"):
        super().__init__(text)


class InternalError(CatalogError):
    code = "InternalServerError"

    def __init__(self, text: str = "An unexpected error occurred"):
        super().__init__(text)
