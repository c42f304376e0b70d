"""Template error taxonomy.

Every service operation raises one of these; the HTTP layer maps them onto
status codes via ``status_code``.
"""

from typing import Any


class TemplateError(Exception):
    """Base class for all dashboard template errors."""

    code = "TEMPLATE_ERROR"
    status_code = 500

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {self.message} ({ctx_str})" if ctx_str else f"[{self.code}] {self.message}"


class NotFoundError(TemplateError):
    code = "NOT_FOUND"
    status_code = 404


class NotAuthorizedError(TemplateError):
    code = "NOT_AUTHORIZED"
    status_code = 403


class InvalidTemplateTypeError(TemplateError):
    code = "INVALID_TEMPLATE_TYPE"
    status_code = 400


class InvalidGridItemError(TemplateError):
    code = "INVALID_GRID_ITEM"
    status_code = 400


class StoreError(TemplateError):
    """Opaque persistence failure. The driver exception is kept as ``__cause__``."""

    code = "STORE_ERROR"
    status_code = 500
