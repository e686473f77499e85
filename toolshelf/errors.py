from __future__ import annotations


class ToolshelfError(Exception):
    """Base class for errors raised by the catalogue data layer."""


class InvalidInputError(ToolshelfError, ValueError):
    """Raised when a caller passes an empty filename or path."""


class InvalidDataError(ToolshelfError, ValueError):
    """Raised when a CSV row cannot be decoded into a :class:`Record`.

    ``row`` is the 1-based data row (header excluded) and ``detail`` the
    underlying decode message.
    """

    def __init__(self, detail: str, *, row: int | None = None) -> None:
        self.row = row
        self.detail = detail
        if row is None:
            message = f"CSV deserialize error: {detail}"
        else:
            message = f"CSV deserialize error: record {row}: {detail}"
        super().__init__(message)


def error_message(exc: BaseException) -> str:
    """Render an exception as the text placed in an error envelope."""

    text = str(exc)
    return text if text else exc.__class__.__name__
