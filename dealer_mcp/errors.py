"""Exception types and the tool-error helper shared by the server."""

from __future__ import annotations

import logging


class DealershipError(Exception):
    """Base class for errors raised inside the dealership engine."""


class VehicleValidationError(DealershipError, ValueError):
    """A vehicle or request field failed boundary validation."""


class DocumentError(DealershipError):
    """An inventory or import document could not be read."""


def log_and_return_tool_error(
    *,
    tool_name: str,
    exc: BaseException,
    user_message: str,
    logger: logging.Logger | None = None,
) -> str:
    """Log an unexpected tool failure with traceback and return a safe message."""
    (logger or logging.getLogger("dealer_mcp.server")).error(
        "Tool %s failed: %s", tool_name, exc, exc_info=exc,
    )
    return user_message
