"""
Error codes and error envelope formatting for RPC responses.

Every failure a procedure can report carries a machine-readable
``ErrorCode``.  The code determines the JSON-RPC style numeric code and
the HTTP status of the response.  For client-side display each code is
additionally translated into an application-specific code via
``map_error_code``, which falls back to ``UNKNOWN_ERROR`` for anything
not listed in the table.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(str, Enum):
    PARSE_ERROR = "PARSE_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_SUPPORTED = "METHOD_NOT_SUPPORTED"
    TIMEOUT = "TIMEOUT"
    CONFLICT = "CONFLICT"
    PRECONDITION_FAILED = "PRECONDITION_FAILED"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    UNPROCESSABLE_CONTENT = "UNPROCESSABLE_CONTENT"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"
    CLIENT_CLOSED_REQUEST = "CLIENT_CLOSED_REQUEST"


JSON_RPC_CODES: Dict[ErrorCode, int] = {
    ErrorCode.PARSE_ERROR: -32700,
    ErrorCode.BAD_REQUEST: -32600,
    ErrorCode.INTERNAL_SERVER_ERROR: -32603,
    ErrorCode.UNAUTHORIZED: -32001,
    ErrorCode.FORBIDDEN: -32003,
    ErrorCode.NOT_FOUND: -32004,
    ErrorCode.METHOD_NOT_SUPPORTED: -32005,
    ErrorCode.TIMEOUT: -32008,
    ErrorCode.CONFLICT: -32009,
    ErrorCode.PRECONDITION_FAILED: -32012,
    ErrorCode.PAYLOAD_TOO_LARGE: -32013,
    ErrorCode.UNPROCESSABLE_CONTENT: -32022,
    ErrorCode.TOO_MANY_REQUESTS: -32029,
    ErrorCode.CLIENT_CLOSED_REQUEST: -32099,
}

HTTP_STATUSES: Dict[ErrorCode, int] = {
    ErrorCode.PARSE_ERROR: 400,
    ErrorCode.BAD_REQUEST: 400,
    ErrorCode.INTERNAL_SERVER_ERROR: 500,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.METHOD_NOT_SUPPORTED: 405,
    ErrorCode.TIMEOUT: 408,
    ErrorCode.CONFLICT: 409,
    ErrorCode.PRECONDITION_FAILED: 412,
    ErrorCode.PAYLOAD_TOO_LARGE: 413,
    ErrorCode.UNPROCESSABLE_CONTENT: 422,
    ErrorCode.TOO_MANY_REQUESTS: 429,
    ErrorCode.CLIENT_CLOSED_REQUEST: 499,
}

# Display codes shown to end users.  PARSE_ERROR is deliberately absent
# and therefore reported as UNKNOWN_ERROR.
ERROR_CODE_MAP: Dict[str, str] = {
    "BAD_REQUEST": "INVALID_INPUT",
    "UNAUTHORIZED": "AUTH_REQUIRED",
    "FORBIDDEN": "ACCESS_DENIED",
    "NOT_FOUND": "RESOURCE_NOT_FOUND",
    "METHOD_NOT_SUPPORTED": "INVALID_METHOD",
    "TIMEOUT": "REQUEST_TIMEOUT",
    "CONFLICT": "RESOURCE_CONFLICT",
    "PRECONDITION_FAILED": "PRECONDITION_FAILED",
    "PAYLOAD_TOO_LARGE": "PAYLOAD_TOO_LARGE",
    "UNPROCESSABLE_CONTENT": "VALIDATION_FAILED",
    "TOO_MANY_REQUESTS": "RATE_LIMIT_EXCEEDED",
    "CLIENT_CLOSED_REQUEST": "CLIENT_DISCONNECTED",
    "INTERNAL_SERVER_ERROR": "SERVER_ERROR",
}

UNKNOWN_ERROR = "UNKNOWN_ERROR"


def map_error_code(code: str) -> str:
    """Translate a machine error code into its display code."""
    if isinstance(code, ErrorCode):
        code = code.value
    return ERROR_CODE_MAP.get(code, UNKNOWN_ERROR)


@dataclass(frozen=True)
class ProcedureError:
    """A failure reported by a procedure.

    ``validation`` is only set for input validation failures and holds
    the flattened ``{"formErrors": [...], "fieldErrors": {...}}``
    structure.  ``stack`` is an optional traceback, only rendered in
    development mode.
    """

    code: ErrorCode
    message: str
    validation: Optional[Dict[str, Any]] = None
    stack: Optional[str] = None

    @property
    def http_status(self) -> int:
        return HTTP_STATUSES[self.code]


def validation_failed(validation: Dict[str, Any]) -> ProcedureError:
    """Build a ``BAD_REQUEST`` error from a flattened validation result."""
    messages: List[str] = list(validation.get("formErrors", []))
    for field_messages in validation.get("fieldErrors", {}).values():
        messages.extend(field_messages)
    message = "; ".join(messages) or "Invalid input"
    return ProcedureError(ErrorCode.BAD_REQUEST, message, validation=validation)


def not_found(message: str) -> ProcedureError:
    return ProcedureError(ErrorCode.NOT_FOUND, message)


def conflict(message: str) -> ProcedureError:
    return ProcedureError(ErrorCode.CONFLICT, message)


def format_error(error: ProcedureError, path: Optional[str], debug: bool = False) -> Dict[str, Any]:
    """Render a ``ProcedureError`` as a response envelope.

    Parameters
    ----------
    error : ProcedureError
        The failure to render.
    path : Optional[str]
        Name of the procedure that failed, ``None`` when the failure
        happened before a procedure could be resolved.
    debug : bool
        Include the traceback (``data.stack``) when available.
    """
    data: Dict[str, Any] = {
        "code": error.code.value,
        "httpStatus": error.http_status,
        "path": path,
        "errorCode": map_error_code(error.code),
        "validationError": error.validation,
    }
    if debug and error.stack:
        data["stack"] = error.stack
    return {
        "error": {
            "message": error.message,
            "code": JSON_RPC_CODES[error.code],
            "data": data,
        }
    }
