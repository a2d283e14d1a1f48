"""Custom exception hierarchy for the gateway.

Two families live here:

* ``GatewayError`` and its HTTP-facing subclasses, rendered by the
  exception handlers as an ``ErrorResponse`` body.
* ``CallError`` and its subclasses, the JSON-RPC error taxonomy. Each kind
  carries a fixed protocol error code and converts to the standard
  ``{"error": {...}, "jsonrpc": "2.0"}`` envelope.
"""

from enum import IntEnum
from typing import Any, Dict, Optional, Type, TypeVar

from app.models.common import RPCErrorDetail, RPCErrorResponse

CallErrorT = TypeVar("CallErrorT", bound="CallError")


class GatewayError(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize the error with message and metadata."""
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class ServiceError(GatewayError):
    """500-level server errors for service failures."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize service error with 500-level status."""
        super().__init__(message, 500, error_code, details)


class ServiceUnavailableError(ServiceError):
    """Error when a required service is unavailable."""

    def __init__(self, message: str, service: Optional[str] = None) -> None:
        """Initialize with service information."""
        details = {"service": service} if service else {}
        super().__init__(message, "SERVICE_UNAVAILABLE", details)
        self.status_code = 503


class NodeDirectoryError(ServiceUnavailableError):
    """Raised when the node directory cannot list its members.

    The in-process ``NodeDirectory`` never fails; directories backed by an
    external registry raise this from ``list_nodes``, and the aggregator
    reports it as a failing node group.
    """

    def __init__(self, message: str = "Node directory unavailable") -> None:
        super().__init__(message, service="node-directory")
        self.error_code = "NODE_DIRECTORY_UNAVAILABLE"


class RPCErrorCode(IntEnum):
    """JSON-RPC error codes used by the gateway."""

    PROXY = -32080
    AUTH_FAILED = -32085
    INTERNAL = -32603
    INVALID_PARAMS = -32602
    METHOD_UNAVAILABLE = -32601
    INVALID_REQUEST = -32600
    JSON_PARSE = -32700


class CallError(GatewayError):
    """Error raised while processing or forwarding a client JSON-RPC call.

    Call errors are reported inside a JSON-RPC envelope, so the HTTP status
    stays 200 and the failure is carried by ``code``.
    """

    rpc_code: RPCErrorCode = RPCErrorCode.INTERNAL

    def __init__(
        self, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, 200, self.rpc_code.name, details)

    @property
    def code(self) -> int:
        """JSON-RPC error code."""
        return int(self.rpc_code)

    @classmethod
    def from_exception(cls: Type[CallErrorT], exc: BaseException) -> CallErrorT:
        """Wrap another exception, keeping it as the cause."""
        error = cls(str(exc) or type(exc).__name__)
        error.__cause__ = exc
        return error

    def as_rpc_response(self) -> RPCErrorResponse:
        """Return the error as a JSON-RPC response envelope."""
        return RPCErrorResponse(
            error=RPCErrorDetail(code=self.code, message=self.message)
        )


class ProxyError(CallError):
    """General error originating inside the proxy module."""

    rpc_code = RPCErrorCode.PROXY


class InternalCallError(CallError):
    """Internal error, e.g. a backend node connection problem."""

    rpc_code = RPCErrorCode.INTERNAL


class AuthFailedError(CallError):
    """Supplied auth token / account id is not known to any node."""

    rpc_code = RPCErrorCode.AUTH_FAILED

    def __init__(
        self,
        message: str = "couldn't find account in lbrynet",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)


class InputError(CallError):
    """Client sent a body that is not valid JSON."""

    rpc_code = RPCErrorCode.JSON_PARSE


class ParamsError(CallError):
    """Client-supplied method params are invalid."""

    rpc_code = RPCErrorCode.INVALID_PARAMS


class InvalidRequestError(CallError):
    """General client error."""

    rpc_code = RPCErrorCode.INVALID_REQUEST


class MethodUnavailableError(CallError):
    """Client-requested method cannot be found."""

    rpc_code = RPCErrorCode.METHOD_UNAVAILABLE
