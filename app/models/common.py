"""Common response models."""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str = Field(..., description="Error message")
    error_code: str = Field(..., description="Machine-readable error code")
    request_id: Optional[str] = Field(None, description="Request ID for tracking")
    details: Optional[Dict[str, Any]] = Field(
        None, description="Additional error details"
    )


class RPCErrorDetail(BaseModel):
    """Error member of a JSON-RPC response."""

    code: int = Field(..., description="JSON-RPC error code")
    message: str = Field(..., description="Error message")


class RPCErrorResponse(BaseModel):
    """JSON-RPC 2.0 error response envelope."""

    error: RPCErrorDetail
    jsonrpc: Literal["2.0"] = "2.0"


class WhoAmIResponse(BaseModel):
    """Request-identifying metadata echoed back to the caller."""

    ip: str = Field(..., description="Remote address as seen by the gateway")
    forwarded_for: str = Field(
        "",
        serialization_alias="X-Forwarded-For",
        description="Raw X-Forwarded-For header",
    )
    real_ip: str = Field(
        "", serialization_alias="X-Real-Ip", description="Raw X-Real-Ip header"
    )
