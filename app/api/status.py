"""Status and request introspection endpoints."""

from fastapi import APIRouter, Depends, Request, status

from app.core.health import HealthSnapshot, StatusCache
from app.core.responses import PrettyJSONResponse
from app.models.common import WhoAmIResponse

router = APIRouter(tags=["status"], default_response_class=PrettyJSONResponse)

_SNAPSHOT_EXAMPLE = {
    "timestamp": "2026-10-18T14:30:52.123456Z",
    "services": {
        "lbrynet": [{"address": "http://lbrynet1:5279/", "status": "ok"}],
        "player": [
            {"address": "https://player1.lbry.tv", "status": "ok"},
            {
                "address": "https://player2.lbry.tv",
                "status": "not_ready",
                "error": "http status 502",
            },
        ],
    },
    "general_state": "failing",
}


def get_status_cache(request: Request) -> StatusCache:
    """Return the application's status cache."""
    return request.app.state.status_cache


@router.get(
    "/status",
    response_model=HealthSnapshot,
    summary="Service status",
    description="Aggregated health of backend nodes and media servers, "
    "cached for the configured validity window",
    response_description="Status document with per-target observations",
    responses={
        200: {"description": "Every target is ok"},
        503: {
            "description": "At least one target is not ok",
            "content": {"application/json": {"example": _SNAPSHOT_EXAMPLE}},
        },
    },
)
async def get_status(
    cache: StatusCache = Depends(get_status_cache),
) -> PrettyJSONResponse:
    """Return the cached status snapshot, recomputing it when stale."""
    snapshot = await cache.get_or_recompute()
    return PrettyJSONResponse(
        status_code=snapshot.http_status,
        content=snapshot.to_payload(),
    )


@router.get(
    "/whoami",
    status_code=status.HTTP_200_OK,
    response_model=WhoAmIResponse,
    summary="Request introspection",
    description="Echo the remote address and forwarding headers of the request",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "ip": "10.0.0.5:53211",
                        "X-Forwarded-For": "1.2.3.4",
                        "X-Real-Ip": "1.2.3.4",
                    }
                }
            },
        },
    },
)
async def whoami(request: Request) -> PrettyJSONResponse:
    """Return request-identifying metadata verbatim."""
    client = request.client
    details = WhoAmIResponse(
        ip=f"{client.host}:{client.port}" if client else "",
        forwarded_for=request.headers.get("X-Forwarded-For", ""),
        real_ip=request.headers.get("X-Real-Ip", ""),
    )
    return PrettyJSONResponse(content=details.model_dump(by_alias=True))
