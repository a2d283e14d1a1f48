"""Health aggregation data models."""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ServerStatus(str, Enum):
    """Health status of a single target, and of the service overall."""

    OK = "ok"
    NOT_READY = "not_ready"
    OFFLINE = "offline"
    FAILING = "failing"


class ServerObservation(BaseModel):
    """Health verdict for one probed or reported target."""

    model_config = ConfigDict(frozen=True)

    address: str = Field(..., description="URL or host identifier of the target")
    status: ServerStatus
    detail: Optional[str] = Field(
        None,
        serialization_alias="error",
        description="Error text or unexpected response code, only when not ok",
    )


class HealthSnapshot(BaseModel):
    """Aggregated result of one probing cycle."""

    model_config = ConfigDict(frozen=True)

    computed_at: datetime = Field(..., serialization_alias="timestamp")
    groups: Dict[str, List[ServerObservation]] = Field(
        ..., serialization_alias="services"
    )
    overall_status: ServerStatus = Field(..., serialization_alias="general_state")

    @classmethod
    def build(
        cls, groups: Dict[str, List[ServerObservation]], computed_at: datetime
    ) -> "HealthSnapshot":
        """Create a snapshot, deriving the overall status from the groups."""
        failing = any(
            observation.status != ServerStatus.OK
            for observations in groups.values()
            for observation in observations
        )
        return cls(
            computed_at=computed_at,
            groups=groups,
            overall_status=ServerStatus.FAILING if failing else ServerStatus.OK,
        )

    @property
    def http_status(self) -> int:
        """HTTP status code to report for this snapshot."""
        return 200 if self.overall_status == ServerStatus.OK else 503

    def to_payload(self) -> dict:
        """Serialize to the public status document."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
