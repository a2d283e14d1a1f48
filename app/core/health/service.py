"""Status aggregation across backend nodes and media servers."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, List, Sequence

from app.services.node_directory import NodeDirectory

from .models import HealthSnapshot, ServerObservation, ServerStatus
from .probes import ProbeExecutor

logger = logging.getLogger(__name__)

DIRECTORY_ADDRESS = "node-directory"


class StatusAggregator:
    """Turns the node directory and media server probes into one snapshot."""

    def __init__(
        self,
        directory: NodeDirectory,
        prober: ProbeExecutor,
        media_servers: Sequence[str],
        node_group: str = "lbrynet",
        media_group: str = "player",
    ):
        self.directory = directory
        self.prober = prober
        self.media_servers = list(media_servers)
        self.node_group = node_group
        self.media_group = media_group

    async def recompute(self) -> HealthSnapshot:
        """Observe every target and build a fresh snapshot."""
        groups: Dict[str, List[ServerObservation]] = {
            self.node_group: self._observe_nodes(),
            self.media_group: await self._probe_media_servers(),
        }
        snapshot = HealthSnapshot.build(groups, computed_at=datetime.now(timezone.utc))

        logger.info(
            "Status recomputed",
            extra={
                "general_state": snapshot.overall_status.value,
                "targets": sum(len(group) for group in groups.values()),
            },
        )
        return snapshot

    def _observe_nodes(self) -> List[ServerObservation]:
        # A broken directory degrades the node group instead of failing the request
        try:
            nodes = self.directory.list_nodes()
        except Exception as e:
            logger.error(
                f"Failed to read node directory: {e}",
                extra={"error_type": type(e).__name__},
                exc_info=True,
            )
            return [
                ServerObservation(
                    address=DIRECTORY_ADDRESS,
                    status=ServerStatus.FAILING,
                    detail=str(e) or type(e).__name__,
                )
            ]
        return [self.prober.observe_node(node) for node in nodes]

    async def _probe_media_servers(self) -> List[ServerObservation]:
        results = await asyncio.gather(
            *(self.prober.probe_server(address) for address in self.media_servers),
            return_exceptions=True,
        )

        observations = []
        for address, result in zip(self.media_servers, results):
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result
            if isinstance(result, Exception):
                logger.error(
                    f"Probe of {address} raised unexpectedly: {result}",
                    extra={"address": address, "error_type": type(result).__name__},
                )
                result = ServerObservation(
                    address=address,
                    status=ServerStatus.FAILING,
                    detail=str(result) or type(result).__name__,
                )
            observations.append(result)
        return observations
