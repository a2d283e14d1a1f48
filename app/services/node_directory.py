"""In-process directory of the backend nodes the gateway balances across."""

import logging
import threading
from typing import Dict, Iterable, List

from pydantic import BaseModel, ConfigDict, Field

from app.core.settings import Settings

logger = logging.getLogger(__name__)


class Node(BaseModel):
    """A backend node registered with the gateway."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Node name")
    address: str = Field(..., description="Node API address")


class NodeDirectory:
    """Current backend node membership.

    Membership is replaced wholesale by ``set_nodes``; readers always get a
    copy of the list in registration order.
    """

    def __init__(self, nodes: Iterable[Node] = ()) -> None:
        self._lock = threading.Lock()
        self._nodes: List[Node] = list(nodes)

    @classmethod
    def from_settings(cls, settings: Settings) -> "NodeDirectory":
        """Seed the directory from the configured name -> address mapping."""
        return cls.from_mapping(settings.backend_nodes)

    @classmethod
    def from_mapping(cls, nodes: Dict[str, str]) -> "NodeDirectory":
        return cls(Node(name=name, address=address) for name, address in nodes.items())

    def list_nodes(self) -> List[Node]:
        """Return the current members."""
        with self._lock:
            return list(self._nodes)

    def set_nodes(self, nodes: Iterable[Node]) -> None:
        """Replace the current membership."""
        new_nodes = list(nodes)
        with self._lock:
            self._nodes = new_nodes
        logger.info(
            "Node directory updated",
            extra={"node_count": len(new_nodes)},
        )
