"""Tests for status aggregation."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from app.core.exceptions import NodeDirectoryError
from app.core.health.models import ServerObservation, ServerStatus
from app.core.health.service import DIRECTORY_ADDRESS, StatusAggregator
from app.services.node_directory import Node


class TestStatusAggregator:
    """Test StatusAggregator functionality."""

    async def test_all_healthy(self, healthy_aggregator, media_servers):
        """Nodes listed and every media server answering the sentinel code."""
        snapshot = await healthy_aggregator.recompute()

        assert snapshot.overall_status == ServerStatus.OK
        assert snapshot.http_status == 200
        assert [o.address for o in snapshot.groups["lbrynet"]] == [
            "http://n1:5279/",
            "http://n2:5279/",
        ]
        assert [o.address for o in snapshot.groups["player"]] == media_servers
        for observations in snapshot.groups.values():
            assert all(o.status == ServerStatus.OK for o in observations)

    async def test_media_server_timeout(
        self, node_directory, media_servers, make_prober, media_handler
    ):
        prober = make_prober(
            media_handler({}, failures={"player2.test": httpx.ReadTimeout("timed out")})
        )
        aggregator = StatusAggregator(node_directory, prober, media_servers)

        snapshot = await aggregator.recompute()

        players = snapshot.groups["player"]
        assert players[1].status == ServerStatus.OFFLINE
        assert players[1].detail
        assert players[0].status == ServerStatus.OK
        assert players[2].status == ServerStatus.OK
        assert all(o.status == ServerStatus.OK for o in snapshot.groups["lbrynet"])
        assert snapshot.overall_status == ServerStatus.FAILING
        assert snapshot.http_status == 503

    async def test_media_server_unexpected_code(
        self, node_directory, media_servers, make_prober, media_handler
    ):
        prober = make_prober(media_handler({"player3.test": 200}))
        aggregator = StatusAggregator(node_directory, prober, media_servers)

        snapshot = await aggregator.recompute()

        player = snapshot.groups["player"][2]
        assert player.status == ServerStatus.NOT_READY
        assert "200" in player.detail
        assert snapshot.overall_status == ServerStatus.FAILING

    async def test_group_names_and_order(self, node_directory, make_prober, media_handler):
        aggregator = StatusAggregator(
            node_directory,
            make_prober(media_handler({})),
            ["https://player1.test"],
            node_group="backend-nodes",
            media_group="media-servers",
        )

        snapshot = await aggregator.recompute()

        assert list(snapshot.groups) == ["backend-nodes", "media-servers"]

    async def test_grouping_is_deterministic(self, healthy_aggregator):
        first = await healthy_aggregator.recompute()
        second = await healthy_aggregator.recompute()

        assert first.groups == second.groups
        assert list(first.groups) == list(second.groups)

    async def test_computed_at_is_utc(self, healthy_aggregator):
        before = datetime.now(timezone.utc)
        snapshot = await healthy_aggregator.recompute()

        assert snapshot.computed_at.tzinfo is not None
        assert snapshot.computed_at.utcoffset().total_seconds() == 0
        assert snapshot.computed_at >= before

    async def test_directory_membership_is_read_each_time(
        self, node_directory, make_prober, media_handler
    ):
        aggregator = StatusAggregator(node_directory, make_prober(media_handler({})), [])

        node_directory.set_nodes([Node(name="n3", address="http://n3:5279/")])
        snapshot = await aggregator.recompute()

        assert [o.address for o in snapshot.groups["lbrynet"]] == ["http://n3:5279/"]

    async def test_directory_failure_degrades_node_group(
        self, media_servers, make_prober, media_handler
    ):
        directory = Mock()
        directory.list_nodes.side_effect = NodeDirectoryError("directory down")
        aggregator = StatusAggregator(
            directory, make_prober(media_handler({})), media_servers
        )

        snapshot = await aggregator.recompute()

        nodes = snapshot.groups["lbrynet"]
        assert len(nodes) == 1
        assert nodes[0].address == DIRECTORY_ADDRESS
        assert nodes[0].status == ServerStatus.FAILING
        assert nodes[0].detail == "directory down"
        # Media servers are still probed
        assert all(o.status == ServerStatus.OK for o in snapshot.groups["player"])
        assert snapshot.http_status == 503

    async def test_unexpected_probe_error_isolated(self, node_directory, media_servers):
        prober = Mock()
        prober.observe_node.side_effect = lambda node: ServerObservation(
            address=node.address, status=ServerStatus.OK
        )

        async def probe(address):
            if address == "https://player2.test":
                raise RuntimeError("probe bug")
            return ServerObservation(address=address, status=ServerStatus.OK)

        prober.probe_server = AsyncMock(side_effect=probe)
        aggregator = StatusAggregator(node_directory, prober, media_servers)

        snapshot = await aggregator.recompute()

        players = snapshot.groups["player"]
        assert [o.status for o in players] == [
            ServerStatus.OK,
            ServerStatus.FAILING,
            ServerStatus.OK,
        ]
        assert players[1].detail == "probe bug"
        assert snapshot.overall_status == ServerStatus.FAILING

    async def test_cancelled_probe_is_not_absorbed(self, node_directory, media_servers):
        prober = Mock()
        prober.observe_node.side_effect = lambda node: ServerObservation(
            address=node.address, status=ServerStatus.OK
        )
        prober.probe_server = AsyncMock(side_effect=asyncio.CancelledError())
        aggregator = StatusAggregator(node_directory, prober, media_servers)

        with pytest.raises(asyncio.CancelledError):
            await aggregator.recompute()
