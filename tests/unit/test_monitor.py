"""Unit tests for dashboard filtering, sorting and stats."""

import pytest

from deploy_console.models.deployment import DeploymentRecord, DeploymentStatus
from deploy_console.workflows.monitor import (
    DeploymentMonitor,
    SortOrder,
    filter_by_status,
    sort_by_created,
)


@pytest.fixture
def records(deployment_payloads: list[dict]) -> list[DeploymentRecord]:
    return [DeploymentRecord.model_validate(p) for p in deployment_payloads]


class TestFiltering:
    """Tests for status filtering."""

    def test_all_keeps_everything(self, records: list[DeploymentRecord]):
        assert filter_by_status(records, "all") == records

    @pytest.mark.parametrize("status", ["success", "failed", "building", "queued", "deploying"])
    def test_exact_match(self, records: list[DeploymentRecord], status: str):
        result = filter_by_status(records, status)
        assert all(record.status == status for record in result)
        assert len(result) == sum(1 for r in records if r.status == status)

    def test_enum_filter(self, records: list[DeploymentRecord]):
        result = filter_by_status(records, DeploymentStatus.FAILED)
        assert [r.repo_name for r in result] == ["blog"]


class TestSorting:
    """Tests for createdAt ordering."""

    def test_newest_first(self, records: list[DeploymentRecord]):
        result = sort_by_created(records, SortOrder.NEWEST)
        created = [r.created_at for r in result]
        assert created == sorted(created, reverse=True)
        assert result[0].repo_name == "docs"

    def test_oldest_first(self, records: list[DeploymentRecord]):
        result = sort_by_created(records, "oldest")
        created = [r.created_at for r in result]
        assert created == sorted(created)

    def test_does_not_mutate_input(self, records: list[DeploymentRecord]):
        before = list(records)
        sort_by_created(records)
        assert records == before


class TestMonitorViews:
    """Tests for derived monitor state."""

    @pytest.fixture
    def monitor(self, view_kwargs: dict, records: list[DeploymentRecord]) -> DeploymentMonitor:
        monitor = DeploymentMonitor(**view_kwargs)
        monitor.deployments = records
        return monitor

    def test_stats_use_unfiltered_list(self, monitor: DeploymentMonitor):
        monitor.set_filter("failed")

        assert monitor.stats.model_dump() == {"total": 4, "success": 1, "failed": 1, "active": 2}
        assert [r.repo_name for r in monitor.visible] == ["blog"]

    def test_visible_is_sorted(self, monitor: DeploymentMonitor):
        monitor.set_sort("oldest")
        assert [r.repo_name for r in monitor.visible] == ["shop", "api", "blog", "docs"]

    def test_unknown_filter(self, monitor: DeploymentMonitor):
        with pytest.raises(ValueError):
            monitor.set_filter("cancelled")

    def test_can_retry_only_failed(self, monitor: DeploymentMonitor, records: list[DeploymentRecord]):
        assert [monitor.can_retry(r) for r in records] == [False, True, False, False]

        monitor.retrying = True
        assert monitor.can_retry(records[1]) is False

    def test_new_deployment_navigates(self, monitor: DeploymentMonitor):
        monitor.new_deployment()
        assert monitor.navigator.current.path == "/deploy"
