"""Dashboard: live deployment list with filtering, sorting and retry."""

import asyncio
from collections.abc import Iterable
from enum import Enum
from typing import Literal, get_args

from deploy_console.core.exceptions import ServerError, TransportError, ViewClosedError
from deploy_console.core.navigation import Location, Route
from deploy_console.models.deployment import DeploymentRecord, DeploymentStats, DeploymentStatus
from deploy_console.workflows.base import BaseWorkflow

StatusFilter = Literal["all", "queued", "building", "deploying", "success", "failed"]


class SortOrder(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"


def filter_by_status(
    records: Iterable[DeploymentRecord], status: StatusFilter | DeploymentStatus
) -> list[DeploymentRecord]:
    """Keep records whose status equals ``status`` exactly (``all`` keeps everything)."""
    if status == "all":
        return list(records)
    return [record for record in records if record.status == status]


def sort_by_created(
    records: Iterable[DeploymentRecord], order: SortOrder = SortOrder.NEWEST
) -> list[DeploymentRecord]:
    return sorted(
        records,
        key=lambda record: record.created_at,
        reverse=SortOrder(order) == SortOrder.NEWEST,
    )


class DeploymentMonitor(BaseWorkflow):
    """Dashboard view.

    Loads the deployment list on mount and polls it every
    ``dashboard_poll_interval_seconds``. A failed fetch keeps the last list
    and sets ``fetch_error`` until a later fetch succeeds.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.deployments: list[DeploymentRecord] = []
        self.loading = True
        self.fetch_error = ""
        self.status_filter: StatusFilter = "all"
        self.sort_order = SortOrder.NEWEST
        self.retrying = False

        self._refresh_lock = asyncio.Lock()
        self._poller = self.scope.periodic(
            self.settings.dashboard_poll_interval_seconds, self.refresh
        )

    @property
    def name(self) -> str:
        return "dashboard"

    @property
    def route(self) -> Route:
        return Route.DASHBOARD

    async def on_mount(self, location: Location) -> None:
        self._poller.start()
        await self.refresh()

    @property
    def polling(self) -> bool:
        return self._poller.running

    async def refresh(self) -> bool:
        """Fetch the deployment list."""
        async with self._refresh_lock:
            try:
                records = await self._call(self.client.list_deployments())
            except ViewClosedError:
                return False
            except (ServerError, TransportError) as e:
                self.logger.warning("dashboard.fetch_failed", error=e.message)
                self.fetch_error = "Failed to fetch deployments"
                return False
            finally:
                self.loading = False

            self.deployments = records
            self.fetch_error = ""

        stats = self.stats
        self.logger.debug("dashboard.refreshed", total=stats.total, active=stats.active)
        if self.events:
            self.events.publish_deployments_refreshed(len(records), stats.model_dump())
        return True

    # Derived views

    @property
    def stats(self) -> DeploymentStats:
        return DeploymentStats.from_records(self.deployments)

    @property
    def visible(self) -> list[DeploymentRecord]:
        """Deployments after the current filter and sort order."""
        return sort_by_created(
            filter_by_status(self.deployments, self.status_filter), self.sort_order
        )

    def set_filter(self, status: StatusFilter | DeploymentStatus) -> None:
        value = status.value if isinstance(status, DeploymentStatus) else status
        if value not in get_args(StatusFilter):
            raise ValueError(f"Unknown status filter: {status}")
        self.status_filter = value

    def set_sort(self, order: SortOrder | str) -> None:
        self.sort_order = SortOrder(order)

    # Actions

    def can_retry(self, record: DeploymentRecord) -> bool:
        return record.status == DeploymentStatus.FAILED and not self.retrying

    def _find(self, deployment_id: str) -> DeploymentRecord | None:
        return next((d for d in self.deployments if d.id == deployment_id), None)

    async def retry(self, deployment: DeploymentRecord | str) -> bool:
        """Re-queue a failed deployment, then refresh immediately.

        Only one retry may be in flight at a time.
        """
        if self.retrying:
            return False

        record = self._find(deployment) if isinstance(deployment, str) else deployment
        if record is None or record.status != DeploymentStatus.FAILED:
            self.messages.show_error("Only failed deployments can be retried")
            return False

        self.retrying = True
        try:
            await self._call(self.client.retry_deployment(record.id))
        except ViewClosedError:
            return False
        except ServerError as e:
            self.logger.warning("dashboard.retry.rejected", deployment_id=record.id)
            self.messages.show_error(e.server_message or "Retry failed")
            return False
        except TransportError as e:
            self.logger.warning("dashboard.retry.failed", deployment_id=record.id, error=e.message)
            self.messages.show_error("Retry failed")
            return False
        finally:
            self.retrying = False

        self.logger.info("dashboard.retry.requested", deployment_id=record.id)
        await self.refresh()
        return True

    def new_deployment(self) -> None:
        self.navigator.navigate(Route.DEPLOY)
