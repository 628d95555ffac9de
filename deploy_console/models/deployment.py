"""Deployment data models."""

from datetime import datetime
from enum import Enum
from typing import Iterable

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DeploymentStatus(str, Enum):
    """Deployment pipeline status, driven by the backend."""

    QUEUED = "queued"
    BUILDING = "building"
    DEPLOYING = "deploying"
    SUCCESS = "success"
    FAILED = "failed"


ACTIVE_STATUSES = frozenset(
    {DeploymentStatus.QUEUED, DeploymentStatus.BUILDING, DeploymentStatus.DEPLOYING}
)


class ProjectType(str, Enum):
    """Kind of project the backend should build."""

    REACT = "react"
    STATIC = "static"
    DJANGO = "django"
    FASTAPI = "fastapi"
    FLASK = "flask"


class CamelModel(BaseModel):
    """Model exchanged with the backend using camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Repository(CamelModel):
    """A repository visible to a GitHub App installation."""

    repo_id: int | str
    name: str
    full_name: str


class RepositoryList(BaseModel):
    repositories: list[Repository] | None = None


class InstallationExchangeResponse(BaseModel):
    """Response of POST /deploy/exchange."""

    success: bool = False
    installation_id: int | str | None = None
    message: str | None = None


class UrlSource(BaseModel):
    """Deploy from a raw URL."""

    model_config = ConfigDict(frozen=True)

    url: str


class RepositorySource(BaseModel):
    """Deploy a repository reached through the GitHub App installation."""

    model_config = ConfigDict(frozen=True)

    installation_id: int | str
    repo_id: int | str
    repo_name: str
    full_name: str
    branch_name: str


DeploymentSource = UrlSource | RepositorySource


class DeployRequest(CamelModel):
    """Body of POST /deploy."""

    is_url_deployment: bool
    environment: str
    project_type: ProjectType

    url: str | None = None

    installation_id: int | str | None = None
    repo_id: int | str | None = None
    repo_name: str | None = None
    full_name: str | None = None
    branch_name: str | None = None

    @classmethod
    def from_source(
        cls,
        source: DeploymentSource,
        environment: str,
        project_type: ProjectType,
    ) -> "DeployRequest":
        """Build the request body for the active source."""
        if isinstance(source, UrlSource):
            return cls(
                is_url_deployment=True,
                environment=environment,
                project_type=project_type,
                url=source.url,
            )
        return cls(
            is_url_deployment=False,
            environment=environment,
            project_type=project_type,
            installation_id=source.installation_id,
            repo_id=source.repo_id,
            repo_name=source.repo_name,
            full_name=source.full_name,
            branch_name=source.branch_name,
        )

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DeployResponse(BaseModel):
    success: bool = False
    message: str | None = None


class DeploymentRecord(CamelModel):
    """A deployment as listed on the dashboard."""

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    repo_name: str = ""
    full_name: str = ""
    branch_name: str = ""
    environment: str = ""
    # Unknown statuses are kept verbatim so they still count towards the total
    status: DeploymentStatus | str = Field(union_mode="left_to_right")
    deployed_url: str | None = None
    created_at: datetime
    updated_at: datetime
    commit_hash: str | None = None
    commit_message: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def short_id(self) -> str:
        return self.id[-8:]


class DeploymentList(BaseModel):
    deployments: list[DeploymentRecord] | None = None


class RetryRequest(CamelModel):
    """Body of POST /deploy/retry."""

    deployment_id: str


class RetryResponse(BaseModel):
    success: bool = False
    message: str | None = None


class DeploymentStats(BaseModel):
    """Aggregate counts over the unfiltered deployment list."""

    total: int = 0
    success: int = 0
    failed: int = 0
    active: int = 0

    @classmethod
    def from_records(cls, records: Iterable[DeploymentRecord]) -> "DeploymentStats":
        stats = cls()
        for record in records:
            stats.total += 1
            if record.status == DeploymentStatus.SUCCESS:
                stats.success += 1
            elif record.status == DeploymentStatus.FAILED:
                stats.failed += 1
            elif record.is_active:
                stats.active += 1
        return stats
