"""Data models for the deployment console."""

from deploy_console.models.auth import (
    CodeExchangeRequest,
    SendOtpRequest,
    SendOtpResponse,
    SignupCredentials,
    SignupDraft,
    TokenExchangeResponse,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from deploy_console.models.deployment import (
    ACTIVE_STATUSES,
    DeploymentList,
    DeploymentRecord,
    DeploymentSource,
    DeploymentStats,
    DeploymentStatus,
    DeployRequest,
    DeployResponse,
    InstallationExchangeResponse,
    ProjectType,
    Repository,
    RepositoryList,
    RepositorySource,
    RetryRequest,
    RetryResponse,
    UrlSource,
)

__all__ = [
    # Auth models
    "SignupCredentials",
    "SignupDraft",
    "SendOtpRequest",
    "SendOtpResponse",
    "VerifyOtpRequest",
    "VerifyOtpResponse",
    "CodeExchangeRequest",
    "TokenExchangeResponse",
    # Deployment models
    "ACTIVE_STATUSES",
    "DeploymentStatus",
    "ProjectType",
    "Repository",
    "RepositoryList",
    "InstallationExchangeResponse",
    "UrlSource",
    "RepositorySource",
    "DeploymentSource",
    "DeployRequest",
    "DeployResponse",
    "DeploymentRecord",
    "DeploymentList",
    "RetryRequest",
    "RetryResponse",
    "DeploymentStats",
]
