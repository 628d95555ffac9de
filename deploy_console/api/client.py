"""HTTP client for the deployment backend."""

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from deploy_console.api.middleware import RequestLoggingHooks
from deploy_console.core.exceptions import ServerError, TransportError
from deploy_console.core.session import AuthContext
from deploy_console.models.auth import (
    CodeExchangeRequest,
    SendOtpRequest,
    SendOtpResponse,
    TokenExchangeResponse,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from deploy_console.models.deployment import (
    DeploymentList,
    DeploymentRecord,
    DeployRequest,
    DeployResponse,
    InstallationExchangeResponse,
    Repository,
    RepositoryList,
    RetryRequest,
    RetryResponse,
)
from deploy_console.utils.logging import get_logger

logger = get_logger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class BackendClient:
    """JSON-over-HTTPS client for the deployment backend.

    Authenticated calls read the bearer token from the ``AuthContext`` at call
    time, so a token stored mid-session is picked up by the next request.

    Raises (from every endpoint method):
        TransportError: The request did not complete or the body was unreadable.
        ServerError: Non-2xx status. ``server_message`` holds the body's
            ``message`` when present.
    """

    def __init__(
        self,
        base_url: str,
        auth: AuthContext,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.auth = auth
        self._hooks = RequestLoggingHooks()
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
            event_hooks=self._hooks.as_event_hooks(),
        )

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        response_model: type[ResponseT],
        body: BaseModel | dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        authenticated: bool = True,
    ) -> ResponseT:
        headers = self.auth.headers() if authenticated else {}
        if isinstance(body, BaseModel):
            body = body.model_dump(mode="json", by_alias=True, exclude_none=True)

        try:
            response = await self._client.request(
                method, path, json=body, params=params, headers=headers
            )
        except httpx.HTTPError as e:
            logger.warning("backend.transport_failed", method=method, path=path, error=str(e))
            raise TransportError(f"Request failed: {e}", method=method, path=path) from e

        data = self._decode(response, method, path)

        if response.is_error:
            message = data.get("message") if isinstance(data, dict) else None
            logger.warning(
                "backend.request_rejected",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise ServerError(
                message if isinstance(message, str) else None,
                status_code=response.status_code,
                path=path,
            )

        try:
            return response_model.model_validate(data)
        except PydanticValidationError as e:
            raise TransportError(
                f"Malformed response body: {e.error_count()} error(s)",
                method=method,
                path=path,
            ) from e

    @staticmethod
    def _decode(response: httpx.Response, method: str, path: str) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            if response.is_error:
                return {}
            raise TransportError("Response is not valid JSON", method=method, path=path) from e

    # Auth

    async def send_otp(self, email: str) -> SendOtpResponse:
        """POST /auth/send-otp."""
        return await self._request(
            "POST",
            "/auth/send-otp",
            SendOtpResponse,
            body=SendOtpRequest(email=email),
            authenticated=False,
        )

    async def verify_otp(self, request: VerifyOtpRequest) -> VerifyOtpResponse:
        """POST /auth/verify-otp."""
        return await self._request(
            "POST", "/auth/verify-otp", VerifyOtpResponse, body=request, authenticated=False
        )

    async def exchange_github_code(self, code: str) -> TokenExchangeResponse:
        """POST /auth/github/exchange: trade an OAuth code for a session token."""
        return await self._request(
            "POST",
            "/auth/github/exchange",
            TokenExchangeResponse,
            body=CodeExchangeRequest(code=code),
            authenticated=False,
        )

    # Deployments

    async def exchange_installation_code(self, code: str) -> InstallationExchangeResponse:
        """POST /deploy/exchange: trade an app authorization code for an installation id."""
        return await self._request(
            "POST",
            "/deploy/exchange",
            InstallationExchangeResponse,
            body=CodeExchangeRequest(code=code),
        )

    async def list_repositories(self, installation_id: int | str) -> list[Repository]:
        """GET /deploy/repositories."""
        result = await self._request(
            "GET",
            "/deploy/repositories",
            RepositoryList,
            params={"installation_id": installation_id},
        )
        return result.repositories or []

    async def create_deployment(self, request: DeployRequest) -> DeployResponse:
        """POST /deploy."""
        return await self._request("POST", "/deploy", DeployResponse, body=request.to_payload())

    async def list_deployments(self) -> list[DeploymentRecord]:
        """GET /dashboard."""
        result = await self._request("GET", "/dashboard", DeploymentList)
        return result.deployments or []

    async def retry_deployment(self, deployment_id: str) -> RetryResponse:
        """POST /deploy/retry."""
        return await self._request(
            "POST",
            "/deploy/retry",
            RetryResponse,
            body=RetryRequest(deployment_id=deployment_id),
        )
