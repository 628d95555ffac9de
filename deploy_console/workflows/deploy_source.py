"""Deployment form: pick a URL or a GitHub repository and request a deployment."""

from enum import Enum

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from deploy_console.core.exceptions import (
    ServerError,
    TransportError,
    ValidationError,
    ViewClosedError,
)
from deploy_console.core.navigation import Location, Route
from deploy_console.models.deployment import (
    DeploymentSource,
    DeployRequest,
    ProjectType,
    Repository,
    RepositorySource,
    UrlSource,
)
from deploy_console.workflows.base import BaseWorkflow

_url_adapter = TypeAdapter(AnyUrl)


def is_valid_url(value: str) -> bool:
    """True for a well-formed absolute URL."""
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


class SourceMode(str, Enum):
    URL = "url"
    REPOSITORY = "repository"


class DeploymentSourceSelector(BaseWorkflow):
    """Deployment form view.

    The source is either a URL or a repository from the GitHub App
    installation, never both. Which one is active follows from two fields:
    a non-empty ``url`` means URL mode, otherwise an ``installation_id``
    means repository mode. Typing a URL drops the installation; a new
    installation drops the URL.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.url = ""
        self.url_valid = True
        self.installation_id: int | str | None = None
        self.repositories: list[Repository] = []
        self.selected_repository: Repository | None = None
        self.branch_name = self.settings.default_branch
        self.environment = self.settings.default_environment
        self.project_type = ProjectType.REACT

        self.submitting = False
        self.exchanging = False
        self._exchanged_codes: set[str] = set()

    @property
    def name(self) -> str:
        return "deploy_form"

    @property
    def route(self) -> Route:
        return Route.DEPLOY

    # Derived source

    @property
    def is_url_mode(self) -> bool:
        return bool(self.url)

    @property
    def is_repository_mode(self) -> bool:
        return not self.is_url_mode and self.installation_id is not None

    @property
    def mode(self) -> SourceMode | None:
        if self.is_url_mode:
            return SourceMode.URL
        if self.is_repository_mode:
            return SourceMode.REPOSITORY
        return None

    @property
    def source(self) -> DeploymentSource | None:
        """The active source, or None while it is incomplete."""
        if self.is_url_mode:
            return UrlSource(url=self.url)
        if self.is_repository_mode and self.selected_repository is not None:
            repo = self.selected_repository
            return RepositorySource(
                installation_id=self.installation_id,
                repo_id=repo.repo_id,
                repo_name=repo.name,
                full_name=repo.full_name,
                branch_name=self.branch_name.strip() or self.settings.default_branch,
            )
        return None

    # URL path

    def set_url(self, value: str) -> None:
        """Update the URL field. Invalid input is flagged, not rejected."""
        value = value.strip()
        self.url = value
        self.url_valid = is_valid_url(value) if value else True
        if value:
            self.installation_id = None
            self.repositories = []
            self.selected_repository = None

    # Repository path

    @property
    def authorization_url(self) -> str:
        return self.settings.github_app_install_url

    def start_authorization(self) -> bool:
        """Leave for the GitHub App install page. Unavailable in URL mode."""
        if self.is_url_mode or not self.authorization_url:
            return False
        self.navigator.redirect(self.authorization_url)
        return True

    async def on_mount(self, location: Location) -> None:
        code = location.query.get("code")
        if code:
            await self.exchange_code(code)

    async def exchange_code(self, code: str) -> bool:
        """Trade the authorization code from the install redirect for an installation id.

        Each code is exchanged at most once, and only with a session token.
        """
        if not code or not self.auth.is_authenticated:
            return False
        if self.exchanging or code in self._exchanged_codes:
            return False
        self._exchanged_codes.add(code)

        self.exchanging = True
        try:
            result = await self._call(self.client.exchange_installation_code(code))
        except ViewClosedError:
            return False
        except ServerError as e:
            self.logger.warning("deploy_form.exchange.rejected", status_code=e.status_code)
            self.messages.show_error("GitHub exchange failed")
            return False
        except TransportError as e:
            self.logger.warning("deploy_form.exchange.failed", error=e.message)
            self.messages.show_error("Network error during GitHub exchange")
            return False
        finally:
            self.exchanging = False

        if not result.success or result.installation_id is None:
            self.messages.show_error("GitHub exchange failed")
            return False

        self._use_installation(result.installation_id)
        await self.load_repositories()
        return True

    def _use_installation(self, installation_id: int | str) -> None:
        self.installation_id = installation_id
        self.url = ""
        self.url_valid = True
        self.repositories = []
        self.selected_repository = None
        self.logger.info("deploy_form.installation_linked", installation_id=installation_id)

    async def load_repositories(self) -> bool:
        """Fetch the repositories visible to the current installation."""
        installation_id = self.installation_id
        if installation_id is None:
            return False

        try:
            repositories = await self._call(self.client.list_repositories(installation_id))
        except ViewClosedError:
            return False
        except (ServerError, TransportError) as e:
            self.logger.warning("deploy_form.repositories.failed", error=e.message)
            self.messages.show_error("Failed to load repositories")
            return False

        # Switched to URL mode (or another installation) while loading
        if self.installation_id != installation_id:
            return False

        self.repositories = repositories
        return True

    def select_repository(self, repo_id: int | str) -> Repository | None:
        """Select a loaded repository by id."""
        if not self.is_repository_mode:
            return None
        self.selected_repository = next(
            (repo for repo in self.repositories if str(repo.repo_id) == str(repo_id)),
            None,
        )
        return self.selected_repository

    def set_branch(self, branch_name: str) -> None:
        self.branch_name = branch_name

    def set_environment(self, environment: str) -> None:
        self.environment = environment

    def set_project_type(self, project_type: ProjectType | str) -> None:
        self.project_type = ProjectType(project_type)

    # Submission

    def validate(self) -> DeploymentSource:
        """Return the source to deploy, or raise ValidationError."""
        if self.is_url_mode:
            if not self.url_valid:
                raise ValidationError("Invalid URL")
            return UrlSource(url=self.url)

        source = self.source
        if source is None:
            raise ValidationError("Select a repository")
        return source

    async def submit(self) -> bool:
        """Request a deployment of the active source."""
        if self.submitting:
            return False

        try:
            source = self.validate()
        except ValidationError as e:
            self.messages.show_error(e.message)
            return False

        request = DeployRequest.from_source(
            source,
            environment=self.environment.strip() or self.settings.default_environment,
            project_type=self.project_type,
        )

        self.submitting = True
        try:
            await self._call(self.client.create_deployment(request))
        except ViewClosedError:
            return False
        except ServerError as e:
            self.messages.show_error(e.server_message or "Deployment failed")
            return False
        except TransportError:
            self.messages.show_error("Network error")
            return False
        finally:
            self.submitting = False

        self.logger.info("deploy_form.submitted", mode=self.mode.value if self.mode else None)
        self.navigator.navigate(Route.DASHBOARD)
        return True
