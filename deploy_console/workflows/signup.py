"""Two-step account creation: credentials, then email verification."""

from enum import Enum

from deploy_console.api.client import BackendClient
from deploy_console.config import Settings
from deploy_console.core.events import EventBus
from deploy_console.core.exceptions import (
    ServerError,
    SignupDraftMissingError,
    TransportError,
    ValidationError,
    ViewClosedError,
)
from deploy_console.core.navigation import Location, Navigator, Route
from deploy_console.core.session import AuthContext, SignupDraftStore
from deploy_console.models.auth import SignupCredentials, SignupDraft, VerifyOtpRequest
from deploy_console.workflows.otp import OTP_LENGTH, OtpWorkflow


class SignupStep(str, Enum):
    """Signup steps."""

    CREDENTIALS = "credentials"
    OTP = "otp"


class SignupWorkflow(OtpWorkflow):
    """Signup view.

    Flow:
    1. ``submit_credentials`` validates the form, stores a draft and sends a code
    2. typing the last code digit verifies it and creates the account
    3. on success the draft is dropped, the token stored and the user sent
       to the dashboard

    Opening the view with ``?code=`` (a GitHub OAuth return) exchanges the
    code for a session token regardless of the current step.
    """

    auto_verify = True

    def __init__(
        self,
        client: BackendClient,
        auth: AuthContext,
        navigator: Navigator,
        drafts: SignupDraftStore,
        settings: Settings | None = None,
        events: EventBus | None = None,
    ):
        super().__init__(client, auth, navigator, settings=settings, events=events)
        self.drafts = drafts
        self.step = SignupStep.CREDENTIALS
        self.submitting = False
        self.exchanging = False

    @property
    def name(self) -> str:
        return "signup"

    @property
    def route(self) -> Route:
        return Route.SIGN_UP

    async def on_mount(self, location: Location) -> None:
        code = location.query.get("code")
        if code:
            await self.complete_oauth(code)
            return

        # Reloaded between the two steps: pick up the stored draft
        draft = self.drafts.load()
        if draft is not None:
            self.email = draft.email
            self.step = SignupStep.OTP

    async def complete_oauth(self, code: str) -> bool:
        """Exchange a GitHub OAuth code for a session token."""
        if self.exchanging:
            return False

        self.exchanging = True
        try:
            result = await self._call(self.client.exchange_github_code(code))
        except ViewClosedError:
            return False
        except ServerError as e:
            self.logger.warning("signup.oauth.rejected", status_code=e.status_code)
            self.messages.show_error("GitHub authentication failed. Please try again.")
            return False
        except TransportError as e:
            self.logger.warning("signup.oauth.failed", error=e.message)
            self.messages.show_error("Authentication failed. Please try again.")
            return False
        finally:
            self.exchanging = False

        if not (result.success and result.token):
            self.messages.show_error("GitHub authentication failed. Please try again.")
            return False

        self.auth.set_token(result.token)
        self.logger.info("signup.oauth.completed")
        self.navigator.navigate(Route.DASHBOARD)
        return True

    def validate_credentials(self, credentials: SignupCredentials) -> None:
        """Raises ValidationError for the first failing check."""
        if credentials.password != credentials.confirm_password:
            raise ValidationError("Passwords do not match")
        if len(credentials.password) < self.settings.min_password_length:
            raise ValidationError(
                f"Password must be at least {self.settings.min_password_length} characters long"
            )
        if not credentials.accept_terms:
            raise ValidationError("Please accept the terms and conditions")

    async def submit_credentials(self, credentials: SignupCredentials) -> bool:
        """Step 1: store the draft, request a code and move to the OTP step."""
        if self.submitting:
            return False
        self.messages.clear()

        try:
            self.validate_credentials(credentials)
        except ValidationError as e:
            self.messages.show_error(e.message)
            return False

        self.submitting = True
        try:
            self.drafts.save(SignupDraft.from_credentials(credentials))
            self.email = credentials.email
            self.logger.info("signup.credentials_accepted")

            await self._send_code(
                self.email,
                sent_message="OTP sent to your email!",
                failure_message="Failed to send OTP",
            )
        except ViewClosedError:
            return False
        finally:
            self.submitting = False

        # The step advances and the cooldown is armed even when the send failed
        self.cooldown.start(self.settings.otp_resend_cooldown_seconds)
        self.step = SignupStep.OTP
        self.otp.clear()
        return True

    async def resend_code(self) -> bool:
        """Send a fresh code once the cooldown has run out."""
        if self.step != SignupStep.OTP or not self.can_resend:
            return False
        try:
            return await self._send_code(
                self.email,
                sent_message="OTP sent to your email!",
                failure_message="Failed to send OTP",
            )
        except ViewClosedError:
            return False

    async def verify(self) -> bool:
        """Step 2: verify the code and create the account."""
        if self.verifying:
            return False
        self.messages.clear()

        code = self.otp.code
        if len(code) != OTP_LENGTH:
            self.messages.show_error("Please enter a valid 6-digit OTP")
            return False

        draft = self.drafts.load()
        if draft is None:
            error = SignupDraftMissingError()
            self.logger.error("signup.verify.draft_missing")
            self.messages.show_error(error.message)
            return False

        request = VerifyOtpRequest(
            email=draft.email,
            username=draft.username,
            password=draft.password,
            otp=code,
        )

        self.verifying = True
        try:
            result = await self._call(self.client.verify_otp(request))
        except ViewClosedError:
            return False
        except ServerError as e:
            return self._verification_failed(e.server_message)
        except TransportError:
            return self._verification_failed(None)
        finally:
            self.verifying = False

        if not result.token:
            return self._verification_failed(result.message)

        self.drafts.delete()
        self.auth.set_token(result.token)
        self.logger.info("signup.verify.completed")
        self.navigator.navigate(Route.DASHBOARD)
        return True

    def _verification_failed(self, server_message: str | None) -> bool:
        # The draft stays so the user can try another code
        self.logger.info("signup.verify.failed")
        self.messages.show_error(server_message or "OTP verification failed")
        self.otp.clear()
        return False

    def back_to_credentials(self) -> None:
        """Abandon the OTP step and start over."""
        self.step = SignupStep.CREDENTIALS
        self.messages.clear()
        self.otp.clear()
        self.drafts.delete()
