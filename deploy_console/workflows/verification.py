"""Email verification for registered users: request a code, then enter it."""

from deploy_console.core.exceptions import ServerError, TransportError, ViewClosedError
from deploy_console.core.navigation import Location, Route
from deploy_console.models.auth import VerifyOtpRequest
from deploy_console.workflows.base import BaseWorkflow
from deploy_console.workflows.otp import OTP_LENGTH, OtpWorkflow


class SendCodeWorkflow(BaseWorkflow):
    """Collects an email address and sends it a code."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.email = ""
        self.sending = False

    @property
    def name(self) -> str:
        return "send_code"

    @property
    def route(self) -> Route:
        return Route.SEND_OTP

    async def request_code(self, email: str) -> bool:
        """Send a code and continue to the verify-code view."""
        if self.sending:
            return False
        self.messages.clear()

        self.email = email.strip()
        if not self.email:
            self.messages.show_error("Email is required")
            return False

        failure_message = "Failed to send OTP. Please try again."
        self.sending = True
        try:
            result = await self._call(self.client.send_otp(self.email))
        except ViewClosedError:
            return False
        except ServerError as e:
            self.messages.show_error(e.server_message or failure_message)
            return False
        except TransportError:
            self.messages.show_error(failure_message)
            return False
        finally:
            self.sending = False

        if not result.success:
            self.messages.show_error(result.message or failure_message)
            return False

        self.navigator.navigate(Route.VERIFY_OTP, state={"email": self.email})
        return True


class VerificationWorkflow(OtpWorkflow):
    """Verify-code view.

    The email arrives as navigation state from the send-code view. A code was
    just sent, so the resend cooldown starts armed.
    """

    @property
    def name(self) -> str:
        return "verification"

    @property
    def route(self) -> Route:
        return Route.VERIFY_OTP

    async def on_mount(self, location: Location) -> None:
        email = location.state.get("email")
        if isinstance(email, str) and email:
            self.email = email
        self.otp.clear()
        self.cooldown.start(self.settings.otp_resend_cooldown_seconds)

    def set_email(self, email: str) -> None:
        self.email = email.strip()

    @property
    def can_resend(self) -> bool:
        return super().can_resend and bool(self.email)

    async def verify(self) -> bool:
        if self.verifying:
            return False
        self.messages.clear()

        code = self.otp.code
        if len(code) != OTP_LENGTH:
            self.messages.show_error("Please enter a complete 6-digit code")
            return False
        if not self.email:
            self.messages.show_error("Email is required")
            return False

        self.verifying = True
        try:
            result = await self._call(
                self.client.verify_otp(VerifyOtpRequest(email=self.email, otp=code))
            )
        except ViewClosedError:
            return False
        except ServerError as e:
            return self._verification_failed(
                e.server_message or "Verification failed. Please try again."
            )
        except TransportError:
            return self._verification_failed("Verification failed. Please try again.")
        finally:
            self.verifying = False

        if not result.success:
            return self._verification_failed(result.message or "Invalid verification code")

        if result.token:
            self.auth.set_token(result.token)
        self.logger.info("verification.completed")
        self.navigator.navigate(Route.DASHBOARD)
        return True

    def _verification_failed(self, message: str) -> bool:
        self.logger.info("verification.failed")
        self.messages.show_error(message)
        self.otp.clear()
        return False

    async def resend_code(self) -> bool:
        """Send a new code; clears whatever was typed so far."""
        if not self.can_resend:
            return False
        try:
            sent = await self._send_code(
                self.email,
                sent_message="A new code has been sent to your email.",
                failure_message="Failed to resend code. Please try again.",
            )
        except ViewClosedError:
            return False
        if sent:
            self.otp.clear()
        return sent
