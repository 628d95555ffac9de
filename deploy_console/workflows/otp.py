"""One-time code entry shared by the signup and verification views."""

from abc import abstractmethod

from deploy_console.core.exceptions import ServerError, TransportError
from deploy_console.workflows.base import BaseWorkflow

OTP_LENGTH = 6

_DIGITS = frozenset("0123456789")


def is_digits(value: str) -> bool:
    """True for a non-empty string of ASCII decimal digits."""
    return bool(value) and all(char in _DIGITS for char in value)


class OtpBuffer:
    """Six single-digit cells plus the index of the focused cell."""

    def __init__(self, length: int = OTP_LENGTH):
        self.length = length
        self.cells: list[str] = [""] * length
        self.focus = 0

    @property
    def code(self) -> str:
        return "".join(self.cells)

    @property
    def is_complete(self) -> bool:
        return all(self.cells)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.length:
            raise IndexError(f"OTP cell index out of range: {index}")

    def type_digit(self, index: int, value: str) -> bool:
        """Apply typed input to one cell.

        An empty value clears the cell. Non-digit input is ignored. When
        several digits arrive at once only the last one is kept.

        Returns:
            True when this entry filled the last cell and the buffer is
            complete, which is the signal to auto-verify.
        """
        self._check_index(index)
        if value and not is_digits(value):
            return False

        digit = value[-1:]
        self.cells[index] = digit
        if digit and index < self.length - 1:
            self.focus = index + 1
        else:
            self.focus = index

        return bool(digit) and index == self.length - 1 and self.is_complete

    def backspace(self, index: int) -> None:
        """Backspace on an empty cell moves focus back; cells are not touched."""
        self._check_index(index)
        if not self.cells[index] and index > 0:
            self.focus = index - 1

    def paste(self, text: str) -> bool:
        """Fill cells from the start with pasted digits.

        Only the first six characters are used. If any of them is not a digit
        nothing changes.
        """
        chars = text[: self.length]
        if chars and not is_digits(chars):
            return False
        for index, char in enumerate(chars):
            self.cells[index] = char
        self.focus = min(len(chars), self.length - 1)
        return True

    def clear(self) -> None:
        self.cells = [""] * self.length
        self.focus = 0


class OtpWorkflow(BaseWorkflow):
    """View that collects a one-time code and can resend it."""

    # Verify as soon as the last cell is typed
    auto_verify = False

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.otp = OtpBuffer()
        self.cooldown = self.scope.countdown(self.settings.countdown_interval_seconds)
        self.email = ""
        self.sending = False
        self.verifying = False

    @property
    def can_resend(self) -> bool:
        return self.cooldown.remaining == 0 and not self.sending

    async def enter_digit(self, index: int, value: str) -> None:
        """Typed input into cell ``index``; may trigger verification."""
        completed = self.otp.type_digit(index, value)
        if completed and self.auto_verify:
            await self.verify()

    def backspace(self, index: int) -> None:
        self.otp.backspace(index)

    def paste(self, text: str) -> bool:
        """Paste a code. Never triggers verification."""
        return self.otp.paste(text)

    @abstractmethod
    async def verify(self) -> bool:
        """Verify the entered code."""
        pass

    async def _send_code(self, email: str, sent_message: str, failure_message: str) -> bool:
        """Request a code for ``email`` and arm the resend cooldown on success.

        Raises:
            ViewClosedError: The view was torn down mid-request.
        """
        self.sending = True
        try:
            result = await self._call(self.client.send_otp(email))
        except ServerError as e:
            self.logger.warning("otp.send.rejected", status_code=e.status_code)
            self.messages.show_error(e.server_message or failure_message)
            return False
        except TransportError as e:
            self.logger.warning("otp.send.failed", error=e.message)
            self.messages.show_error(failure_message)
            return False
        finally:
            self.sending = False

        if not result.success:
            self.messages.show_error(result.message or failure_message)
            return False

        self.cooldown.start(self.settings.otp_resend_cooldown_seconds)
        self.messages.show_success(sent_message)
        self.logger.info("otp.sent")
        return True
