"""Account and session data models."""

from pydantic import BaseModel, Field


class SignupCredentials(BaseModel):
    """Credentials collected on the first signup step."""

    username: str
    email: str
    password: str
    confirm_password: str
    accept_terms: bool = False


class SignupDraft(BaseModel):
    """Credentials kept in durable storage until the code is verified."""

    username: str
    email: str
    password: str

    @classmethod
    def from_credentials(cls, credentials: SignupCredentials) -> "SignupDraft":
        return cls(
            username=credentials.username,
            email=credentials.email,
            password=credentials.password,
        )


class SendOtpRequest(BaseModel):
    """Body of POST /auth/send-otp."""

    email: str


class SendOtpResponse(BaseModel):
    success: bool = False
    message: str | None = None


class VerifyOtpRequest(BaseModel):
    """Body of POST /auth/verify-otp.

    ``username`` and ``password`` are only sent when the verification also
    creates the account.
    """

    email: str
    otp: str = Field(..., min_length=6, max_length=6, pattern=r"^\d{6}$")
    username: str | None = None
    password: str | None = None


class VerifyOtpResponse(BaseModel):
    success: bool = False
    token: str | None = None
    message: str | None = None


class CodeExchangeRequest(BaseModel):
    """Body of the OAuth code exchange endpoints."""

    code: str


class TokenExchangeResponse(BaseModel):
    """Response of POST /auth/github/exchange."""

    success: bool = False
    token: str | None = None
    message: str | None = None
