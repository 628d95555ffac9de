"""Session token and signup draft persistence."""

from pydantic import ValidationError as PydanticValidationError

from deploy_console.core.storage import KeyValueStore
from deploy_console.models.auth import SignupDraft
from deploy_console.utils.logging import get_logger

logger = get_logger(__name__)

TOKEN_KEY = "token"
SIGNUP_DRAFT_KEY = "signupData"


class AuthContext:
    """The session token, passed explicitly to everything that makes requests.

    The token is written once when a signup, verification or OAuth exchange
    succeeds and is never cleared automatically.
    """

    def __init__(self, store: KeyValueStore, key: str = TOKEN_KEY):
        self._store = store
        self._key = key

    @property
    def token(self) -> str | None:
        return self._store.get(self._key) or None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def set_token(self, token: str) -> None:
        """Persist a new session token."""
        if not token:
            raise ValueError("Session token must be non-empty")
        self._store.set(self._key, token)
        logger.info("session.token_stored")

    def headers(self) -> dict[str, str]:
        """Authorization header for the current session, if any."""
        token = self.token
        if token is None:
            return {}
        return {"Authorization": f"Bearer {token}"}


class SignupDraftStore:
    """Keeps signup credentials between the credentials and OTP steps."""

    def __init__(self, store: KeyValueStore, key: str = SIGNUP_DRAFT_KEY):
        self._store = store
        self._key = key

    def save(self, draft: SignupDraft) -> None:
        self._store.set(self._key, draft.model_dump_json())

    def load(self) -> SignupDraft | None:
        """Return the stored draft, or None when absent or unreadable."""
        raw = self._store.get(self._key)
        if raw is None:
            return None
        try:
            return SignupDraft.model_validate_json(raw)
        except PydanticValidationError:
            logger.warning("signup_draft.corrupt")
            return None

    def delete(self) -> None:
        self._store.delete(self._key)

    def exists(self) -> bool:
        return self._store.get(self._key) is not None
