"""Unit tests for session state, durable storage and navigation."""

import json
from pathlib import Path

import pytest

from deploy_console.core.events import EventBus
from deploy_console.core.navigation import Location, Navigator, Route
from deploy_console.core.session import AuthContext, SignupDraftStore
from deploy_console.core.storage import JsonFileStore, MemoryStore
from deploy_console.models.auth import SignupDraft


class TestAuthContext:
    """Tests for AuthContext."""

    def test_unauthenticated_by_default(self, auth: AuthContext):
        assert auth.token is None
        assert auth.is_authenticated is False
        assert auth.headers() == {}

    def test_stores_token(self, auth: AuthContext, store: MemoryStore):
        auth.set_token("tok-123")

        assert auth.is_authenticated is True
        assert auth.headers() == {"Authorization": "Bearer tok-123"}
        assert store.get("token") == "tok-123"

    def test_rejects_empty_token(self, auth: AuthContext):
        with pytest.raises(ValueError):
            auth.set_token("")

    def test_shares_store_with_new_context(self, store: MemoryStore):
        AuthContext(store).set_token("tok-123")
        assert AuthContext(store).token == "tok-123"


class TestSignupDraftStore:
    """Tests for SignupDraftStore."""

    @pytest.fixture
    def draft(self) -> SignupDraft:
        return SignupDraft(username="ann", email="a@x.com", password="12345678")

    def test_round_trip(self, drafts: SignupDraftStore, draft: SignupDraft):
        drafts.save(draft)
        assert drafts.exists() is True
        assert drafts.load() == draft

    def test_stored_as_json(self, drafts: SignupDraftStore, store: MemoryStore, draft: SignupDraft):
        drafts.save(draft)
        assert json.loads(store.get("signupData")) == draft.model_dump()

    def test_missing_draft(self, drafts: SignupDraftStore):
        assert drafts.load() is None

    def test_corrupt_draft_reads_as_missing(self, drafts: SignupDraftStore, store: MemoryStore):
        store.set("signupData", "{not json")
        assert drafts.load() is None

    def test_delete(self, drafts: SignupDraftStore, draft: SignupDraft):
        drafts.save(draft)
        drafts.delete()
        assert drafts.exists() is False


class TestJsonFileStore:
    """Tests for JsonFileStore."""

    def test_survives_reload(self, tmp_path: Path):
        path = tmp_path / "state" / "client.json"
        JsonFileStore(path).set("token", "tok-123")

        assert JsonFileStore(path).get("token") == "tok-123"
        assert path.stat().st_mode & 0o777 == 0o600

    def test_delete_persists(self, tmp_path: Path):
        path = tmp_path / "client.json"
        store = JsonFileStore(path)
        store.set("token", "tok-123")
        store.delete("token")

        assert JsonFileStore(path).get("token") is None

    def test_unreadable_file_starts_empty(self, tmp_path: Path):
        path = tmp_path / "client.json"
        path.write_text("not json")

        assert JsonFileStore(path).get("token") is None


class TestNavigation:
    """Tests for Location and Navigator."""

    def test_location_from_url(self):
        location = Location.from_url("/deploy?code=abc&setup_action=install")

        assert location.path == "/deploy"
        assert location.query == {"code": "abc", "setup_action": "install"}
        assert location.state == {}

    def test_location_defaults_to_sign_up(self):
        assert Location.from_url("?code=abc").path == Route.SIGN_UP.value

    @pytest.mark.asyncio
    async def test_navigate_records_and_publishes(self):
        events = EventBus()
        queue = events.subscribe()
        navigator = Navigator(events)

        navigator.navigate(Route.VERIFY_OTP, state={"email": "a@x.com"})

        assert navigator.current.path == "/verify-otp"
        assert navigator.current.state == {"email": "a@x.com"}
        event = queue.get_nowait()
        assert event.event_type == "navigation"
        assert event.data["path"] == "/verify-otp"

    def test_redirect_is_external(self):
        navigator = Navigator()
        navigator.redirect("https://github.com/apps/deployer/installations/new")

        assert navigator.external_url.startswith("https://github.com/")
        assert navigator.history == []
