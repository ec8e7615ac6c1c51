"""Shared fixtures: an isolated SQLite database, activity log file and webhook spy."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

TEST_ROOT = Path(tempfile.mkdtemp(prefix="mangashelf-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_ROOT / 'test.db'}"
os.environ["ACTIVITY_LOG_PATH"] = str(TEST_ROOT / "activity_log.json")
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["ACTIVITY_WEBHOOK_DEFAULT"] = "https://hooks.example.test/default"

from mangashelf.config import get_settings  # noqa: E402

get_settings.cache_clear()

from main import create_app  # noqa: E402
from mangashelf.application.use_cases.activity import (  # noqa: E402
    ActivityLog,
    ActivityRecorder,
)
from mangashelf.application.use_cases.auth import create_user  # noqa: E402
from mangashelf.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from mangashelf.infrastructure.local_storage import InMemoryKeyValueStore  # noqa: E402
from mangashelf.infrastructure.notifications import (  # noqa: E402
    ActivityNotifier,
    WebhookTargetResolver,
)
from mangashelf.infrastructure.repositories import (  # noqa: E402
    DocumentRepository,
    RoleRepository,
)
from mangashelf.interfaces.api.dependencies import get_activity_recorder  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure every test starts from empty tables."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def documents() -> DocumentRepository:
    return DocumentRepository()


class CountingStore(InMemoryKeyValueStore):
    """In-memory key-value store that counts writes."""

    def __init__(self) -> None:
        super().__init__()
        self.writes = 0

    def set_item(self, key: str, value: str) -> None:
        self.writes += 1
        super().set_item(key, value)


class WebhookSpy:
    """Mock transport handler recording every webhook request."""

    def __init__(self, status_code: int = 204, error: Exception | None = None) -> None:
        self.status_code = status_code
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def webhook() -> WebhookSpy:
    return WebhookSpy()


@pytest.fixture
def make_webhook():
    return WebhookSpy


@pytest.fixture
def store() -> CountingStore:
    return CountingStore()


@pytest.fixture
def recorder(documents: DocumentRepository, store: CountingStore, webhook: WebhookSpy):
    resolver = WebhookTargetResolver(documents, get_settings().activity_webhook_default)
    notifier = ActivityNotifier(resolver, client=webhook.client())
    return ActivityRecorder(ActivityLog(store), notifier)


@pytest.fixture
def client(recorder):
    app = create_app()
    app.dependency_overrides[get_activity_recorder] = lambda: recorder
    with TestClient(app) as test_client:
        yield test_client
    engine.dispose()


@pytest.fixture
def sign_in(client, documents):
    """Return a factory creating an account and its bearer headers."""

    def _sign_in(email: str, *, admin: bool = False, password: str = "s3cret") -> dict:
        with SessionLocal() as session:
            user = create_user(
                session, email=email, password=password, display_name=email.split("@")[0]
            )
        if admin:
            RoleRepository(documents).grant_admin(user.uid)
        response = client.post("/auth/token", data={"username": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _sign_in
