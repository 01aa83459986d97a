"""Shared pytest fixtures for New Post Webhook tests."""

import os
import tempfile
from datetime import datetime
from typing import AsyncGenerator, Callable, Dict, Generator, Tuple
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from post_webhook.api import dependencies
from post_webhook.api.app import create_app
from post_webhook.config import Config
from post_webhook.constants import ROLES
from post_webhook.content.links import Site
from post_webhook.database import engine
from post_webhook.database.engine import DatabaseEngine, init_database, session_scope
from post_webhook.database.models import User
from post_webhook.database.options import set_webhook_url
from post_webhook.posts.service import PostService
from post_webhook.users import create_user
from post_webhook.webhook.dispatcher import WebhookDispatcher
from post_webhook.webhook.handler import WebhookHandler
from post_webhook.webhook.hooks import make_publish_listener

WEBHOOK_URL = "https://hooks.example.com/new-post"


@pytest.fixture(scope="function")
def temp_db_path() -> Generator[str, None, None]:
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield os.path.join(tmpdir, "test.db")


@pytest.fixture(scope="function")
def test_config(temp_db_path: str) -> Config:
    """Create a test configuration."""
    return Config(
        db_path=temp_db_path,
        api_host="127.0.0.1",
        api_port=8000,
        metrics_enabled=False,
        log_level="WARNING",  # Quiet logs in tests
        log_format="text",
        site_url="https://blog.example.com",
        permalink_structure="plain",
        date_format="F j, Y",
        webhook_timeout=30,
    )


@pytest.fixture(scope="function")
def site(test_config: Config) -> Site:
    """Site settings matching the test configuration."""
    return Site.from_config(test_config)


@pytest.fixture(scope="function")
def database(test_config: Config) -> Generator[DatabaseEngine, None, None]:
    """Initialize the global database engine on a temporary file."""
    db = init_database(test_config.db_path)
    yield db
    db.close()
    engine._db_engine = None


@pytest.fixture(scope="function")
def users(database: DatabaseEngine) -> Dict[str, User]:
    """One user per role, keyed by role name."""
    created = {}
    with session_scope() as session:
        for role in ROLES:
            created[role] = create_user(
                session,
                login=role,
                role=role,
                display_name=role.capitalize(),
            )
    return created


@pytest.fixture(scope="session")
def auth_headers() -> Callable[[User], Dict[str, str]]:
    """Build the Authorization header for a user."""

    def build(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {user.api_token}"}

    return build


@pytest.fixture(scope="function")
def configured_webhook(database: DatabaseEngine) -> str:
    """Store the test webhook URL in the settings store."""
    with session_scope() as session:
        return set_webhook_url(session, WEBHOOK_URL)


@pytest.fixture(scope="function")
def post_date() -> datetime:
    """A fixed publish date."""
    return datetime(2026, 10, 5, 14, 3, 0)


@pytest.fixture(scope="session")
def webhook_response() -> Callable[..., httpx.Response]:
    """Build a real httpx response for a mocked POST."""

    def build(status_code: int = 200, url: str = WEBHOOK_URL) -> httpx.Response:
        return httpx.Response(status_code, request=httpx.Request("POST", url))

    return build


@pytest_asyncio.fixture
async def webhook_handler() -> AsyncGenerator[WebhookHandler, None]:
    """Create a WebhookHandler that does not touch global metrics."""
    handler = WebhookHandler(timeout=30, record_metrics=False)
    yield handler
    await handler.close()


@pytest.fixture(scope="function")
def wired_services(
    database: DatabaseEngine, test_config: Config
) -> Generator[Tuple[WebhookHandler, WebhookDispatcher, PostService], None, None]:
    """
    Wire handler, dispatcher and post service the way the application does.

    The instances are also registered for API dependency injection.
    """
    handler = WebhookHandler(timeout=test_config.webhook_timeout, record_metrics=False)
    dispatcher = WebhookDispatcher(handler)
    service = PostService(record_metrics=False)
    service.add_transition_listener(
        make_publish_listener(dispatcher, Site.from_config(test_config))
    )

    dependencies.set_config_instance(test_config)
    dependencies.set_post_service_instance(service)
    dependencies.set_dispatcher_instance(dispatcher)

    yield handler, dispatcher, service

    dependencies.set_config_instance(None)
    dependencies.set_post_service_instance(None)
    dependencies.set_dispatcher_instance(None)


@pytest.fixture(scope="function")
def mock_webhook_post(wired_services, webhook_response) -> Generator[AsyncMock, None, None]:
    """Replace the wired handler's HTTP POST with a mock answering 200."""
    handler, _, _ = wired_services
    with patch.object(handler.client, "post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = webhook_response()
        yield mock_post


@pytest.fixture(scope="function")
def post_service(wired_services) -> PostService:
    """The wired post service."""
    return wired_services[2]


@pytest.fixture(scope="function")
def api_client(wired_services, mock_webhook_post) -> Generator[TestClient, None, None]:
    """FastAPI test client backed by the temporary database."""
    app = create_app(enable_metrics=False)
    with TestClient(app) as client:
        yield client
