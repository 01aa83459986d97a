"""Unit tests for the webhook dispatcher."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

from post_webhook.constants import role_has_cap
from post_webhook.webhook.dispatcher import (
    MSG_NO_PERMISSION,
    MSG_NO_POSTS,
    MSG_TEST_SENT,
    WebhookDispatcher,
    should_dispatch,
)

URL = "https://hooks.example.com/new-post"


def make_user(role):
    return SimpleNamespace(login=role, can=lambda cap: role_has_cap(role, cap))


@pytest.fixture
def handler():
    mock = Mock()
    mock.send = AsyncMock()
    return mock


@pytest.fixture
def dispatcher(handler):
    return WebhookDispatcher(handler)


class TestShouldDispatch:
    """Test the dispatch rule."""

    @pytest.mark.parametrize("new_status", ["publish", "draft", "pending"])
    @pytest.mark.parametrize("old_status", ["new", "draft", "publish"])
    @pytest.mark.parametrize("post_type", ["post", "page"])
    def test_grid(self, new_status, old_status, post_type):
        """Test only post publishes from a non-published status dispatch."""
        expected = new_status == "publish" and old_status != "publish" and post_type == "post"
        assert should_dispatch(new_status, old_status, post_type, URL) is expected

    @pytest.mark.parametrize("old_status", ["new", "draft", "pending", "private", "future", "trash"])
    def test_every_other_status_into_publish(self, old_status):
        assert should_dispatch("publish", old_status, "post", URL) is True

    @pytest.mark.parametrize("url", ["", None])
    def test_no_url_never_dispatches(self, url):
        assert should_dispatch("publish", "draft", "post", url) is False

    def test_custom_post_type_ignored(self):
        assert should_dispatch("publish", "draft", "product", URL) is False


@pytest.mark.asyncio
class TestMaybeDispatch:
    """Test WebhookDispatcher.maybe_dispatch."""

    async def test_sends_on_publish(self, dispatcher, handler):
        payload = SimpleNamespace(id=1)
        provider = Mock(return_value=payload)

        await dispatcher.maybe_dispatch("publish", "draft", "post", URL, provider)

        provider.assert_called_once_with()
        handler.send.assert_awaited_once_with(URL, payload, trigger="publish")

    async def test_republish_sends_nothing(self, dispatcher, handler):
        provider = Mock()
        await dispatcher.maybe_dispatch("publish", "publish", "post", URL, provider)
        handler.send.assert_not_called()
        provider.assert_not_called()

    async def test_no_url_does_not_build_payload(self, dispatcher, handler):
        provider = Mock()
        await dispatcher.maybe_dispatch("publish", "draft", "post", "", provider)
        provider.assert_not_called()
        handler.send.assert_not_called()

    async def test_page_sends_nothing(self, dispatcher, handler):
        provider = Mock()
        await dispatcher.maybe_dispatch("publish", "new", "page", URL, provider)
        handler.send.assert_not_called()

    @pytest.mark.parametrize("new_status", ["draft", "pending"])
    async def test_non_publish_sends_nothing(self, dispatcher, handler, new_status):
        provider = Mock()
        await dispatcher.maybe_dispatch(new_status, "new", "post", URL, provider)
        provider.assert_not_called()
        handler.send.assert_not_called()


@pytest.mark.asyncio
class TestSendTestEvent:
    """Test WebhookDispatcher.send_test_event."""

    async def test_anonymous_refused(self, dispatcher, handler):
        provider = Mock()
        result = await dispatcher.send_test_event(None, URL, provider)
        assert result.success is False
        assert result.data == MSG_NO_PERMISSION
        provider.assert_not_called()
        handler.send.assert_not_called()

    @pytest.mark.parametrize("role", ["editor", "author", "contributor", "subscriber"])
    async def test_non_admin_refused(self, dispatcher, handler, role):
        result = await dispatcher.send_test_event(make_user(role), URL, Mock())
        assert result.data == MSG_NO_PERMISSION
        handler.send.assert_not_called()

    async def test_permission_checked_before_posts(self, dispatcher):
        """Test a refused caller never learns whether posts exist."""
        result = await dispatcher.send_test_event(make_user("author"), URL, Mock(return_value=None))
        assert result.data == MSG_NO_PERMISSION

    async def test_no_posts(self, dispatcher, handler):
        result = await dispatcher.send_test_event(make_user("administrator"), URL, Mock(return_value=None))
        assert result.success is False
        assert result.data == MSG_NO_POSTS
        handler.send.assert_not_called()

    async def test_sends_latest_post(self, dispatcher, handler):
        payload = SimpleNamespace(id=9)
        result = await dispatcher.send_test_event(
            make_user("administrator"), URL, Mock(return_value=payload)
        )
        assert result.success is True
        assert result.data == MSG_TEST_SENT
        handler.send.assert_awaited_once_with(URL, payload, trigger="test")

    async def test_success_even_without_url(self, dispatcher, handler):
        """Test an empty URL is passed through and still reported as sent."""
        payload = SimpleNamespace(id=9)
        result = await dispatcher.send_test_event(make_user("administrator"), "", Mock(return_value=payload))
        assert result.success is True
        handler.send.assert_awaited_once_with("", payload, trigger="test")
