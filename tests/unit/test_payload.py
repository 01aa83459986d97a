"""Unit tests for building the webhook payload."""

import json

import pytest

from post_webhook.content.links import Site
from post_webhook.database.engine import session_scope
from post_webhook.users import create_user
from post_webhook.webhook.payload import build_payload, payload_to_json

PAYLOAD_KEYS = ["id", "title", "url", "content", "excerpt", "tags", "categories", "author", "date"]


@pytest.fixture
def jane(database):
    with session_scope() as session:
        return create_user(session, "jane", role="author", display_name="Jane")


@pytest.mark.asyncio
class TestBuildPayload:
    """Test build_payload function."""

    async def test_full_payload(self, post_service, jane, site, post_date):
        """Test every field for a published post with terms."""
        post = await post_service.create_post(
            author_id=jane.id,
            title="Hello World",
            content="First paragraph.\n\nSecond paragraph.",
            status="publish",
            post_date=post_date,
            tags=["B", "A"],
            categories=["News"],
        )

        data = json.loads(payload_to_json(build_payload(post, site)))

        assert list(data) == PAYLOAD_KEYS
        assert data["id"] == post.id
        assert data["title"] == "Hello World"
        assert data["url"] == f"https://blog.example.com/?p={post.id}"
        assert data["content"] == "<p>First paragraph.</p>\n<p>Second paragraph.</p>\n"
        assert data["excerpt"] == "First paragraph. Second paragraph."
        assert data["tags"] == ["A", "B"]
        assert data["categories"] == ["News"]
        assert data["author"] == {
            "name": "Jane",
            "url": f"https://blog.example.com/?author={jane.id}",
        }
        assert data["date"] == {"raw": "2026-10-05 14:03:00", "formatted": "October 5, 2026"}

    async def test_no_terms_are_empty_lists(self, post_service, jane, site):
        post = await post_service.create_post(author_id=jane.id, title="Bare")
        payload = build_payload(post, site)
        assert payload.tags == []
        assert payload.categories == []

    async def test_manual_excerpt(self, post_service, jane, site):
        post = await post_service.create_post(
            author_id=jane.id, title="T", content="Body text", excerpt="Summary"
        )
        assert build_payload(post, site).excerpt == "Summary"

    async def test_pretty_links(self, post_service, jane, post_date):
        """Test pretty permalinks use the post and author slugs."""
        site = Site("https://blog.example.com", "pretty", "Y-m-d")
        post = await post_service.create_post(
            author_id=jane.id, title="Hello World", status="publish", post_date=post_date
        )
        payload = build_payload(post, site)
        assert payload.url == "https://blog.example.com/hello-world/"
        assert payload.author.url == "https://blog.example.com/author/jane/"
        assert payload.date.formatted == "2026-10-05"

    async def test_repeat_builds_are_byte_identical(self, post_service, jane, site, post_date):
        post = await post_service.create_post(
            author_id=jane.id, title="Same", status="publish", post_date=post_date, tags=["x"]
        )
        assert payload_to_json(build_payload(post, site)) == payload_to_json(build_payload(post, site))

    async def test_reflects_store_at_call_time(self, post_service, jane, site):
        """Test a payload built after an update carries the new values."""
        post = await post_service.create_post(author_id=jane.id, title="Old", tags=["a"])
        post = await post_service.update_post(post.id, title="New", tags=["b", "c"])
        payload = build_payload(post, site)
        assert payload.title == "New"
        assert payload.tags == ["b", "c"]
