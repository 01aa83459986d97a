"""Unit tests for post persistence and transition listeners."""

from datetime import datetime
from unittest.mock import ANY, AsyncMock

import pytest

from post_webhook.database.engine import session_scope
from post_webhook.database.models import Post, Term
from post_webhook.posts.service import PostNotFoundError, PostService
from post_webhook.users import create_user


@pytest.fixture
def author(database):
    with session_scope() as session:
        return create_user(session, "jane", role="author", display_name="Jane")


@pytest.fixture
def service(database):
    return PostService(record_metrics=False)


@pytest.fixture
def listener(service):
    mock = AsyncMock()
    service.add_transition_listener(mock)
    return mock


@pytest.mark.asyncio
class TestTransitions:
    """Test listener notification on save."""

    async def test_insert_reports_new_as_old_status(self, service, listener, author):
        post = await service.create_post(author_id=author.id, title="Hi", status="publish")
        listener.assert_awaited_once_with("publish", "new", ANY)
        assert listener.call_args.args[2].id == post.id

    async def test_update_reports_previous_status(self, service, listener, author):
        post = await service.create_post(author_id=author.id, title="Hi")
        listener.reset_mock()

        await service.update_post(post.id, status="publish")

        listener.assert_awaited_once_with("publish", "draft", ANY)

    async def test_resave_fires_with_same_status(self, service, listener, author):
        """Test an update that keeps the status still notifies."""
        post = await service.create_post(author_id=author.id, title="Hi", status="publish")
        listener.reset_mock()

        await service.update_post(post.id, title="Edited")

        listener.assert_awaited_once_with("publish", "publish", ANY)

    async def test_listener_sees_committed_post(self, service, author):
        """Test listeners get the saved post with author and terms loaded."""
        seen = {}

        async def capture(new_status, old_status, post):
            seen["title"] = post.title
            seen["author"] = post.author.display_name
            seen["tags"] = post.tag_names
            with session_scope() as session:
                seen["stored_status"] = session.get(Post, post.id).status

        service.add_transition_listener(capture)
        await service.create_post(author_id=author.id, title="Hi", status="publish", tags=["t"])

        assert seen == {"title": "Hi", "author": "Jane", "tags": ["t"], "stored_status": "publish"}

    async def test_failing_listener_does_not_undo_save(self, service, author):
        """Test listener errors are logged and later listeners still run."""
        failing = AsyncMock(side_effect=RuntimeError("boom"))
        after = AsyncMock()
        service.add_transition_listener(failing)
        service.add_transition_listener(after)

        post = await service.create_post(author_id=author.id, title="Hi", status="publish")

        after.assert_awaited_once()
        assert service.load(post.id).status == "publish"

    async def test_listeners_run_in_registration_order(self, service, author):
        order = []

        async def first(*args):
            order.append("first")

        async def second(*args):
            order.append("second")

        service.add_transition_listener(first)
        service.add_transition_listener(second)
        await service.create_post(author_id=author.id)

        assert order == ["first", "second"]


@pytest.mark.asyncio
class TestCreatePost:
    """Test PostService.create_post."""

    async def test_defaults(self, service, author):
        post = await service.create_post(author_id=author.id, title="Hello World")
        assert post.status == "draft"
        assert post.post_type == "post"
        assert post.slug == "hello-world"
        assert post.date_floating is True
        assert post.author.login == "jane"

    async def test_unique_slugs(self, service, author):
        first = await service.create_post(author_id=author.id, title="Hello World")
        second = await service.create_post(author_id=author.id, title="Hello World")
        third = await service.create_post(author_id=author.id, title="Hello World")
        assert [first.slug, second.slug, third.slug] == ["hello-world", "hello-world-2", "hello-world-3"]

    async def test_same_slug_allowed_across_types(self, service, author):
        post = await service.create_post(author_id=author.id, title="About")
        page = await service.create_post(author_id=author.id, title="About", post_type="page")
        assert post.slug == page.slug == "about"

    async def test_explicit_slug(self, service, author):
        post = await service.create_post(author_id=author.id, title="Hello", slug="custom")
        assert post.slug == "custom"

    async def test_terms_created_and_reused(self, service, author):
        await service.create_post(author_id=author.id, tags=["Python", "Web"], categories=["News"])
        post = await service.create_post(author_id=author.id, tags=["python", "Python "])

        assert post.tag_names == ["Python"]
        with session_scope() as session:
            assert session.query(Term).filter_by(taxonomy="post_tag").count() == 2
            assert session.query(Term).filter_by(taxonomy="category").count() == 1

    async def test_explicit_date_not_floating(self, service, author):
        date = datetime(2026, 10, 5, 14, 3)
        post = await service.create_post(author_id=author.id, post_date=date)
        assert post.post_date == date
        assert post.date_floating is False

    async def test_published_without_date_gets_now(self, service, author):
        before = datetime.now()
        post = await service.create_post(author_id=author.id, status="publish")
        assert post.date_floating is False
        assert post.post_date >= before.replace(microsecond=0)


@pytest.mark.asyncio
class TestUpdatePost:
    """Test PostService.update_post."""

    async def test_only_given_fields_change(self, service, author):
        post = await service.create_post(author_id=author.id, title="T", content="C", excerpt="E")
        post = await service.update_post(post.id, content="New")
        assert (post.title, post.content, post.excerpt) == ("T", "New", "E")

    async def test_publish_fixes_floating_date(self, service, author):
        post = await service.create_post(author_id=author.id, title="Draft")
        before = datetime.now()

        post = await service.update_post(post.id, status="publish")

        assert post.date_floating is False
        assert post.post_date >= before.replace(microsecond=0)

    async def test_publish_keeps_explicit_date(self, service, author):
        date = datetime(2020, 1, 1, 9, 0)
        post = await service.create_post(author_id=author.id, post_date=date)
        post = await service.update_post(post.id, status="publish")
        assert post.post_date == date

    async def test_replace_tags_keeps_categories(self, service, author):
        post = await service.create_post(author_id=author.id, tags=["a"], categories=["News"])
        post = await service.update_post(post.id, tags=["b"])
        assert post.tag_names == ["b"]
        assert post.category_names == ["News"]

    async def test_clear_tags(self, service, author):
        post = await service.create_post(author_id=author.id, tags=["a"])
        post = await service.update_post(post.id, tags=[])
        assert post.tag_names == []

    async def test_missing_post(self, service):
        with pytest.raises(PostNotFoundError):
            await service.update_post(999, title="x")

    async def test_load_missing_post(self, service):
        with pytest.raises(PostNotFoundError):
            service.load(999)


class TestLatestPublished:
    """Test Post.latest_published."""

    @pytest.mark.asyncio
    async def test_newest_published_post(self, service, author):
        await service.create_post(author_id=author.id, title="Old", status="publish", post_date=datetime(2026, 1, 1))
        newest = await service.create_post(
            author_id=author.id, title="New", status="publish", post_date=datetime(2026, 6, 1)
        )
        await service.create_post(author_id=author.id, title="Draft", post_date=datetime(2026, 12, 1))
        await service.create_post(
            author_id=author.id, title="Page", status="publish", post_type="page", post_date=datetime(2026, 12, 1)
        )

        with session_scope() as session:
            assert Post.latest_published(session).id == newest.id

    def test_none_when_empty(self, database):
        with session_scope() as session:
            assert Post.latest_published(session) is None
