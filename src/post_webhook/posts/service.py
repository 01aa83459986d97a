"""Post persistence and status-transition notification."""

import logging
from datetime import datetime
from typing import Awaitable, Callable, Iterable, List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from ..constants import (
    POST_TYPE_POST,
    STATUS_DRAFT,
    STATUS_NEW,
    STATUS_PUBLISH,
    TAXONOMY_CATEGORY,
    TAXONOMY_TAG,
)
from ..database.engine import session_scope
from ..database.models import Post, Term
from ..metrics import get_metrics
from ..utils.text import sanitize_title

logger = logging.getLogger(__name__)

# Called as listener(new_status, old_status, post) after every save
TransitionListener = Callable[[str, str, Post], Awaitable[None]]

_UNSET = object()


class PostNotFoundError(LookupError):
    """Raised when a post id does not exist."""


class PostService:
    """Creates and updates posts, then notifies transition listeners."""

    def __init__(self, record_metrics: bool = True):
        self.listeners: List[TransitionListener] = []
        self.record_metrics = record_metrics

    def add_transition_listener(self, listener: TransitionListener) -> None:
        """Register a coroutine called after each post save."""
        self.listeners.append(listener)

    async def create_post(
        self,
        author_id: int,
        title: str = "",
        content: str = "",
        excerpt: str = "",
        status: str = STATUS_DRAFT,
        post_type: str = POST_TYPE_POST,
        slug: Optional[str] = None,
        post_date: Optional[datetime] = None,
        tags: Iterable[str] = (),
        categories: Iterable[str] = (),
    ) -> Post:
        """
        Insert a post and fire its first transition (old status ``new``).

        Returns:
            The stored post with author and terms loaded
        """
        with session_scope() as session:
            post = Post(
                author_id=author_id,
                post_type=post_type,
                status=status,
                title=title,
                content=content,
                excerpt=excerpt,
                post_date=post_date or datetime.now(),
                date_floating=post_date is None,
            )
            if status == STATUS_PUBLISH:
                post.date_floating = False
            session.add(post)
            post.slug = self._unique_slug(session, post, slug or sanitize_title(title))
            post.terms = self._resolve_terms(session, TAXONOMY_TAG, tags) + self._resolve_terms(
                session, TAXONOMY_CATEGORY, categories
            )
            session.flush()
            post_id = post.id

        logger.info(f"Created {post_type} {post_id} ({status})", extra={"post_id": post_id})
        return await self._after_save(post_id, STATUS_NEW)

    async def update_post(
        self,
        post_id: int,
        title=_UNSET,
        content=_UNSET,
        excerpt=_UNSET,
        status=_UNSET,
        slug=_UNSET,
        post_date=_UNSET,
        tags=_UNSET,
        categories=_UNSET,
    ) -> Post:
        """
        Update a post and fire a transition from its previous status.

        Only arguments that are passed are changed. The transition fires on
        every save, including when the status is unchanged.

        Raises:
            PostNotFoundError: If the post does not exist
        """
        with session_scope() as session:
            post = session.get(Post, post_id)
            if post is None:
                raise PostNotFoundError(post_id)

            old_status = post.status

            if title is not _UNSET:
                post.title = title
            if content is not _UNSET:
                post.content = content
            if excerpt is not _UNSET:
                post.excerpt = excerpt
            if slug is not _UNSET:
                post.slug = self._unique_slug(session, post, slug or sanitize_title(post.title))
            elif not post.slug and post.title:
                post.slug = self._unique_slug(session, post, sanitize_title(post.title))
            if post_date is not _UNSET and post_date is not None:
                post.post_date = post_date
                post.date_floating = False
            if status is not _UNSET:
                post.status = status
                if status == STATUS_PUBLISH and post.date_floating:
                    post.post_date = datetime.now()
                    post.date_floating = False
            if tags is not _UNSET:
                self._replace_terms(session, post, TAXONOMY_TAG, tags)
            if categories is not _UNSET:
                self._replace_terms(session, post, TAXONOMY_CATEGORY, categories)

        logger.info(
            f"Updated post {post_id} ({old_status} -> {post.status})", extra={"post_id": post_id}
        )
        return await self._after_save(post_id, old_status)

    def load(self, post_id: int) -> Post:
        """
        Load a post with author and terms, detached from its session.

        Raises:
            PostNotFoundError: If the post does not exist
        """
        with session_scope() as session:
            post = session.get(
                Post,
                post_id,
                options=[joinedload(Post.author), selectinload(Post.terms)],
            )
            if post is None:
                raise PostNotFoundError(post_id)
            return post

    async def _after_save(self, post_id: int, old_status: str) -> Post:
        post = self.load(post_id)

        if self.record_metrics:
            get_metrics().record_transition(post.post_type, old_status, post.status)

        for listener in self.listeners:
            try:
                await listener(post.status, old_status, post)
            except Exception as e:
                # The save is already committed; a failing listener must not undo it
                logger.error(
                    f"Transition listener failed for post {post_id}: {e}",
                    exc_info=True,
                    extra={"post_id": post_id},
                )
                if self.record_metrics:
                    get_metrics().record_error("transition_listener", type(e).__name__)

        return post

    def _unique_slug(self, session: Session, post: Post, slug: str) -> str:
        """Suffix the slug with -2, -3, ... until no other post of the type uses it."""
        base = slug or (str(post.id) if post.id else "")
        if not base:
            return ""

        candidate = base
        suffix = 2
        while True:
            query = session.query(Post.id).filter(
                Post.post_type == post.post_type, Post.slug == candidate
            )
            if post.id is not None:
                query = query.filter(Post.id != post.id)
            if query.first() is None:
                return candidate
            candidate = f"{base}-{suffix}"
            suffix += 1

    def _resolve_terms(self, session: Session, taxonomy: str, names: Iterable[str]) -> List[Term]:
        """Find or create terms by name, keeping the given order and dropping duplicates."""
        terms: List[Term] = []
        seen = set()
        for name in names:
            name = name.strip()
            slug = sanitize_title(name, fallback=name.lower())
            if not name or slug in seen:
                continue
            seen.add(slug)
            term = session.query(Term).filter_by(taxonomy=taxonomy, slug=slug).first()
            if term is None:
                term = Term(taxonomy=taxonomy, name=name, slug=slug)
                session.add(term)
                session.flush()
            terms.append(term)
        return terms

    def _replace_terms(self, session: Session, post: Post, taxonomy: str, names: Iterable[str]) -> None:
        kept = [term for term in post.terms if term.taxonomy != taxonomy]
        post.terms = kept + self._resolve_terms(session, taxonomy, names)
