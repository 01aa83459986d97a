"""SQLAlchemy database models for users, posts, terms and site options."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from ..constants import (
    POST_TYPE_POST,
    STATUS_DRAFT,
    STATUS_PUBLISH,
    TAXONOMY_CATEGORY,
    TAXONOMY_TAG,
    role_has_cap,
)


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


post_terms = Table(
    "post_terms",
    Base.metadata,
    Column("post_id", Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("term_id", Integer, ForeignKey("terms.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """A site user; authors posts and authenticates API calls by token."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    login: Mapped[str] = mapped_column(String(60), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(250), nullable=False)
    nicename: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(100))
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="subscriber")
    api_token: Mapped[Optional[str]] = mapped_column(String(64), unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    posts: Mapped[List["Post"]] = relationship(back_populates="author")

    def can(self, capability: str) -> bool:
        """Check whether the user's role grants a capability."""
        return role_has_cap(self.role, capability)


class Term(Base):
    """A tag or category."""

    __tablename__ = "terms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    taxonomy: Mapped[str] = mapped_column(String(32), nullable=False)  # post_tag/category
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False)

    __table_args__ = (
        Index("idx_terms_taxonomy_slug", "taxonomy", "slug", unique=True),
    )


class Post(Base):
    """A post or page in the content store."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    post_type: Mapped[str] = mapped_column(String(20), nullable=False, default=POST_TYPE_POST)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=STATUS_DRAFT)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    slug: Mapped[str] = mapped_column(String(200), nullable=False, default="", index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    excerpt: Mapped[str] = mapped_column(Text, nullable=False, default="")
    post_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)
    # True until a date is set explicitly or the post is first published
    date_floating: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    modified_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now)

    author: Mapped[User] = relationship(back_populates="posts")
    terms: Mapped[List[Term]] = relationship(secondary=post_terms, order_by=Term.name)

    __table_args__ = (
        Index("idx_posts_type_status_date", "post_type", "status", "post_date"),
    )

    def term_names(self, taxonomy: str) -> List[str]:
        """Names of the post's terms in one taxonomy, in store order."""
        return [term.name for term in self.terms if term.taxonomy == taxonomy]

    @property
    def tag_names(self) -> List[str]:
        return self.term_names(TAXONOMY_TAG)

    @property
    def category_names(self) -> List[str]:
        return self.term_names(TAXONOMY_CATEGORY)

    @classmethod
    def latest_published(cls, session, post_type: str = POST_TYPE_POST) -> Optional["Post"]:
        """Most recent published post of a type, newest post date first."""
        return (
            session.query(cls)
            .filter(cls.post_type == post_type, cls.status == STATUS_PUBLISH)
            .order_by(cls.post_date.desc(), cls.id.desc())
            .first()
        )


class Option(Base):
    """A named site setting; last value written wins."""

    __tablename__ = "options"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(191), unique=True, nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now)
