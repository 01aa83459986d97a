"""Build the webhook payload for a post."""

from ..content.links import Site
from ..content.rendering import get_excerpt, render_content
from ..database.models import Post
from ..utils.dates import format_mysql_datetime, format_php_date
from .models import AuthorData, DateData, WebhookPayload


def build_payload(post: Post, site: Site) -> WebhookPayload:
    """
    Describe a post for the webhook.

    Terms, author and date are read from the post as it is now, so the
    payload reflects the store at call time.

    Args:
        post: Post loaded from the content store (with author and terms)
        site: Site settings used for links and date display

    Returns:
        WebhookPayload ready to serialize
    """
    author = post.author

    return WebhookPayload(
        id=post.id,
        title=post.title,
        url=site.permalink(post.id, post.slug),
        content=render_content(post.content),
        excerpt=get_excerpt(post.content, post.excerpt),
        tags=post.tag_names,
        categories=post.category_names,
        author=AuthorData(
            name=author.display_name,
            url=site.author_posts_url(author.id, author.nicename),
        ),
        date=DateData(
            raw=format_mysql_datetime(post.post_date),
            formatted=format_php_date(post.post_date, site.date_format),
        ),
    )


def payload_to_json(payload: WebhookPayload) -> str:
    """Exact request body for a payload."""
    return payload.to_json()
