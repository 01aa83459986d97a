"""Public URLs and display settings for the site."""

from dataclasses import dataclass

from ..config import Config

PERMALINK_PLAIN = "plain"
PERMALINK_PRETTY = "pretty"


@dataclass(frozen=True)
class Site:
    """Site-wide settings needed to describe a post to the outside world."""

    url: str = "http://localhost:8000"
    permalink_structure: str = PERMALINK_PLAIN
    date_format: str = "F j, Y"

    @classmethod
    def from_config(cls, config: Config) -> "Site":
        return cls(
            url=config.site_url.rstrip("/"),
            permalink_structure=config.permalink_structure,
            date_format=config.date_format,
        )

    @property
    def pretty(self) -> bool:
        return self.permalink_structure == PERMALINK_PRETTY

    def permalink(self, post_id: int, slug: str = "") -> str:
        """
        Canonical URL of a post.

        Pretty permalinks need a slug; without one the plain form is used.
        """
        if self.pretty and slug:
            return f"{self.url}/{slug}/"
        return f"{self.url}/?p={post_id}"

    def author_posts_url(self, author_id: int, nicename: str = "") -> str:
        """URL of an author's post archive."""
        if self.pretty and nicename:
            return f"{self.url}/author/{nicename}/"
        return f"{self.url}/?author={author_id}"
