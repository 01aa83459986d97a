"""New Post Webhook - notify an external URL when blog posts are published."""

__version__ = "1.0.0"
