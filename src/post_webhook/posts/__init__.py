"""Post storage and lifecycle."""

from .service import PostNotFoundError, PostService, TransitionListener

__all__ = ["PostNotFoundError", "PostService", "TransitionListener"]
