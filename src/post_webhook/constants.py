"""Shared constants for post statuses, taxonomies, roles and capabilities."""

# Post statuses
STATUS_PUBLISH = "publish"
STATUS_DRAFT = "draft"
STATUS_PENDING = "pending"
STATUS_PRIVATE = "private"
STATUS_FUTURE = "future"
STATUS_TRASH = "trash"

# Pseudo-status reported as the old status when a post is first inserted
STATUS_NEW = "new"

POST_TYPE_POST = "post"

TAXONOMY_TAG = "post_tag"
TAXONOMY_CATEGORY = "category"

# Settings store key holding the webhook URL
WEBHOOK_OPTION = "new_post_webhook"

# Capabilities
CAP_MANAGE_OPTIONS = "manage_options"
CAP_PUBLISH_POSTS = "publish_posts"
CAP_EDIT_POSTS = "edit_posts"
CAP_READ = "read"

ROLE_CAPABILITIES = {
    "administrator": {CAP_MANAGE_OPTIONS, CAP_PUBLISH_POSTS, CAP_EDIT_POSTS, CAP_READ},
    "editor": {CAP_PUBLISH_POSTS, CAP_EDIT_POSTS, CAP_READ},
    "author": {CAP_PUBLISH_POSTS, CAP_EDIT_POSTS, CAP_READ},
    "contributor": {CAP_EDIT_POSTS, CAP_READ},
    "subscriber": {CAP_READ},
}

ROLES = tuple(ROLE_CAPABILITIES)


def role_has_cap(role: str, capability: str) -> bool:
    """
    Check whether a role grants a capability.

    Args:
        role: Role name (unknown roles grant nothing)
        capability: Capability name

    Returns:
        True if the role includes the capability
    """
    return capability in ROLE_CAPABILITIES.get(role, set())
