"""HTTP API for posts, webhook settings and test sends."""
