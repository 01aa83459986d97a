"""Command-line interface for New Post Webhook."""

import asyncio
import logging
import signal
import sys

import click

from .config import Config
from .constants import ROLES
from .content.links import Site
from .database.engine import init_database, session_scope
from .database.models import User
from .database.options import get_webhook_url, set_webhook_url
from .users import create_user
from .utils.logging import setup_logging
from .utils.url import is_valid_webhook_url
from .webhook import WebhookDispatcher, WebhookHandler
from .webhook.hooks import latest_post_payload

logger = logging.getLogger(__name__)


def _load_config(**cli_args) -> Config:
    """Resolve configuration with the same priority as the server command."""
    return Config.from_args_and_env({k: v for k, v in cli_args.items() if v is not None})


@click.group()
def cli():
    """New Post Webhook - notify a URL when blog posts are published."""
    pass


@cli.command()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (default: ./data/post_webhook.db)",
)
@click.option(
    "--api-host",
    type=str,
    help="API server host (default: 0.0.0.0)",
)
@click.option(
    "--api-port",
    type=int,
    help="API server port (default: 8000)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (default: INFO)",
)
@click.option(
    "--log-format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    help="Log format (default: json)",
)
@click.option(
    "--metrics/--no-metrics",
    default=None,
    help="Enable/disable Prometheus metrics (default: enabled)",
)
@click.option(
    "--site-url",
    type=str,
    help="Public base URL for permalinks (default: http://localhost:8000)",
)
@click.option(
    "--permalink-structure",
    type=click.Choice(["plain", "pretty"], case_sensitive=False),
    help="Permalink style (default: plain)",
)
@click.option(
    "--date-format",
    type=str,
    help="Display date format in PHP date() notation (default: 'F j, Y')",
)
@click.option(
    "--webhook-url",
    type=str,
    help="Webhook URL to store on startup (empty string disables)",
)
@click.option(
    "--webhook-timeout",
    type=int,
    help="Webhook HTTP request timeout in seconds (default: 30)",
)
def server(**kwargs):
    """Start the API server."""
    from .__main__ import Application

    config = _load_config(**kwargs)

    setup_logging(level=config.log_level, format_type=config.log_format)

    app = Application(config)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    def signal_handler(sig, frame):
        logger.info(f"Received signal {sig}")
        loop.create_task(app.stop())

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        loop.run_until_complete(app.run())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt")
    finally:
        loop.close()


@cli.command("create-user")
@click.argument("login")
@click.option(
    "--role",
    type=click.Choice(ROLES),
    default="administrator",
    show_default=True,
    help="User role",
)
@click.option("--display-name", type=str, help="Name shown as post author (default: login)")
@click.option("--email", type=str, help="Email address")
@click.option("--db-path", type=click.Path(), help="Path to database file")
def create_user_command(login, role, display_name, email, db_path):
    """
    Create a user and print their API token.

    Examples:

      # Administrator who can change settings and send test webhooks
      post-webhook create-user admin

      # Author who can publish posts
      post-webhook create-user jane --role author --display-name "Jane Doe"
    """
    config = _load_config(db_path=db_path)
    db = init_database(config.db_path)

    try:
        with session_scope() as session:
            user = create_user(
                session, login, role=role, display_name=display_name, email=email
            )
            token = user.api_token
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        db.close()

    click.echo(f"Created {role} '{login}'")
    click.echo(f"API token: {token}")


@cli.group()
def webhook():
    """Manage the webhook URL and send test events."""
    pass


@webhook.command("set")
@click.argument("url")
@click.option("--db-path", type=click.Path(), help="Path to database file")
def webhook_set(url, db_path):
    """
    Store the webhook URL. Pass an empty string to disable.

    Examples:

      post-webhook webhook set https://example.com/hooks/new-post

      post-webhook webhook set ""
    """
    config = _load_config(db_path=db_path)
    db = init_database(config.db_path)
    try:
        with session_scope() as session:
            stored = set_webhook_url(session, url)
    finally:
        db.close()

    if stored:
        if not is_valid_webhook_url(url):
            click.echo(f"'{url}' was cleaned up before saving", err=True)
        click.echo(f"Webhook URL set to {stored}")
    elif url:
        click.echo(f"'{url}' is not a valid http(s) URL; webhook disabled", err=True)
        sys.exit(1)
    else:
        click.echo("Webhook disabled")


@webhook.command("show")
@click.option("--db-path", type=click.Path(), help="Path to database file")
def webhook_show(db_path):
    """Print the configured webhook URL."""
    config = _load_config(db_path=db_path)
    db = init_database(config.db_path)
    try:
        with session_scope() as session:
            url = get_webhook_url(session)
    finally:
        db.close()

    click.echo(url or "(disabled)")


@webhook.command("test")
@click.option("--user", "login", required=True, help="Login of the administrator sending the test")
@click.option("--db-path", type=click.Path(), help="Path to database file")
@click.option("--site-url", type=str, help="Public base URL for permalinks")
@click.option("--webhook-timeout", type=int, help="Request timeout in seconds (default: 30)")
def webhook_test(login, db_path, site_url, webhook_timeout):
    """Send the most recent published post to the webhook URL."""
    config = _load_config(db_path=db_path, site_url=site_url, webhook_timeout=webhook_timeout)
    setup_logging(level=config.log_level, format_type="text")
    db = init_database(config.db_path)

    async def run():
        handler = WebhookHandler(timeout=config.webhook_timeout, record_metrics=False)
        try:
            with session_scope() as session:
                user = session.query(User).filter_by(login=login).first()
                url = get_webhook_url(session)
            result = await WebhookDispatcher(handler).send_test_event(
                user, url, lambda: latest_post_payload(Site.from_config(config))
            )
            return result, url
        finally:
            await handler.close()

    try:
        result, url = asyncio.run(run())
    finally:
        db.close()

    if result.success and not url:
        click.echo("No webhook URL configured; nothing was sent.", err=True)
        sys.exit(1)

    click.echo(result.data, err=not result.success)
    if not result.success:
        sys.exit(1)
