"""Main application entry point."""

import asyncio
import logging
from typing import Optional
import uvicorn

from .config import Config
from .content.links import Site
from .database.engine import DatabaseEngine, init_database, session_scope
from .database.options import set_webhook_url
from .metrics import get_metrics
from .posts.service import PostService
from .api.app import create_app
from .api.dependencies import (
    set_config_instance,
    set_dispatcher_instance,
    set_post_service_instance,
)
from .webhook import WebhookDispatcher, WebhookHandler
from .webhook.hooks import make_publish_listener

logger = logging.getLogger(__name__)


class Application:
    """Main application controller."""

    def __init__(self, config: Config):
        """
        Initialize application.

        Args:
            config: Application configuration
        """
        self.config = config
        self.db: Optional[DatabaseEngine] = None
        self.webhook_handler: Optional[WebhookHandler] = None
        self.dispatcher: Optional[WebhookDispatcher] = None
        self.post_service: Optional[PostService] = None
        self.api_server_task: Optional[asyncio.Task] = None
        self.running = False

    def setup(self) -> None:
        """Initialize storage and wire the webhook to post transitions."""
        logger.info("Initializing database...")
        self.db = init_database(self.config.db_path)

        if self.config.webhook_url is not None:
            with session_scope() as session:
                set_webhook_url(session, self.config.webhook_url)

        self.webhook_handler = WebhookHandler(
            timeout=self.config.webhook_timeout,
            record_metrics=self.config.metrics_enabled,
        )
        self.dispatcher = WebhookDispatcher(self.webhook_handler)

        self.post_service = PostService(record_metrics=self.config.metrics_enabled)
        self.post_service.add_transition_listener(
            make_publish_listener(self.dispatcher, Site.from_config(self.config))
        )

        # Make Config and services available to API routes
        set_config_instance(self.config)
        set_post_service_instance(self.post_service)
        set_dispatcher_instance(self.dispatcher)

    async def start(self) -> None:
        """Start the application."""
        logger.info("Starting New Post Webhook")
        logger.info(f"\n{self.config.display()}")

        self.setup()

        logger.info(f"Starting API server on {self.config.api_host}:{self.config.api_port}")
        self.api_server_task = asyncio.create_task(self._run_api_server())

        self.running = True
        logger.info("Application started successfully")

    async def stop(self) -> None:
        """Stop the application."""
        logger.info("Stopping New Post Webhook...")
        self.running = False

        if self.api_server_task:
            self.api_server_task.cancel()
            try:
                await self.api_server_task
            except asyncio.CancelledError:
                pass

        if self.webhook_handler:
            await self.webhook_handler.close()

        if self.db:
            self.db.close()

        logger.info("Application stopped")

    async def _run_api_server(self) -> None:
        """Run the FastAPI server."""
        try:
            app = create_app(
                title=self.config.api_title,
                version=self.config.api_version,
                enable_metrics=self.config.metrics_enabled,
            )

            config = uvicorn.Config(
                app,
                host=self.config.api_host,
                port=self.config.api_port,
                log_level="info",
                access_log=True,
            )

            server = uvicorn.Server(config)
            await server.serve()

        except asyncio.CancelledError:
            logger.info("API server shutting down...")
            raise
        except Exception as e:
            logger.error(f"API server error: {e}", exc_info=True)
            if self.config.metrics_enabled:
                get_metrics().record_error("api_server", "server_failed")
        finally:
            self.running = False

    async def run(self) -> None:
        """Run the application until interrupted."""
        try:
            await self.start()

            while self.running:
                await asyncio.sleep(1)

        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        except Exception as e:
            logger.error(f"Application error: {e}", exc_info=True)
        finally:
            await self.stop()


def main() -> None:
    """Main entry point - delegates to CLI."""
    from .cli import cli
    cli()


if __name__ == "__main__":
    main()
