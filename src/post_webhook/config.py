"""Configuration management with CLI args, environment variables, and defaults."""

import os
import argparse
from dataclasses import dataclass
from typing import Optional

ENV_PREFIX = "POST_WEBHOOK_"


@dataclass
class Config:
    """Application configuration."""

    # === Database ===
    db_path: str = "./data/post_webhook.db"

    # === API ===
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_title: str = "New Post Webhook"
    api_version: str = "1.0.0"

    # === Prometheus ===
    metrics_enabled: bool = True

    # === Logging ===
    log_level: str = "INFO"
    log_format: str = "json"  # json|text

    # === Site ===
    site_url: str = "http://localhost:8000"
    permalink_structure: str = "plain"  # plain|pretty
    date_format: str = "F j, Y"

    # === Webhook ===
    webhook_url: Optional[str] = None
    webhook_timeout: int = 30

    @classmethod
    def from_args_and_env(cls, cli_args: Optional[dict] = None) -> "Config":
        """
        Load configuration from CLI arguments, environment variables, and defaults.

        Priority: CLI args > Environment variables > Defaults

        Args:
            cli_args: Optional dictionary of CLI arguments (if not provided, will parse from sys.argv)

        Returns:
            Config instance
        """
        parser = argparse.ArgumentParser(
            description="New Post Webhook - publish notifications for blog posts",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter
        )

        # Database arguments
        db_group = parser.add_argument_group('Database')
        db_group.add_argument(
            "--db-path",
            type=str,
            help="SQLite database file path"
        )

        # API arguments
        api_group = parser.add_argument_group('API')
        api_group.add_argument(
            "--api-host",
            type=str,
            help="API server host"
        )
        api_group.add_argument(
            "--api-port",
            type=int,
            help="API server port"
        )
        api_group.add_argument(
            "--api-title",
            type=str,
            help="API title for OpenAPI documentation"
        )
        api_group.add_argument(
            "--api-version",
            type=str,
            help="API version"
        )

        # Prometheus arguments
        metrics_group = parser.add_argument_group('Metrics')
        metrics_group.add_argument(
            "--no-metrics",
            action="store_true",
            help="Disable Prometheus metrics"
        )

        # Logging arguments
        log_group = parser.add_argument_group('Logging')
        log_group.add_argument(
            "--log-level",
            type=str,
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Logging level"
        )
        log_group.add_argument(
            "--log-format",
            type=str,
            choices=["json", "text"],
            help="Log output format"
        )

        # Site arguments
        site_group = parser.add_argument_group('Site')
        site_group.add_argument(
            "--site-url",
            type=str,
            help="Public base URL used to build permalinks and author links"
        )
        site_group.add_argument(
            "--permalink-structure",
            type=str,
            choices=["plain", "pretty"],
            help="Permalink style (plain: /?p=ID, pretty: /slug/)"
        )
        site_group.add_argument(
            "--date-format",
            type=str,
            help="Display date format using PHP date() characters (e.g. 'F j, Y')"
        )

        # Webhook arguments
        webhook_group = parser.add_argument_group('Webhook')
        webhook_group.add_argument(
            "--webhook-url",
            type=str,
            help="Webhook URL written to the settings store on startup"
        )
        webhook_group.add_argument(
            "--webhook-timeout",
            type=int,
            help="Webhook HTTP request timeout in seconds"
        )

        if cli_args is None:
            args = parser.parse_args()
        else:
            args = argparse.Namespace(**{
                'db_path': cli_args.get('db_path'),
                'api_host': cli_args.get('api_host'),
                'api_port': cli_args.get('api_port'),
                'api_title': cli_args.get('api_title'),
                'api_version': cli_args.get('api_version'),
                'no_metrics': cli_args.get('metrics') is False if 'metrics' in cli_args else False,
                'log_level': cli_args.get('log_level'),
                'log_format': cli_args.get('log_format'),
                'site_url': cli_args.get('site_url'),
                'permalink_structure': cli_args.get('permalink_structure'),
                'date_format': cli_args.get('date_format'),
                'webhook_url': cli_args.get('webhook_url'),
                'webhook_timeout': cli_args.get('webhook_timeout'),
            })

        # Helper function to get value with priority: CLI > Env > Default
        def get_value(cli_arg, env_var, default, type_converter=str):
            if cli_arg is not None:
                return cli_arg
            env_value = os.getenv(f"{ENV_PREFIX}{env_var}")
            if env_value is not None:
                if type_converter == bool:
                    return env_value.lower() in ("true", "1", "yes", "on")
                return type_converter(env_value)
            return default

        config = cls()

        config.db_path = get_value(args.db_path, "DB_PATH", config.db_path)

        config.api_host = get_value(args.api_host, "API_HOST", config.api_host)
        config.api_port = get_value(args.api_port, "API_PORT", config.api_port, int)
        config.api_title = get_value(args.api_title, "API_TITLE", config.api_title)
        config.api_version = get_value(args.api_version, "API_VERSION", config.api_version)

        config.metrics_enabled = not args.no_metrics and get_value(
            None, "METRICS_ENABLED", config.metrics_enabled, bool
        )

        config.log_level = get_value(args.log_level, "LOG_LEVEL", config.log_level)
        config.log_format = get_value(args.log_format, "LOG_FORMAT", config.log_format)

        config.site_url = get_value(args.site_url, "SITE_URL", config.site_url).rstrip("/")
        config.permalink_structure = get_value(
            args.permalink_structure, "PERMALINK_STRUCTURE", config.permalink_structure
        )
        config.date_format = get_value(args.date_format, "DATE_FORMAT", config.date_format)

        config.webhook_url = get_value(args.webhook_url, "WEBHOOK_URL", config.webhook_url)
        config.webhook_timeout = get_value(
            args.webhook_timeout, "WEBHOOK_TIMEOUT", config.webhook_timeout, int
        )

        return config

    def display(self) -> str:
        """
        Display configuration in human-readable format.

        Returns:
            Formatted configuration string
        """
        lines = [
            "Configuration:",
            "  Database:",
            f"    Path: {self.db_path}",
            "  API:",
            f"    Host: {self.api_host}",
            f"    Port: {self.api_port}",
            f"    Metrics: {'Enabled' if self.metrics_enabled else 'Disabled'}",
            "  Logging:",
            f"    Level: {self.log_level}",
            f"    Format: {self.log_format}",
            "  Site:",
            f"    URL: {self.site_url}",
            f"    Permalinks: {self.permalink_structure}",
            f"    Date Format: {self.date_format}",
            "  Webhook:",
            f"    Startup URL: {self.webhook_url or '(from settings store)'}",
            f"    Timeout: {self.webhook_timeout}s",
        ]

        return "\n".join(lines)
