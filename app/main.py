"""Main entry point for the Recruit Notify service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import os
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional, Tuple

import uvicorn

from app.config.environment import load_database_url, load_environment_config
from app.config.exceptions import ConfigurationError
from app.config.loader import load_app_config, load_config, validate_config_file
from app.config.models import AppConfig
from app.domain.models import Notification, NotificationType
from app.feed import (
    NotificationListener,
    NotificationStore,
    create_congratulations_notification,
    create_interview_invite_notification,
    create_manager_invite_notification,
    create_notification,
    create_verify_details_notification,
)
from app.logging import get_logger
from app.logging.config import configure_logging
from app.persistence.database import close_database, init_database
from app.scheduler import StoreRefreshScheduler
from app.utils.masking import mask_email
from app.utils.timestamps import format_time_ago
from app.web.app import build_dispatcher, create_app

logger = get_logger(__name__, component="cli")

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def resolve_log_level(app_config: AppConfig, override: Optional[str]) -> str:
    """Log level priority: CLI > LOG_LEVEL environment > config file."""
    if override:
        return override
    if os.getenv("LOG_LEVEL"):
        return os.environ["LOG_LEVEL"].strip().upper()
    return app_config.logging.level


def setup_logging(app_config: AppConfig, override: Optional[str]) -> None:
    configure_logging(
        level=resolve_log_level(app_config, override),
        format_type=app_config.logging.format,
        environment=os.environ.get("ENVIRONMENT", "local"),
    )


def run_serve(args: argparse.Namespace) -> int:
    """Serve the mail functions over HTTP until interrupted."""
    app_config, env_config = load_config(args.config)
    setup_logging(app_config, args.log_level)

    host = args.host or app_config.server.host
    port = args.port or app_config.server.port

    logger.info(
        "Recruit Notify starting",
        extra={
            "event": "service.starting",
            "host": host,
            "port": port,
            "smtp_host": env_config.smtp_host,
            "max_retries": app_config.email.max_retries,
        },
    )

    app = create_app(build_dispatcher(app_config, env_config))
    # Logging is already configured; keep uvicorn from installing its own
    uvicorn.run(app, host=host, port=port, log_config=None)

    logger.info("Recruit Notify stopped", extra={"event": "service.stopping"})
    return 0


def _create_for_type(store: NotificationStore, args: argparse.Namespace) -> Notification:
    notification_type = NotificationType(args.type)

    if notification_type is NotificationType.INTERVIEW_INVITE and args.role:
        return create_interview_invite_notification(
            store, args.user, args.role, args.date or [], args.round_type or "next"
        )
    if notification_type is NotificationType.VERIFY_DETAILS and not args.message:
        return create_verify_details_notification(store, args.user)
    if notification_type is NotificationType.CONGRATULATIONS and not args.message:
        return create_congratulations_notification(store, args.user, args.role)
    if notification_type is NotificationType.MANAGER_INVITE and args.name:
        return create_manager_invite_notification(store, args.user, args.name)

    if not args.message:
        raise ConfigurationError(
            f"--message is required for a custom {notification_type.value} notification",
            suggestions=[
                "Pass --role for interview_invite or --name for manager_invite",
                "Or supply --title and --message explicitly",
            ],
        )
    return create_notification(
        store,
        user_id=args.user,
        type=notification_type,
        title=args.title or notification_type.value.replace("_", " ").title(),
        message=args.message,
    )


def run_notify(args: argparse.Namespace) -> int:
    """Record one notification for a user."""
    app_config = load_app_config(args.config)
    setup_logging(app_config, args.log_level)

    init_database(load_database_url())
    try:
        notification = _create_for_type(NotificationStore(), args)
    finally:
        close_database()

    print(f"Created notification {notification.id} for {notification.user_id}")
    return 0


def render_view(user_id: str, notifications: List[Notification]) -> str:
    unread = sum(1 for n in notifications if not n.viewed)
    lines = [f"Notifications for {user_id} ({unread} unread)"]
    if not notifications:
        lines.append("  No notifications yet")
    for n in notifications:
        marker = " " if n.viewed else "*"
        title = n.title or (n.type.value if n.type else "notification")
        lines.append(f" {marker} [{format_time_ago(n.created_at)}] {title}: {n.message}")
    return "\n".join(lines)


def _view_key(notifications: List[Notification]) -> Tuple:
    return tuple((n.id, n.viewed) for n in notifications)


def run_watch(args: argparse.Namespace) -> int:
    """Follow one user's notifications, acknowledging them as they arrive."""
    app_config = load_app_config(args.config)
    setup_logging(app_config, args.log_level)

    init_database(load_database_url())
    store = NotificationStore()
    listener = NotificationListener(store, max_workers=app_config.notifications.ack_workers)

    shutdown_event = threading.Event()
    scheduler = StoreRefreshScheduler(
        store,
        interval_seconds=args.interval or app_config.notifications.poll_interval_seconds,
    )

    def signal_handler(signum, frame):
        logger.info(
            f"Received signal {signum}, shutting down",
            extra={"event": "service.signal_received", "signal": signum},
        )
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    logger.info(
        "Watching notifications",
        extra={"event": "feed.watch.started", "user_id": mask_email(args.user)},
    )

    listener.set_identity(args.user)
    scheduler.start()

    last_key = None
    try:
        while not shutdown_event.is_set():
            current = listener.notifications
            key = _view_key(current)
            if key != last_key:
                print(render_view(args.user, current), flush=True)
                last_key = key
            shutdown_event.wait(1.0)
    finally:
        scheduler.shutdown(wait=False)
        listener.close()
        close_database()

    return 0


def run_check_config(args: argparse.Namespace) -> int:
    """Validate the YAML file and the environment without starting anything."""
    ok = True

    if args.config is not None:
        ok = validate_config_file(args.config)
    else:
        try:
            load_app_config()
            print("✓ Application configuration is valid")
        except ConfigurationError as e:
            print(f"✗ Configuration validation failed:\n{e}")
            ok = False

    try:
        env_config = load_environment_config()
        print(f"✓ Environment is complete ({env_config!r})")
    except ConfigurationError as e:
        print(f"✗ Environment validation failed:\n{e}")
        ok = False

    return 0 if ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Recruit Notify - candidate emails and portal notification feed"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=LOG_LEVELS,
        help="Log level (overrides config and environment)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Serve the mail functions over HTTP")
    serve.add_argument("--host", default=None, help="Bind address (default: server.host)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default: server.port)")
    serve.set_defaults(handler=run_serve)

    notify = subparsers.add_parser("notify", help="Record a notification for a user")
    notify.add_argument("--user", required=True, help="Recipient email address")
    notify.add_argument(
        "--type",
        required=True,
        choices=[t.value for t in NotificationType],
        help="Notification type",
    )
    notify.add_argument("--title", default=None)
    notify.add_argument("--message", default=None)
    notify.add_argument("--role", default=None, help="Role (interview_invite, congratulations)")
    notify.add_argument(
        "--date", action="append", default=None, help="Offered interview date (repeatable)"
    )
    notify.add_argument("--round-type", default=None, help="Interview round (interview_invite)")
    notify.add_argument("--name", default=None, help="Manager name (manager_invite)")
    notify.set_defaults(handler=run_notify)

    watch = subparsers.add_parser("watch", help="Follow a user's notifications")
    watch.add_argument("--user", required=True, help="User email address")
    watch.add_argument(
        "--interval", type=int, default=None, help="Refresh interval in seconds"
    )
    watch.set_defaults(handler=run_watch)

    check = subparsers.add_parser("check-config", help="Validate configuration and environment")
    check.set_defaults(handler=run_check_config)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for Recruit Notify.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    args = build_parser().parse_args(argv)

    try:
        return args.handler(args)
    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error",
            extra={
                "event": "service.startup.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
