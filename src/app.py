"""Application entry point for minutes2gh."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from datetime import date
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint

import settings
from adapters.narration import format_outcome_log
from adapters.wiring import build_engine
from core.config import EngineArgs
from core.errors import EngineCreationError
from core.models import Error, Outcome
from core.rate_limit import validate_interval

NAME = "MINUTES2GH"
FONT = "tarty-1"

# Environment variables whose values must never reach a log line.
SECRET_ENV_VARS = ("M2G_TOKEN", "BOT_TOKEN", "API_HASH")


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict, extra: list[str]) -> list[str]:
    names = list(SECRET_ENV_VARS)
    names.extend(config.get("redact", {}).get("patterns", []))
    values = [value for value in (os.getenv(name) for name in names) if value]
    values.extend(value for value in extra if value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(level_name: Optional[str], secrets: list[str]) -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", True):
        return

    level_name = str(level_name or config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = _RedactingFormatter(_collect_redaction_values(config, secrets), fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/minutes2gh.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)
    # Keep per-request lines of the HTTP stack out of INFO output.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def _log_outcome(logger: logging.Logger, outcome: Outcome) -> None:
    if isinstance(outcome.kind, Error):
        logger.warning(format_outcome_log(outcome))
    else:
        logger.info(format_outcome_log(outcome))


async def _run_manual(token: str, args: EngineArgs) -> int:
    """Batch run: drain the outcome stream, logging each outcome."""

    logger = logging.getLogger(__name__)
    try:
        engine = await build_engine(token, args)
    except EngineCreationError:
        logger.exception("Could not start the engine")
        return 1

    processed = 0
    async with engine:
        async for outcome in engine.run():
            processed += 1
            _log_outcome(logger, outcome)
    logger.info("%s issue reference(s) processed", processed)
    return 0


def _run_bot(token: str) -> None:
    from adapters.telegram_bot import ChatBot
    from client import build_client
    from core.rate_limit import KeyedRateLimiter

    logger = logging.getLogger(__name__)
    bot_token = os.getenv("BOT_TOKEN")
    if not bot_token:
        raise RuntimeError("BOT_TOKEN is required to run the bot")

    client = build_client()
    client.start(bot_token=bot_token)

    about = [
        f"I am {settings.DESCRIPTION}.",
        f"... I am an instance of {settings.NAME} version {settings.VERSION}.",
    ]
    if settings.HOMEPAGE:
        about.append(f"... To know more, see {settings.HOMEPAGE}")

    bot = ChatBot(
        client,
        token=token,
        engine_factory=build_engine,
        channels=settings.CHAT_CHANNELS,
        engine_rate_limit=settings.ENGINE_RATE_LIMIT,
        governor=KeyedRateLimiter(settings.BOT_RATE_LIMIT),
        about=about,
    )
    client.loop.run_until_complete(bot.identify())
    bot.register()

    logger.info("Bot connected. Listening for commands...")
    client.run_until_disconnected()


def _positive_float(value: str) -> float:
    try:
        return validate_interval(float(value))
    except ValueError as err:
        raise argparse.ArgumentTypeError(str(err)) from err


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from err


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minutes2gh",
        description="Link GitHub issues and PRs to the minutes of the meetings where they were discussed.",
    )
    parser.add_argument("--token", default=os.getenv("M2G_TOKEN"), help="GitHub token used to create comments")
    parser.add_argument(
        "-l",
        "--log-level",
        default=os.getenv("M2G_LOG_LEVEL"),
        help="Log level (error, warning, info, debug)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    manual = subparsers.add_parser("manual", help="Process one set of minutes and exit")
    manual.add_argument(
        "-c",
        "--channel",
        default=os.getenv("M2G_CHANNEL"),
        required=os.getenv("M2G_CHANNEL") is None,
        help="IRC channel from where the minutes are generated",
    )
    manual.add_argument(
        "-d",
        "--date",
        type=_iso_date,
        default=os.getenv("M2G_DATE") or date.today(),
        help="Date of the minutes, formatted as YYYY-MM-DD",
    )
    manual.add_argument("-n", "--dry-run", action="store_true", help="Do not actually comment on GitHub")
    manual.add_argument("-f", "--file", default=os.getenv("M2G_FILE"), help="Read minutes from this file")
    manual.add_argument("-u", "--url", help="URL of the minutes (default derived from channel and date)")
    manual.add_argument("-g", "--groups", help="Comma-separated groups owning the repositories (default wg/<channel>)")
    manual.add_argument(
        "-r",
        "--rate-limit",
        type=_positive_float,
        default=1.0,
        help="Minimum delay in seconds between GitHub calls",
    )
    manual.add_argument("-t", "--transcript", action="store_true", help="Include the transcript excerpt in comments")
    manual.add_argument(
        "--repo",
        dest="repos",
        action="append",
        default=[],
        help="Additional allowed repository (org/repo, or repo for w3c/repo); repeatable",
    )
    manual.add_argument("--any-repo", action="store_true", help="Do not filter issues by repository ownership")

    subparsers.add_parser("bot", help="Run the Telegram bot")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.token:
        parser.error("a GitHub token is required (--token or M2G_TOKEN)")

    _print_banner()
    _configure_logging(args.log_level, secrets=[args.token])

    if args.command == "bot":
        _run_bot(args.token)
        return

    engine_args = EngineArgs(
        channel=args.channel,
        date=args.date,
        dry_run=args.dry_run,
        transcript=args.transcript,
        rate_limit=args.rate_limit,
        url=args.url,
        file=args.file,
        groups=args.groups,
        extra_repos=tuple(args.repos),
        check_ownership=not args.any_repo,
    )
    sys.exit(asyncio.run(_run_manual(args.token, engine_args)))


if __name__ == "__main__":
    main()
