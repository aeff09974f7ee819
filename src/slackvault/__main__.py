"""Command line entry point for slackvault."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from slackvault.application.services.archive_service import ArchiveService
from slackvault.config import (
    AppConfig,
    ConfigError,
    ConfigFileNotFoundError,
    load_config,
)
from slackvault.domain.entities import (
    Channel,
    ParentMessage,
    ReplyMessage,
    SearchResult,
)
from slackvault.domain.errors import (
    ArchiveError,
    InvalidTimestampError,
    NotFoundError,
    StoreUnavailableError,
)
from slackvault.domain.timestamp_codec import to_store_text
from slackvault.infrastructure.logging import get_logger, setup_logging
from slackvault.infrastructure.persistence import (
    Database,
    SqlChannelCatalog,
    SqlMessageRepository,
    SqlSearchEngine,
    SqlUserDirectory,
    create_schema,
)

EXIT_CONFIG_ERROR = 1
EXIT_BAD_REQUEST = 2
EXIT_UNAVAILABLE = 3
EXIT_QUERY_ERROR = 4


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value}")
    return number


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Command line arguments. If None, uses sys.argv.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(description="slackvault - Slack archive browser")
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to configuration file (default: config.yaml)",
    )
    parser.add_argument(
        "--init-schema",
        action="store_true",
        help="Create archive tables and the search index before running",
    )

    commands = parser.add_subparsers(dest="command")

    commands.add_parser("channels", help="List channels")

    page = commands.add_parser("page", help="Show a page of channel messages")
    page.add_argument("channel", help="Channel name")
    page.add_argument("--cursor", help="ts of the last message already seen")
    page.add_argument("--size", type=_positive_int, help="Messages per page")

    thread = commands.add_parser("thread", help="Show the replies of a thread")
    thread.add_argument("channel", help="Channel name")
    thread.add_argument("ts", help="Parent message ts")
    thread.add_argument("user", help="Parent message author ID")

    search = commands.add_parser("search", help="Search messages")
    search.add_argument("query", help="Search text")
    search.add_argument("--channel", help="Only search this channel")
    search.add_argument("--user", help="Only search messages by this user ID")
    search.add_argument(
        "--limit", type=_positive_int, help="Maximum number of results"
    )

    return parser.parse_args(args)


def _channel_row(channel: Channel) -> dict[str, Any]:
    return {"id": channel.id, "name": channel.name, "topic": channel.topic}


def _message_row(item: ReplyMessage) -> dict[str, Any]:
    message = item.message
    row: dict[str, Any] = {
        "channel_id": message.channel_id,
        "ts": to_store_text(message.ts),
        "time": item.display_ts(),
        "user_id": message.user_id,
        "user": item.author.shown_name,
        "text": message.msg_text,
    }
    if isinstance(item, ParentMessage):
        row["reply_count"] = item.reply_count
    if isinstance(item, SearchResult):
        row["rank"] = item.rank
    return row


def _emit(row: dict[str, Any]) -> None:
    print(json.dumps(row, ensure_ascii=False))


def build_service(config: AppConfig, database: Database) -> ArchiveService:
    """Wire the archive service to a database."""
    return ArchiveService(
        channels=SqlChannelCatalog(database, logger=get_logger("channels")),
        users=SqlUserDirectory(database),
        messages=SqlMessageRepository(database, logger=get_logger("messages")),
        search_engine=SqlSearchEngine(
            database, config=config.search, logger=get_logger("search")
        ),
        archive_config=config.archive,
        search_config=config.search,
        logger=get_logger("archive"),
    )


async def run_command(args: argparse.Namespace, service: ArchiveService) -> None:
    """Run one sub-command and print its results as JSON lines."""
    if args.command == "channels":
        for channel in await service.list_channels():
            _emit(_channel_row(channel))
    elif args.command == "page":
        page = await service.channel_page(args.channel, args.cursor, args.size)
        for message in page.messages:
            _emit(_message_row(message))
        if page.next_cursor is not None:
            _emit({"next_cursor": to_store_text(page.next_cursor)})
    elif args.command == "thread":
        for reply in await service.thread(args.channel, args.ts, args.user):
            _emit(_message_row(reply))
    elif args.command == "search":
        results = await service.search(
            args.query, channel_name=args.channel, user_id=args.user, limit=args.limit
        )
        for result in results:
            _emit(_message_row(result))


async def main_async(args: argparse.Namespace) -> int:
    """Async main function.

    Args:
        args: Parsed command line arguments.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    # 1. Load configuration
    config = load_config(args.config)

    # 2. Initialize logging
    setup_logging(config.logging)
    logger = get_logger(__name__)
    logger.info("Starting slackvault", config_path=str(args.config))

    # 3. Open the connection pool
    database = Database.from_config(config.database, logger=get_logger("database"))
    await database.initialize()

    try:
        if args.init_schema:
            await create_schema(database, config.search)
            logger.info("Schema created")

        service = build_service(config, database)
        await run_command(args, service)

    except (NotFoundError, InvalidTimestampError) as e:
        logger.warning("Request failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_BAD_REQUEST
    except StoreUnavailableError as e:
        logger.error("Archive store unavailable", error=str(e))
        print(f"Error: archive unavailable, try again later ({e})", file=sys.stderr)
        return EXIT_UNAVAILABLE
    except ArchiveError as e:
        logger.error("Query failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_QUERY_ERROR

    finally:
        await database.close()

    return 0


def main() -> None:
    """Main entry point."""
    args = parse_args()
    config_path = args.config

    try:
        exit_code = asyncio.run(main_async(args))
        sys.exit(exit_code)
    except ConfigFileNotFoundError:
        print(f"Error: {config_path} not found", file=sys.stderr)
        sys.exit(EXIT_CONFIG_ERROR)
    except ConfigError as e:
        print(f"Error: Configuration error: {e}", file=sys.stderr)
        sys.exit(EXIT_CONFIG_ERROR)
    except ValidationError as e:
        print(f"Error: Configuration validation error: {e}", file=sys.stderr)
        sys.exit(EXIT_CONFIG_ERROR)
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
