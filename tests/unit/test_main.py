"""Unit tests for __main__.py entry point."""

import json
import os
import sys
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import patch

import pytest

from slackvault.__main__ import (
    EXIT_BAD_REQUEST,
    EXIT_QUERY_ERROR,
    EXIT_UNAVAILABLE,
    main,
    main_async,
    parse_args,
)
from slackvault.domain.entities import Channel, Message, User
from slackvault.domain.errors import QueryFailedError, StoreUnavailableError
from slackvault.infrastructure.persistence import Database, create_schema

BASE = datetime(2024, 1, 1, 10, 0)


class TestParseArgs:
    """Test cases for parse_args function."""

    def test_default_config_path(self) -> None:
        """TC-07-008: Default config path should be config.yaml."""
        args = parse_args(["channels"])

        assert args.config == Path("config.yaml")
        assert args.command == "channels"
        assert args.init_schema is False

    def test_config_path_with_short_option(self) -> None:
        args = parse_args(["-c", "custom.yaml", "channels"])

        assert args.config == Path("custom.yaml")

    def test_page_arguments(self) -> None:
        args = parse_args(
            ["page", "general", "--cursor", "2024-01-01 10:00:00", "--size", "5"]
        )

        assert args.channel == "general"
        assert args.cursor == "2024-01-01 10:00:00"
        assert args.size == 5

    def test_search_arguments(self) -> None:
        args = parse_args(
            ["search", "deploy -staging", "--channel", "ops", "--user", "U1"]
        )

        assert args.query == "deploy -staging"
        assert args.channel == "ops"
        assert args.user == "U1"
        assert args.limit is None

    @pytest.mark.parametrize("value", ["0", "-3", "many"])
    def test_size_must_be_positive(self, value: str) -> None:
        with pytest.raises(SystemExit):
            parse_args(["page", "general", "--size", value])


class TestMainWithConfigErrors:
    """Test cases for main function with configuration errors."""

    def test_config_file_not_found(self, capsys: pytest.CaptureFixture[str]) -> None:
        """TC-07-002: Non-existent config file should cause exit with error."""
        with patch.object(sys, "argv", ["slackvault", "-c", "nonexistent.yaml"]):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "nonexistent.yaml" in captured.err
        assert "not found" in captured.err

    def test_invalid_config_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """TC-07-003: Invalid config file should cause exit with error."""
        invalid_config = tmp_path / "invalid.yaml"
        invalid_config.write_text("invalid: yaml: content:")

        with patch.object(sys, "argv", ["slackvault", "-c", str(invalid_config)]):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
        assert "Error" in capsys.readouterr().err

    def test_validation_error(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """database セクションがない設定はバリデーションエラー."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("archive:\n  page_size: 10\n")

        with (
            patch.dict(os.environ, {}, clear=True),
            patch.object(sys, "argv", ["slackvault", "-c", str(config_file)]),
        ):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
        assert "validation" in capsys.readouterr().err


@pytest.fixture
async def config_file(tmp_path: Path) -> Path:
    """Create a seeded archive and a config file pointing at it."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'archive.db'}"
    database = Database(url)
    await database.initialize()
    await create_schema(database)
    async with database.get_session() as session:
        session.add_all(
            [
                Channel(id="C1", name="general", topic="Company wide"),
                Channel(id="C2", name="random"),
                User(id="U1", name="alice", real_name="Alice"),
                User(id="U2", name="bob", display_name="bobby"),
                Message(
                    channel_id="C1", user_id="U1", ts=BASE, msg_text="deploy failed"
                ),
                Message(
                    channel_id="C1",
                    user_id="U2",
                    ts=BASE + timedelta(minutes=1),
                    msg_text="looking into the deploy",
                    thread_ts=BASE,
                    parent_user_id="U1",
                ),
                Message(
                    channel_id="C1",
                    user_id="U2",
                    ts=BASE + timedelta(minutes=2),
                    msg_text="lunch?",
                ),
            ]
        )
    await database.close()

    path = tmp_path / "config.yaml"
    path.write_text(f'database:\n  url: "{url}"\nlogging:\n  level: WARNING\n')
    return path


def read_rows(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line]


class TestMainAsync:
    """End-to-end runs of main_async against a SQLite archive."""

    async def test_channels(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """TC-07-001: チャンネル一覧を JSON 行で出力する."""
        code = await main_async(parse_args(["-c", str(config_file), "channels"]))

        assert code == 0
        rows = read_rows(capsys.readouterr().out)
        assert [row["name"] for row in rows] == ["general", "random"]
        assert rows[0]["topic"] == "Company wide"

    async def test_page(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """返信を除いた親メッセージと返信数を出力する."""
        code = await main_async(
            parse_args(["-c", str(config_file), "page", "general", "--size", "1"])
        )

        assert code == 0
        rows = read_rows(capsys.readouterr().out)
        assert rows[0]["text"] == "deploy failed"
        assert rows[0]["reply_count"] == 1
        assert rows[0]["time"] == "01 Jan 2024 @ 10:00 AM"
        assert rows[0]["user"] == "Alice"
        assert rows[1] == {"next_cursor": "2024-01-01 10:00:00.000000"}

    async def test_page_with_cursor(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = await main_async(
            parse_args(
                [
                    "-c",
                    str(config_file),
                    "page",
                    "general",
                    "--cursor",
                    "2024-01-01 10:00:00.000000",
                ]
            )
        )

        assert code == 0
        rows = read_rows(capsys.readouterr().out)
        assert [row["text"] for row in rows] == ["lunch?"]
        assert rows[0]["user"] == "bobby"

    async def test_thread(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = await main_async(
            parse_args(
                [
                    "-c",
                    str(config_file),
                    "thread",
                    "general",
                    "2024-01-01 10:00:00",
                    "U1",
                ]
            )
        )

        assert code == 0
        rows = read_rows(capsys.readouterr().out)
        assert [row["text"] for row in rows] == ["looking into the deploy"]
        assert "reply_count" not in rows[0]

    async def test_search(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = await main_async(
            parse_args(["-c", str(config_file), "search", "deploy", "--user", "U2"])
        )

        assert code == 0
        rows = read_rows(capsys.readouterr().out)
        assert [row["text"] for row in rows] == ["looking into the deploy"]
        assert isinstance(rows[0]["rank"], float)

    async def test_unknown_channel(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """TC-07-004: 存在しないチャンネルは終了コード 2."""
        code = await main_async(parse_args(["-c", str(config_file), "page", "nope"]))

        assert code == EXIT_BAD_REQUEST
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "channel not found: nope" in captured.err

    async def test_malformed_cursor(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = await main_async(
            parse_args(["-c", str(config_file), "page", "general", "--cursor", "x"])
        )

        assert code == EXIT_BAD_REQUEST

    async def test_init_schema_on_fresh_archive(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """--init-schema で空のアーカイブを作成できる."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            f'database:\n  url: "sqlite+aiosqlite:///{tmp_path / "new.db"}"\n'
        )

        code = await main_async(
            parse_args(["-c", str(config_file), "--init-schema", "channels"])
        )

        assert code == 0
        assert capsys.readouterr().out == ""
        assert (tmp_path / "new.db").exists()

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (StoreUnavailableError("down"), EXIT_UNAVAILABLE),
            (QueryFailedError("bad"), EXIT_QUERY_ERROR),
        ],
    )
    async def test_store_errors(
        self, config_file: Path, error: Exception, expected: int
    ) -> None:
        with patch("slackvault.__main__.run_command", side_effect=error):
            code = await main_async(parse_args(["-c", str(config_file), "channels"]))

        assert code == expected

    async def test_init_schema_failure(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """スキーマ作成の失敗もトレースバックではなく終了コードで返す."""
        with patch(
            "slackvault.__main__.create_schema",
            side_effect=StoreUnavailableError("no such module: fts5"),
        ):
            code = await main_async(
                parse_args(["-c", str(config_file), "--init-schema", "channels"])
            )

        assert code == EXIT_UNAVAILABLE
        assert "fts5" in capsys.readouterr().err
