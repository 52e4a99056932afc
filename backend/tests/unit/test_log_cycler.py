"""Unit tests for LogCycler rotation."""

import asyncio
import logging
from logging.handlers import RotatingFileHandler

import pytest

from resource_api.infrastructure.logging import LogCycler


@pytest.fixture
def handler(tmp_path):
    handler = RotatingFileHandler(tmp_path / "app.log", maxBytes=0, backupCount=2)
    yield handler
    handler.close()


def write(handler: RotatingFileHandler, message: str) -> None:
    handler.emit(logging.makeLogRecord({"msg": message, "levelno": logging.INFO}))
    handler.flush()


@pytest.mark.asyncio
async def test_small_file_is_not_rotated(tmp_path, handler):
    write(handler, "short")
    cycler = LogCycler(handler, max_bytes=1024)

    assert await cycler.cycle() is False
    assert not (tmp_path / "app.log.1").exists()


@pytest.mark.asyncio
async def test_large_file_is_rotated_and_reopened(tmp_path, handler):
    write(handler, "x" * 200)
    cycler = LogCycler(handler, max_bytes=100)

    assert await cycler.cycle() is True
    assert (tmp_path / "app.log.1").stat().st_size > 100

    write(handler, "after rotation")
    assert "after rotation" in (tmp_path / "app.log").read_text()


@pytest.mark.asyncio
async def test_generations_are_capped_by_backup_count(tmp_path, handler):
    cycler = LogCycler(handler, max_bytes=10)
    for i in range(4):
        write(handler, f"generation {i} " + "x" * 20)
        await cycler.cycle()

    assert (tmp_path / "app.log.1").exists()
    assert (tmp_path / "app.log.2").exists()
    assert not (tmp_path / "app.log.3").exists()


@pytest.mark.asyncio
async def test_missing_file_is_reopened(tmp_path, handler):
    write(handler, "before")
    (tmp_path / "app.log").unlink()
    cycler = LogCycler(handler, max_bytes=1024)

    assert await cycler.cycle() is False
    write(handler, "recreated")
    assert "recreated" in (tmp_path / "app.log").read_text()


class FlakyCycler(LogCycler):
    """Fails on its first cycle, then succeeds."""

    def __init__(self, handler: RotatingFileHandler):
        # 30 ms per interval
        super().__init__(handler, max_bytes=1024, interval_minutes=0.0005)
        self.calls = 0

    async def cycle(self) -> bool:
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("unexpected")
        return False


@pytest.mark.asyncio
async def test_loop_logs_unexpected_errors_and_keeps_running(handler, caplog):
    cycler = FlakyCycler(handler)

    with caplog.at_level(logging.ERROR, logger="resource_api.infrastructure.logging.log_cycler"):
        await cycler.start()
        await asyncio.sleep(0.2)
        await cycler.stop()

    assert cycler.calls >= 2
    failures = [r for r in caplog.records if r.getMessage() == "Log cycling failed"]
    assert len(failures) == 1
    assert failures[0].exc_info[0] is RuntimeError
