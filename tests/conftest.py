import io
import sys
from contextlib import redirect_stderr, redirect_stdout
from dataclasses import dataclass
from datetime import date, datetime
from unittest.mock import patch

import pytest

from ritual import config, db
from ritual.lib import ansi, clock
from ritual.notifiers import MemoryNotifier
from ritual.persistence import PersistenceGateway
from ritual.scheduler import NotificationScheduler
from ritual.store import HabitStore

TODAY = date(2026, 3, 18)


@dataclass
class Result:
    exit_code: int
    stdout: str
    stderr: str


class FnCLIRunner:
    def invoke(self, args: list[str]) -> Result:
        from ritual import cli

        out, err = io.StringIO(), io.StringIO()
        code = 0
        with redirect_stdout(out), redirect_stderr(err), patch.object(sys, "argv", ["ritual", *args]):
            try:
                cli.main()
            except SystemExit as e:
                if e.code is None:
                    code = 0
                elif isinstance(e.code, int):
                    code = e.code
                else:
                    err.write(str(e.code))
                    code = 1
            except Exception as e:
                err.write(f"{type(e).__name__}: {e}")
                code = 1
        return Result(code, out.getvalue(), err.getvalue())


@pytest.fixture(autouse=True)
def _isolate_log(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "LOG_FILE", tmp_path / "ritual.log")


@pytest.fixture
def tmp_ritual_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "RITUAL_DIR", tmp_path)
    monkeypatch.setattr(config, "DB_PATH", tmp_path / "ritual.db")
    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "config.yaml")
    monkeypatch.setattr(config, "LOG_FILE", tmp_path / "ritual.log")
    monkeypatch.setattr(config._config, "_data", {"notifier": "none"})
    monkeypatch.setattr("ritual.notifiers.LAUNCHD_DIR", tmp_path / "LaunchAgents")
    db.init()
    yield tmp_path
    ansi.use(ansi.DEFAULT)


@pytest.fixture
def frozen_today(monkeypatch):
    monkeypatch.setattr(clock, "today", lambda: TODAY)
    monkeypatch.setattr(clock, "now", lambda: datetime.combine(TODAY, datetime.min.time()))
    return TODAY


@pytest.fixture
def notifier():
    return MemoryNotifier()


@pytest.fixture
def store(tmp_ritual_dir, frozen_today, notifier):
    s = HabitStore.open(PersistenceGateway(), NotificationScheduler(notifier))
    yield s
    s.close()


@pytest.fixture
def runner(tmp_ritual_dir, frozen_today):
    return FnCLIRunner()
