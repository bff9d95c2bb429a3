import dataclasses
import plistlib
import subprocess
import sys
import uuid
from pathlib import Path
from typing import Protocol
from xml.sax.saxutils import escape

from .core.errors import NotificationPermissionDenied, PlatformUnsupported

__all__ = [
    "Content",
    "LaunchdNotifier",
    "MemoryNotifier",
    "Notifier",
    "NullNotifier",
    "Reminder",
    "Trigger",
    "make_notifier",
]


@dataclasses.dataclass(frozen=True)
class Content:
    title: str
    body: str


@dataclasses.dataclass(frozen=True)
class Trigger:
    """Fires every day at hour:minute local time."""

    hour: int
    minute: int


@dataclasses.dataclass(frozen=True)
class Reminder:
    identifier: str
    content: Content
    trigger: Trigger


class Notifier(Protocol):
    def setup(self) -> None: ...

    def schedule_repeating(
        self, content: Content, trigger: Trigger, identifier: str | None = None
    ) -> str: ...

    def cancel_all(self) -> None: ...

    def cancel_by_id(self, identifier: str) -> None: ...

    def scheduled(self) -> list[Reminder]: ...


class MemoryNotifier:
    """Keeps reminders in process memory. Scheduling under an existing identifier replaces it."""

    def __init__(self, granted: bool = True):
        self.granted = granted
        self.reminders: dict[str, Reminder] = {}

    def setup(self) -> None:
        if not self.granted:
            raise NotificationPermissionDenied("notifications not permitted")

    def schedule_repeating(
        self, content: Content, trigger: Trigger, identifier: str | None = None
    ) -> str:
        if not self.granted:
            raise NotificationPermissionDenied("notifications not permitted")
        handle = identifier or uuid.uuid4().hex
        self.reminders[handle] = Reminder(handle, content, trigger)
        return handle

    def cancel_all(self) -> None:
        self.reminders.clear()

    def cancel_by_id(self, identifier: str) -> None:
        self.reminders.pop(identifier, None)

    def scheduled(self) -> list[Reminder]:
        return list(self.reminders.values())

    def get(self, identifier: str) -> Reminder | None:
        return self.reminders.get(identifier)


class NullNotifier:
    def setup(self) -> None:
        pass

    def schedule_repeating(
        self, content: Content, trigger: Trigger, identifier: str | None = None
    ) -> str:
        return identifier or ""

    def cancel_all(self) -> None:
        pass

    def cancel_by_id(self, identifier: str) -> None:
        pass

    def scheduled(self) -> list[Reminder]:
        return []


LABEL_PREFIX = "com.ritual.reminder."
LAUNCHD_DIR = Path.home() / "Library/LaunchAgents"


def _applescript_string(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class LaunchdNotifier:
    """macOS reminders as launchd agents that run `osascript display notification` daily."""

    def __init__(self, launchd_dir: Path | None = None, platform: str | None = None):
        self.launchd_dir = launchd_dir if launchd_dir else LAUNCHD_DIR
        self.platform = platform if platform is not None else sys.platform

    def _check_platform(self) -> None:
        if self.platform != "darwin":
            raise PlatformUnsupported(f"launchd reminders need macOS, not {self.platform}")

    def _plist_path(self, identifier: str) -> Path:
        return self.launchd_dir / f"{LABEL_PREFIX}{identifier}.plist"

    def _generate_plist(self, identifier: str, content: Content, trigger: Trigger) -> str:
        script = (
            f"display notification {_applescript_string(content.body)} "
            f"with title {_applescript_string(content.title)}"
        )
        script = escape(script, {'"': "&quot;"})
        return f"""<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
    <key>Label</key>
    <string>{LABEL_PREFIX}{identifier}</string>
    <key>ProgramArguments</key>
    <array>
        <string>/usr/bin/osascript</string>
        <string>-e</string>
        <string>{script}</string>
    </array>
    <key>StartCalendarInterval</key>
    <dict>
        <key>Hour</key>
        <integer>{trigger.hour}</integer>
        <key>Minute</key>
        <integer>{trigger.minute}</integer>
    </dict>
</dict>
</plist>
"""

    def _launchctl(self, action: str, plist: Path) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            ["launchctl", action, str(plist)],
            capture_output=True,
            text=True,
        )

    def setup(self) -> None:
        self._check_platform()
        self.launchd_dir.mkdir(parents=True, exist_ok=True)

    def schedule_repeating(
        self, content: Content, trigger: Trigger, identifier: str | None = None
    ) -> str:
        self._check_platform()
        handle = identifier or uuid.uuid4().hex[:8]
        plist = self._plist_path(handle)
        self.launchd_dir.mkdir(parents=True, exist_ok=True)
        if plist.exists():
            self._launchctl("unload", plist)
        plist.write_text(self._generate_plist(handle, content, trigger))
        result = self._launchctl("load", plist)
        if result.returncode != 0:
            plist.unlink(missing_ok=True)
            raise NotificationPermissionDenied(result.stderr.strip() or "launchctl load failed")
        return handle

    def cancel_by_id(self, identifier: str) -> None:
        self._check_platform()
        plist = self._plist_path(identifier)
        if not plist.exists():
            return
        self._launchctl("unload", plist)
        plist.unlink(missing_ok=True)

    def cancel_all(self) -> None:
        self._check_platform()
        if not self.launchd_dir.exists():
            return
        for plist in sorted(self.launchd_dir.glob(f"{LABEL_PREFIX}*.plist")):
            self._launchctl("unload", plist)
            plist.unlink(missing_ok=True)

    def scheduled(self) -> list[Reminder]:
        if not self.launchd_dir.exists():
            return []
        reminders = []
        for plist in sorted(self.launchd_dir.glob(f"{LABEL_PREFIX}*.plist")):
            identifier = plist.name[len(LABEL_PREFIX) : -len(".plist")]
            reminders.append(_read_reminder(identifier, plist))
        return reminders


def _read_reminder(identifier: str, plist: Path) -> Reminder:
    with plist.open("rb") as f:
        data = plistlib.load(f)
    interval = data.get("StartCalendarInterval", {})
    return Reminder(
        identifier,
        Content(title=identifier, body=data.get("ProgramArguments", ["", "", ""])[-1]),
        Trigger(hour=int(interval.get("Hour", 0)), minute=int(interval.get("Minute", 0))),
    )


def make_notifier(name: str) -> Notifier:
    if name == "launchd":
        return LaunchdNotifier()
    if name == "memory":
        return MemoryNotifier()
    return NullNotifier()
