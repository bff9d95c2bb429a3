import re
from collections.abc import Callable
from dataclasses import dataclass

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


@dataclass(frozen=True)
class Theme:
    red: str = "\033[38;5;203m"
    green: str = "\033[38;5;114m"
    yellow: str = "\033[38;5;221m"
    blue: str = "\033[38;5;111m"
    orange: str = "\033[38;5;208m"
    gray: str = "\033[38;5;245m"
    white: str = "\033[38;5;252m"
    muted: str = "\033[90m"
    bold: str = "\033[1m"
    dim: str = "\033[2m"
    reset: str = "\033[0m"


DEFAULT = Theme()
PLAIN = Theme(**{name: "" for name in Theme.__dataclass_fields__})
_active: Theme = DEFAULT

_COLORS = {"red", "green", "yellow", "blue", "orange", "gray", "white", "muted"}

# habit color tokens to the nearest 256-color escape
HEX_TO_ANSI: dict[str, str] = {
    "#007AFF": "\033[38;5;33m",
    "#FF9500": "\033[38;5;208m",
    "#FF3B30": "\033[38;5;203m",
    "#5856D6": "\033[38;5;62m",
    "#34C759": "\033[38;5;41m",
    "#FF2D55": "\033[38;5;197m",
}


def use(theme: Theme) -> None:
    global _active
    _active = theme


def __getattr__(name: str) -> Callable[[str], str]:
    if name in _COLORS:

        def _wrap(text: str) -> str:
            return f"{getattr(_active, name)}{text}{_active.reset}"

        _wrap.__name__ = name
        return _wrap
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def bold(text: str) -> str:
    return f"{_active.bold}{text}{_active.reset}"


def dim(text: str) -> str:
    return f"{_active.dim}{text}{_active.reset}"


def tint(text: str, color: str) -> str:
    """Color text with a habit's color token; unknown tokens render plain."""
    if not _active.reset:
        return text
    code = HEX_TO_ANSI.get(color.upper())
    return f"{code}{text}{_active.reset}" if code else text


def strip(text: str) -> str:
    return _ANSI_RE.sub("", text)
