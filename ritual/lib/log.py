import time

from .. import config

__all__ = ["log"]


def log(msg: str) -> None:
    """Append a timestamped line to the ritual log. Never raises."""
    timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
    try:
        config.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        with config.LOG_FILE.open("a") as f:
            f.write(f"{timestamp} {msg}\n")
    except OSError:
        pass
