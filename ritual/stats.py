from fncli import cli

from .app import session
from .lib import clock
from .lib.errors import echo
from .render import render_stats


@cli("ritual", name="stats")
def stats() -> None:
    """Show the 7-day trend, today's completion rate and top streaks"""
    with session() as store:
        echo(render_stats(store.habits, clock.today()))
