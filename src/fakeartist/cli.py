"""Command line interface for fakeartist.

Session code helpers and a headless ``watch`` client that joins a room,
prints what happens and saves the final drawing.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import rich_click as click
from rich.console import Console

from fakeartist.core.config import SessionConfig
from fakeartist.core.logging import configure_logging
from fakeartist.core.models import GameOver, InGame
from fakeartist.exceptions import FakeArtistError
from fakeartist.game.codes import decode_session_code, new_session_code, next_session_code
from fakeartist.realtime.messages import (
    ChatAppend,
    DrawEcho,
    GameEnded,
    GameStarted,
    JoinAck,
    NextTurn,
    RosterUpdate,
    VoteUpdate,
)
from fakeartist.services.session import GameSession

if TYPE_CHECKING:
    from fakeartist.exceptions import ProtocolDesyncError
    from fakeartist.realtime.messages import InboundEvent

console = Console()


def describe_event(session: GameSession, event: InboundEvent) -> str | None:
    """One-line description of an applied event, or None for noisy events."""
    game = session.game
    match event:
        case JoinAck():
            return f"Joined as [cyan]{session.participant_id}[/cyan] ({game.phase if game else '?'})"
        case RosterUpdate(players=players):
            names = ", ".join(p.name for p in players or [])
            return f"Players: {names}"
        case GameStarted():
            if isinstance(game, InGame):
                return f"Game started, category [bold]{game.word.category}[/bold]"
            return "Game started"
        case NextTurn(is_last_turn=is_last_turn):
            notice = session.store.turn_notice
            if notice is None:
                return None
            if is_last_turn:
                return f"{notice.current.name} draws the last line. [yellow]Who is the fake artist?[/yellow]"
            return f"{notice.previous.name} lifted the pen, {notice.current.name} is next"
        case VoteUpdate():
            tally = session.tally
            if tally is None:
                return None
            counts = ", ".join(f"{p.name}: {len(tally.voters_for(p))}" for p in tally.players)
            return f"Votes: {counts}"
        case ChatAppend(message=message):
            return f"[bold]{message.author.name}[/bold]: {message.message}"
        case GameEnded(game=over):
            result = "won" if session.won else "lost"
            return f"Game over, the fake artist was [bold]{over.fake_artist.name}[/bold]. You {result}."
        case DrawEcho():
            return None
    return None


async def _watch(code: str, output: Path | None, width: int, height: int, config: SessionConfig) -> int:
    done = asyncio.Event()
    status = 0
    session: GameSession

    def on_event(event: InboundEvent) -> None:
        line = describe_event(session, event)
        if line:
            console.print(line)

    def on_desync(exc: ProtocolDesyncError) -> None:
        nonlocal status
        console.print(f"[red]Lost sync with the server:[/red] {exc}")
        status = 1
        done.set()

    def on_redirect(next_code: str) -> None:
        console.print(f"Play again: [green]{next_code}[/green]")
        done.set()

    session = GameSession(
        code,
        config=config,
        on_event=on_event,
        on_desync=on_desync,
        on_tick=lambda left: console.print(f"Next game in {left}...", style="dim"),
        on_redirect=on_redirect,
    )
    async with session:
        session.resize(width, height)
        try:
            await done.wait()
        finally:
            png = session.surface.to_png()
            if output is not None and png is not None:
                output.write_bytes(png)
                console.print(f"Drawing saved to {output}")
            if isinstance(session.game, GameOver) and not session.curves:
                console.print("No strokes were drawn", style="dim")
    return status


@click.group(name="fakeartist", help="A Fake Artist goes to New York session client.")
def cli() -> None:
    """A Fake Artist goes to New York session client."""


@cli.command(name="new", help="Print a code for a brand new session.")
def new_command() -> None:
    """Print a code for a brand new session."""
    console.print(new_session_code())


@cli.command(name="next", help="Print the 'play again' code for a session.")
@click.argument("code")
def next_command(code: str) -> None:
    """Print the 'play again' code for a session."""
    try:
        console.print(next_session_code(code))
    except FakeArtistError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command(name="decode", help="Print the session UUID behind a code.")
@click.argument("code")
def decode_command(code: str) -> None:
    """Print the session UUID behind a code."""
    try:
        console.print(str(decode_session_code(code)))
    except FakeArtistError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command(name="watch", help="Join a session headless and print what happens.")
@click.argument("code")
@click.option("--server", "-s", default=None, help="Game server URL (default: FAKEARTIST_SERVER_URL)")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Save the drawing as PNG")
@click.option("--width", default=1280, show_default=True, help="Surface width in pixels")
@click.option("--height", default=720, show_default=True, help="Surface height in pixels")
@click.option("--debug", is_flag=True, default=False, help="Enable debug logging")
def watch_command(code: str, server: str | None, output: Path | None, width: int, height: int, debug: bool) -> None:
    """Join a session headless and print what happens."""
    config = SessionConfig.from_env()
    if server:
        config.server_url = server
    configure_logging(debug=debug or config.debug, json_logs=config.json_logs)
    try:
        status = asyncio.run(_watch(code, output, width, height, config))
    except FakeArtistError as exc:
        raise click.ClickException(str(exc)) from exc
    except KeyboardInterrupt:
        status = 130
    raise SystemExit(status)
