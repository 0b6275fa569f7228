from __future__ import annotations

import chess
import click

from src.learnchess.domain.engine.selection import Difficulty
from src.learnchess.infrastructure.config import load_config
from src.learnchess.infrastructure.rules import HeuristicOpponent

_DIFFICULTIES = [level.value for level in Difficulty]


def _parse_board(fen: str) -> chess.Board:
    try:
        board = chess.Board(fen)
    except ValueError as exc:
        raise click.BadParameter(f"Invalid FEN: {exc}", param_hint="--fen") from exc
    if not board.is_valid():
        raise click.BadParameter("Invalid FEN: not a legal position.", param_hint="--fen")
    return board


fen_option = click.option(
    "--fen",
    default=chess.STARTING_FEN,
    show_default="starting position",
    help="Position to analyse, in FEN.",
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
def cli() -> None:
    """Practice tools around the LearnChess opponent."""


@cli.command()
@fen_option
def evaluate(fen: str) -> None:
    """Print the material balance of a position (positive favours white)."""
    board = _parse_board(fen)
    click.echo(str(HeuristicOpponent().evaluate(board)))


@cli.command()
@fen_option
@click.option(
    "--difficulty",
    type=click.Choice(_DIFFICULTIES),
    default="medium",
    show_default=True,
)
@click.option("--seed", type=int, default=None, help="Seed for repeatable choices.")
def suggest(fen: str, difficulty: str, seed: int | None) -> None:
    """Print the move the computer opponent would play."""
    board = _parse_board(fen)
    if board.is_game_over():
        raise click.ClickException(f"Game is already over: {board.result()}")

    suggestion = HeuristicOpponent(seed=seed).select_move(board, difficulty=difficulty)
    click.echo(f"{suggestion.move.uci()} {board.san(suggestion.move)}")
    click.echo(f"evaluation: {suggestion.evaluation:+.0f}")
    for reason in suggestion.rationale or []:
        click.echo(f"reason: {reason}")


@cli.command()
@fen_option
@click.option("--all", "show_all", is_flag=True, help="List every legal move, not just the first hint.")
def hints(fen: str, show_all: bool) -> None:
    """Explain the legal moves of a position."""
    board = _parse_board(fen)
    entries = HeuristicOpponent().explain_moves(board)
    if not entries:
        click.echo("No legal moves.")
        return
    for hint in entries if show_all else entries[:1]:
        click.echo(f"{board.san(hint.move)}: {hint.reason}")


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", type=int, default=5000, show_default=True)
def serve(host: str, port: int) -> None:
    """Run the HTTP API with Flask's development server."""
    from src.learnchess.interface.http.app import create_app

    app = create_app(load_config())
    app.run(host=host, port=port)


def main() -> None:
    cli()


__all__ = ["cli", "main"]
