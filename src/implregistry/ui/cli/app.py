"""Typer application wiring for the implregistry CLI."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

from implregistry.core.exceptions import exception_hint

from .commands import list_traits, merge_trait, show_trait
from .state import debug_enabled, emit_error, get_cli_state, set_cli_state


app = typer.Typer(
    help="Inspect and merge generated trait implementors fragments.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)


@app.callback()
def configure(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase diagnostic output (repeatable).",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Show full tracebacks on unexpected errors."),
    ] = False,
) -> None:
    """Configure shared CLI state before running a command."""
    set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)
    if verbose >= 3:
        logging.basicConfig(level=logging.DEBUG)


app.command("list")(list_traits)
app.command("show")(show_trait)
app.command("merge")(merge_trait)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:
        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            summary = "Unexpected error"
            hint = exception_hint(exc)
            if hint:
                summary = f"{summary}: {hint}"
            message = f"{summary.rstrip('.')}. Re-run with --debug for technical details."
            emit_error(message, exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
