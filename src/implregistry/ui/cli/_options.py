"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
OUTPUT_PANEL = "Output"

RootOption = Annotated[
    Path | None,
    typer.Option(
        "--root",
        "-r",
        help="Directory holding the generated implementors tree (defaults to [loader].root).",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

TraitArgument = Annotated[
    str,
    typer.Argument(
        metavar="TRAIT",
        help="Trait path such as 'core::default::Default'.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="TOML configuration file with [loader] and [view] tables.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

SkipInvalidOption = Annotated[
    bool,
    typer.Option(
        "--skip-invalid",
        help="Warn about malformed fragments instead of failing.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

LocalTypeOption = Annotated[
    list[str] | None,
    typer.Option(
        "--local-type",
        "-l",
        help="Type already documented on the page; its implementors are hidden.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

NoSyntheticOption = Annotated[
    bool,
    typer.Option(
        "--no-synthetic",
        help="Hide auto-trait (synthetic) implementors.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]
