from __future__ import annotations

import importlib
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from implregistry.adapters.fragments import parse_fragment, render_fragment
from implregistry.core.records import ImplementorRecord
from implregistry.ui.cli import app, main
from implregistry.ui.cli.diagnostics import CliEmitter
from implregistry.ui.cli.state import CLIState, set_cli_state


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    root = tmp_path / "implementors"
    target = root / "core" / "default" / "trait.Default.js"
    target.parent.mkdir(parents=True)
    target.write_text(
        render_fragment(
            {
                "app": [
                    ImplementorRecord(
                        text='impl <a class="trait">Default</a> for <a>Settings</a>',
                        types=("app::Settings",),
                    ),
                    ImplementorRecord(
                        text="impl Default for Hidden",
                        types=("app::Hidden",),
                    ),
                ],
                "app_core": [
                    ImplementorRecord(
                        text="impl Default for Token", synthetic=True, types=("app_core::Token",)
                    )
                ],
            }
        ),
        encoding="utf-8",
    )
    other = root / "core" / "clone" / "trait.Clone.js"
    other.parent.mkdir(parents=True)
    other.write_text(render_fragment({"app": []}), encoding="utf-8")
    return root


def test_list_command_prints_traits(tree: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["list", "--root", str(tree)])

    assert result.exit_code == 0, result.output
    assert "core::default::Default" in result.stdout
    assert "core::clone::Clone" in result.stdout


def test_show_command_groups_by_crate(tree: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["show", "core::default::Default", "--root", str(tree)])

    assert result.exit_code == 0, result.output
    assert "impl Default for Settings" in result.stdout
    assert "impl Default for Token (auto)" in result.stdout
    assert "app_core" in result.stdout


def test_show_command_hides_local_types_and_synthetic(tree: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "show",
            "core::default::Default",
            "--root",
            str(tree),
            "--local-type",
            "app::Hidden",
            "--no-synthetic",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "impl Default for Settings" in result.stdout
    assert "Hidden" not in result.stdout
    assert "Token" not in result.stdout


def test_show_command_reads_view_settings_from_config(tree: Path, tmp_path: Path) -> None:
    config = tmp_path / "implregistry.toml"
    config.write_text('[view]\nlocal_types = ["app::Settings"]\n', encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(
        app, ["show", "core::default::Default", "--root", str(tree), "--config", str(config)]
    )

    assert result.exit_code == 0, result.output
    assert "Settings" not in result.stdout
    assert "impl Default for Hidden" in result.stdout


def test_show_command_unknown_trait_fails(tree: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["show", "core::fmt::Debug", "--root", str(tree)])

    assert result.exit_code == 1


def test_merge_command_prints_fragment_script(tree: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["merge", "core::default::Default", "--root", str(tree)])

    assert result.exit_code == 0, result.output
    fragment = parse_fragment(result.stdout)
    assert list(fragment.modules) == ["app", "app_core"]
    assert fragment.record_count() == 3


def test_invalid_fragment_reports_error(tree: Path) -> None:
    (tree / "core" / "default" / "trait.Default.js").write_text("garbage", encoding="utf-8")
    runner = CliRunner()

    strict = runner.invoke(app, ["show", "core::default::Default", "--root", str(tree)])
    assert strict.exit_code == 1
    assert "No implementors table" in strict.output

    lenient = runner.invoke(
        app, ["show", "core::default::Default", "--root", str(tree), "--skip-invalid"]
    )
    assert lenient.exit_code == 1
    assert "Skipping invalid fragment" in lenient.output


def test_verbose_flag_is_accepted(tree: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["-vv", "show", "core::clone::Clone", "--root", str(tree)])

    assert result.exit_code == 0, result.output
    assert "Implementors of core::clone::Clone" in result.stdout


@pytest.fixture
def cli_state() -> CLIState:
    return set_cli_state(verbosity=0, debug=False)


def test_show_command_strips_markup_with_angle_brackets_in_attributes(tree: Path) -> None:
    target = tree / "core" / "cmp" / "trait.Ord.js"
    target.parent.mkdir(parents=True)
    target.write_text(
        render_fragment(
            {"app": [ImplementorRecord(text='impl <a class="struct" title="cmp a > b">Foo</a>')]}
        ),
        encoding="utf-8",
    )

    runner = CliRunner()
    result = runner.invoke(app, ["show", "core::cmp::Ord", "--root", str(tree)])

    assert result.exit_code == 0, result.output
    assert "impl Foo" in result.stdout
    assert 'b">' not in result.stdout


def test_show_command_uses_root_from_config(tree: Path, tmp_path: Path) -> None:
    config = tmp_path / "implregistry.toml"
    config.write_text('[loader]\nroot = "implementors"\n', encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(app, ["show", "core::default::Default", "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert "impl Default for Settings" in result.stdout


def test_root_option_overrides_config_root(tree: Path, tmp_path: Path) -> None:
    config = tmp_path / "implregistry.toml"
    config.write_text('[loader]\nroot = "elsewhere"\n', encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(app, ["list", "--config", str(config), "--root", str(tree)])

    assert result.exit_code == 0, result.output
    assert "core::default::Default" in result.stdout


def test_missing_root_without_config_fails(tree: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["show", "core::default::Default"])

    assert result.exit_code == 1
    assert "--root is required" in result.output


def test_error_cause_chain_shown_at_high_verbosity(tmp_path: Path) -> None:
    config = tmp_path / "broken.toml"
    config.write_text("[loader\n", encoding="utf-8")
    runner = CliRunner()

    quiet = runner.invoke(app, ["list", "--config", str(config)])
    assert quiet.exit_code == 1
    assert "Invalid configuration" in quiet.output
    assert "caused by:" not in quiet.output

    verbose = runner.invoke(app, ["-vv", "list", "--config", str(config)])
    assert verbose.exit_code == 1
    assert "type: ConfigError" in verbose.output
    assert "caused by:" in verbose.output


def test_registry_events_echoed_at_high_verbosity(tree: Path) -> None:
    runner = CliRunner()

    quiet = runner.invoke(app, ["show", "core::default::Default", "--root", str(tree)])
    assert quiet.exit_code == 0, quiet.output
    assert "Registered" not in quiet.output

    verbose = runner.invoke(app, ["-vv", "show", "core::default::Default", "--root", str(tree)])
    assert verbose.exit_code == 0, verbose.output
    assert "Registered 2 implementor(s) for 'app'" in verbose.output


def test_cli_emitter_does_not_retain_events(
    cli_state: CLIState, capsys: pytest.CaptureFixture[str]
) -> None:
    emitter = CliEmitter(cli_state)
    for _ in range(3):
        emitter.event("register", {"module": "app", "records": 1})

    assert capsys.readouterr().err == ""
    assert not hasattr(cli_state, "events")
    assert not hasattr(cli_state, "record_event")

    cli_state.verbosity = 2
    emitter.event("register", {"module": "app", "records": 1})
    assert "Registered 1 implementor(s) for 'app'" in capsys.readouterr().err


def test_main_reports_unexpected_errors_with_hint(
    cli_state: CLIState, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def broken() -> None:
        try:
            raise ValueError("inner failure")
        except ValueError as exc:
            raise RuntimeError("outer failure") from exc

    monkeypatch.setattr(importlib.import_module("implregistry.ui.cli.app"), "app", broken)

    with pytest.raises(typer.Exit):
        main()

    err = capsys.readouterr().err
    assert "inner failure" in err
    assert "--debug" in err
