"""CLI entry point using Click."""

from __future__ import annotations

import logging
import os
import re
import sys
from pathlib import Path

import click

from . import __version__
from .config import HopConfig, parse_threshold
from .errors import HopError
from .ranking import Selector, choose, rank
from .scanner import Candidate
from .search import find_candidates, jump
from .selector import MenuSelector, default_selector, format_label
from .shell import SHELLS, emit_script, generate_init_script, script_cd
from .ui import UI

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

KEY_MAP = {
    "UP": "\033[A",
    "DOWN": "\033[B",
    "ENTER": "\r",
    "ESC": "\033",
    "BACKSPACE": "\x7f",
    "CTRL-N": "\x0e",
    "CTRL-P": "\x10",
    "CTRL-U": "\x15",
}


def _configure_logging(verbose: bool) -> None:
    """Set up logging for the CLI session; stdout stays reserved for scripts."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def parse_test_keys(spec: str | None) -> list[str] | None:
    """Parse a comma-separated key script such as ``DOWN,TYPE=src,ENTER``."""
    if not spec:
        return None

    keys: list[str] = []
    for tok in re.split(r",\s*", spec):
        up = tok.upper()
        if up in KEY_MAP:
            keys.append(KEY_MAP[up])
        elif up.startswith("TYPE="):
            keys.extend(tok[5:])
        elif len(tok) == 1:
            keys.append(tok)
    return keys


def print_candidates(candidates: list[Candidate], explain: bool) -> None:
    """List ranked candidates on stderr."""
    if not candidates:
        click.echo("No matches.", err=True)
        return
    for candidate in candidates:
        click.echo(format_label(candidate), err=True)
        if explain:
            for reason, amount in candidate.reasons:
                click.echo(f"    {amount:+7.1f}  {reason}", err=True)


def make_selector(and_keys: list[str] | None) -> Selector:
    if and_keys is not None:
        return MenuSelector(test_keys=and_keys, test_no_cls=True)
    return default_selector()


def cmd_jump(
    args: list[str],
    config: HopConfig,
    list_only: bool,
    explain: bool,
    and_keys: list[str] | None,
) -> list[str] | None:
    """Handle the default command: resolve a pattern to a cd script."""
    pattern = " ".join(args).strip()
    cwd = Path.cwd()

    if not (list_only or explain):
        return script_cd(jump(pattern, config, make_selector(and_keys), cwd))

    ranked = rank(find_candidates(pattern, config, cwd), config, cwd)
    print_candidates(ranked, explain)
    if list_only:
        return None
    return script_cd(choose(ranked, config, make_selector(and_keys), pattern))


def build_config(threshold: str | None, show_all: bool, always_first: bool) -> HopConfig:
    """Merge command-line options over HOP_* environment settings."""
    env = HopConfig.from_env()
    return HopConfig(
        threshold=env.threshold if threshold is None else parse_threshold(threshold),
        show_all=show_all or env.show_all,
        always_first=always_first or env.always_first,
    )


HELP_TEXT = f"""{{h1}}hop{{reset}} v{__version__} - jump to directories by fuzzy path

To use hop, add to your shell config:

  {{dim}}# bash/zsh (~/.bashrc or ~/.zshrc){{/fg}}
  {{b}}eval "$(hop init)"{{/b}}

  {{dim}}# fish (~/.config/fish/config.fish){{/fg}}
  {{b}}hop init fish | source{{/b}}

{{h2}}Usage:{{reset}}
  hop [options] PATTERN   Jump to the best directory matching PATTERN
  hop init [SHELL]        Output shell function definition (bash, zsh, fish)
  hop exec PATTERN        Output shell script to eval (manual mode)

{{h2}}Options:{{reset}}
  -a, --all               Keep every match (no pruning, threshold 0)
  -f, --first             Never ask, take the top-ranked match
  --threshold N           Minimum score for nested segment matches
  --list                  Print ranked matches instead of jumping
  --explain               Print matches with their score breakdown
  -v, --verbose           Debug logging on stderr
  --no-colors             Disable ANSI colors

{{h2}}Examples:{{reset}}
  hop web/src             Nearest "web*" directory, then "src" below it
  hop -f proj             First match for "proj", no picker
  hop --explain cfg       Show how matches for "cfg" were scored

{{h2}}Environment:{{reset}}
  HOP_THRESHOLD, HOP_SHOW_ALL, HOP_ALWAYS_FIRST, HOP_SELECTOR (fzf|menu)
  Ignore rules: .hopignore, .ignore, .gitignore, ~/.config/hop/ignore
"""


def print_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print version in expected format."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"hop {__version__}")
    ctx.exit()


def print_help_flag(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print help for -h flag."""
    if not value or ctx.resilient_parsing:
        return
    if sys.stdout.isatty():
        out = UI.expand_tokens(HELP_TEXT)
    else:
        out = UI.strip_tokens(HELP_TEXT)
    click.echo(out, nl=False)
    ctx.exit(0)


@click.command(context_settings={"ignore_unknown_options": True, "allow_extra_args": True})
@click.option("--threshold", default=None, help="Minimum nested score")
@click.option("-a", "--all", "show_all", is_flag=True, help="Keep all matches")
@click.option("-f", "--first", "always_first", is_flag=True, help="Take top match")
@click.option("--list", "list_only", is_flag=True, help="Print ranked matches")
@click.option("--explain", is_flag=True, help="Print score breakdown")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("--no-colors", is_flag=True, help="Disable ANSI colors")
@click.option("--and-keys", default=None, hidden=True)
@click.option(
    "--version", is_flag=True, callback=print_version, expose_value=False, is_eager=True
)
@click.option(
    "-h",
    "--help",
    "show_help",
    is_flag=True,
    callback=print_help_flag,
    expose_value=False,
    is_eager=True,
)
@click.pass_context
def main(
    ctx: click.Context,
    threshold: str | None,
    show_all: bool,
    always_first: bool,
    list_only: bool,
    explain: bool,
    verbose: bool,
    no_colors: bool,
    and_keys: str | None,
) -> None:
    """hop - jump to directories by fuzzy path"""
    _configure_logging(verbose)

    if no_colors or os.environ.get("NO_COLOR"):
        UI.disable_colors()

    args = list(ctx.args)

    if args and args[0] == "init":
        shell = args[1] if len(args) > 1 else None
        if shell is not None and shell not in SHELLS:
            click.echo(f"Error: unsupported shell '{shell}' (choose {', '.join(SHELLS)})", err=True)
            sys.exit(1)
        click.echo(generate_init_script(shell), nl=False)
        sys.exit(0)

    if args and args[0] == "exec":
        args = args[1:]

    try:
        config = build_config(threshold, show_all, always_first)
        script = cmd_jump(args, config, list_only, explain, parse_test_keys(and_keys))
    except HopError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if script:
        emit_script(script)
    sys.exit(0)


if __name__ == "__main__":
    main()
