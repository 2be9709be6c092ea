"""Command-line interface for Leg."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from leg.errors import InterpError, ParsingError, TokenizationError
from leg.eval import DEFAULT_MAX_STACK_DEPTH
from leg.values import InterpValue

CONFIG_FILENAME = "leg.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    script_file: Path
    max_stack_depth: int
    show_tokens: bool
    debug: bool
    verbose: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="leg",
        description="Leg scripting language interpreter",
    )
    p.add_argument("script", help="Script file to run")
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_FILENAME})",
    )
    p.add_argument(
        "--max-depth",
        type=parse_depth_arg,
        default=None,
        metavar="N",
        help=f"Maximum call stack depth (default: {DEFAULT_MAX_STACK_DEPTH})",
    )
    p.add_argument("--tokens", action="store_true", help="Dump tokens to stderr")
    p.add_argument("--debug", action="store_true", help="Dump AST to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Log evaluator activity")
    return p


def parse_depth_arg(s: str) -> int:
    """Parse a positive integer stack depth."""
    try:
        value = int(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid depth (expected an integer): {s}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"invalid depth (must be positive): {s}")
    return value


def load_config(config_path: Path | None, script_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else script_dir / CONFIG_FILENAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    script_file = Path(args.script)
    script_dir = script_file.parent
    if not script_dir.parts:
        script_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, script_dir)

    max_stack_depth = DEFAULT_MAX_STACK_DEPTH
    cfg_interp = config.get("interpreter")
    if isinstance(cfg_interp, dict):
        cfg_depth = cfg_interp.get("max_stack_depth")
        if cfg_depth is not None:
            if isinstance(cfg_depth, bool) or not isinstance(cfg_depth, int):
                raise argparse.ArgumentTypeError(
                    f"invalid interpreter.max_stack_depth in config: {cfg_depth!r}"
                )
            max_stack_depth = parse_depth_arg(str(cfg_depth))
    if args.max_depth is not None:
        max_stack_depth = args.max_depth

    return CliOptions(
        script_file=script_file,
        max_stack_depth=max_stack_depth,
        show_tokens=args.tokens,
        debug=args.debug,
        verbose=args.verbose,
    )


def run_file(options: CliOptions, source: str) -> InterpValue:
    """Tokenize, parse, and evaluate a script's source."""
    from leg.debug import dump_ast, dump_tokens
    from leg.eval import evaluate
    from leg.lexer import tokenize
    from leg.parser import parse

    tokens = tokenize(source)
    if options.show_tokens:
        dump_tokens(tokens)

    ast = parse(tokens, source)
    if options.debug:
        dump_ast(ast)

    return evaluate(ast, max_stack_depth=options.max_stack_depth)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except (argparse.ArgumentTypeError, tomllib.TOMLDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(name)s: %(message)s")

    try:
        source = options.script_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {options.script_file}: {exc}", file=sys.stderr)
        return 2

    filename = str(options.script_file)
    try:
        run_file(options, source)
    except (TokenizationError, ParsingError) as exc:
        print(exc.format(filename, source), file=sys.stderr)
        return 1
    except InterpError as exc:
        print(exc.format(filename, source), file=sys.stderr)
        return 2

    return 0
