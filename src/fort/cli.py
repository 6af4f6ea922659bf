"""Command-line interface for fort."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from fort.errors import LexError
from fort.source import DEFAULT_PROMPT


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None
    interactive: bool
    prompt: str
    strict: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="fort",
        description="Tokenize FORTRAN 66 source, one token per output line",
    )
    p.add_argument("input", nargs="?", help="Input source file (default: stdin)")
    p.add_argument(
        "--interactive",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Prompt after each line (default: when stdin is a terminal)",
    )
    p.add_argument("--prompt", default=None, metavar="TEXT", help="Prompt text (default: '>>> ')")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover fort.toml)",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Report the first error with source context and exit 1",
    )
    p.add_argument("--debug", action="store_true", help="Dump symbol tables to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "fort.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace, stdin_isatty: bool = False) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input) if args.input and args.input != "-" else None
    if input_file is not None:
        input_dir = input_file.parent
        if not input_dir.parts:
            input_dir = Path(".")
    else:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    interactive = stdin_isatty and input_file is None
    prompt = DEFAULT_PROMPT
    cfg_repl = config.get("repl")
    if isinstance(cfg_repl, dict):
        cfg_interactive = cfg_repl.get("interactive")
        if isinstance(cfg_interactive, bool):
            interactive = cfg_interactive
        cfg_prompt = cfg_repl.get("prompt")
        if isinstance(cfg_prompt, str):
            prompt = cfg_prompt
    if args.interactive is not None:
        interactive = args.interactive
    if args.prompt is not None:
        prompt = args.prompt

    return CliOptions(
        input_file=input_file,
        interactive=interactive,
        prompt=prompt,
        strict=args.strict,
        debug=args.debug,
    )


def run(options: CliOptions, stdin: TextIO, stdout: TextIO, stderr: TextIO) -> int:
    """Tokenize one stream, writing a line per token. Returns the exit code."""
    from fort.debug import dump_symbols, format_token
    from fort.lexer import Lexer
    from fort.parser import Parser
    from fort.source import CharSource
    from fort.tokens import TokenType

    filename = str(options.input_file) if options.input_file else "<stdin>"
    stream = stdin
    if options.input_file is not None:
        stream = open(options.input_file, encoding="utf-8", errors="replace")

    try:
        output = stdout if options.interactive else None
        parser = Parser(Lexer(CharSource(stream, output=output, prompt=options.prompt)))
        for tok in parser:
            stdout.write(format_token(tok) + "\n")
            if tok.type is TokenType.ERROR and options.strict:
                err = LexError.from_token(tok, parser.lexer.line_text)
                print(err.format(filename), file=stderr)
                return 1
    finally:
        if stream is not stdin:
            stream.close()

    if options.debug:
        dump_symbols(parser, file=stderr)
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args, stdin_isatty=sys.stdin.isatty())
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config: {exc}", file=sys.stderr)
        return 2

    try:
        return run(options, sys.stdin, sys.stdout, sys.stderr)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
