"""Command-line entry point: parse a JSON file and describe the tree."""

import logging
from pathlib import Path
from typing import Optional

import typer

from jvariant import DEFAULT_MAX_DEPTH
from jvariant import DuplicateKeyPolicy
from jvariant import ParseConfig
from jvariant import describe
from jvariant import parse

app = typer.Typer(add_completion=False)


def _read_input(path: Optional[Path]) -> str:
    if path is None or str(path) == "-":
        return typer.get_text_stream("stdin").read()
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise typer.BadParameter(f"cannot read {path}: {exc}") from exc


@app.command()
def show(
    path: Optional[Path] = typer.Argument(
        None, help="JSON file to parse; stdin when omitted or '-'."
    ),
    strict: bool = typer.Option(
        False, "--strict/--lenient", help="Apply plain JSON grammar rules."
    ),
    max_depth: int = typer.Option(
        DEFAULT_MAX_DEPTH, "--max-depth", min=1, help="Nesting limit."
    ),
    duplicate_keys: DuplicateKeyPolicy = typer.Option(
        DuplicateKeyPolicy.FIRST_WINS,
        "--duplicate-keys",
        help="Which occurrence of a repeated object key is kept.",
    ),
    show_repr: bool = typer.Option(
        False, "--repr", help="Print the whole tree instead of a description."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    text = _read_input(path)
    config = ParseConfig(
        strict=strict, max_depth=max_depth, duplicate_keys=duplicate_keys
    )
    result = parse(text, config)
    if result.error is not None:
        typer.echo(f"error: {result.error}", err=True)
        root = result.error.root_cause
        if root is not result.error:
            typer.echo(f"caused by: {root}", err=True)
        raise typer.Exit(code=1)

    value, consumed = result
    lines = [repr(value)] if show_repr else describe(value)
    for line in lines:
        typer.echo(line)
    typer.echo(f"consumed {consumed} of {len(text)} characters")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
