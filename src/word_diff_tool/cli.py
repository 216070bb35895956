"""Command-line interface for word-diff-tool.

Provides commands for reviewing Word tracked changes and for applying and
generating CriticMarkup on markdown files.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from . import __version__
from .criticmarkup import apply_markup_file, diff_markup_files
from .git_diff import format_as_git_diff, format_as_json, format_as_yaml, generate_git_diff
from .processor import convert_document

app = typer.Typer(
    name="word-diff",
    help="Review Word tracked changes and comments as diffs and CriticMarkup.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"word-diff version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Log debug output.")] = False,
) -> None:
    """Review Word tracked changes and comments as diffs and CriticMarkup."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


def _check_docx(file: Path) -> None:
    if not file.exists():
        typer.echo(f"Error: Input file not found: {file}", err=True)
        raise typer.Exit(1)
    if file.suffix.lower() != ".docx":
        typer.echo("Error: Input file must be a .docx file", err=True)
        raise typer.Exit(1)


def _check_exists(file: Path) -> None:
    if not file.exists():
        typer.echo(f"Error: Input file not found: {file}", err=True)
        raise typer.Exit(1)


@app.command("to-markdown")
def to_markdown(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
    highlight: Annotated[
        bool,
        typer.Option("--highlight", help="Treat green/red highlights as insertions/deletions"),
    ] = False,
) -> None:
    """Convert a Word document to markdown with CriticMarkup changes."""
    _check_docx(file)

    try:
        markdown = convert_document(file, use_highlights=highlight)
        output_path = output or file.with_suffix(".md")
        output_path.write_text(markdown, encoding="utf-8")
        typer.echo(f"Markdown saved to {output_path}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("git-diff")
def git_diff(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    as_yaml: Annotated[bool, typer.Option("--yaml", help="Output as YAML")] = False,
) -> None:
    """Show tracked changes and comments as a git-style diff."""
    if as_json and as_yaml:
        typer.echo("Error: Cannot specify both --json and --yaml", err=True)
        raise typer.Exit(1)
    _check_docx(file)

    try:
        diff_output = generate_git_diff(file)
        if as_json:
            result = format_as_json(diff_output)
        elif as_yaml:
            result = format_as_yaml(diff_output)
        else:
            result = format_as_git_diff(diff_output)

        if output:
            output.write_text(result, encoding="utf-8")
            typer.echo(f"Diff saved to {output}")
        else:
            typer.echo(result)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("md-diff")
def md_diff(
    first: Annotated[Path, typer.Argument(help="Original markdown file")],
    second: Annotated[Path, typer.Argument(help="Edited markdown file")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Write the edit between two markdown files as CriticMarkup."""
    _check_exists(first)
    _check_exists(second)

    try:
        output_path = output or Path.cwd() / "diff-result.md"
        diff_markup_files(first, second, output_path)
        typer.echo(f"Diff saved to {output_path}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("md-apply")
def md_apply(
    file: Annotated[Path, typer.Argument(help="Markdown file containing CriticMarkup")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Apply the CriticMarkup in a markdown file."""
    _check_exists(file)

    try:
        output_path = output or file.with_name(f"{file.stem}-clean.md")
        apply_markup_file(file, output_path)
        typer.echo(f"Clean file saved to {output_path}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
