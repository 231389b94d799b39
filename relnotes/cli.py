"""CLI entry point for relnotes."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

import click

from relnotes.patterns import Format

if TYPE_CHECKING:
    from relnotes.parse import Parser

FORMAT_CHOICES = [f.value for f in Format]


# Options shared by every command that reads a local changelog
_SOURCE_OPTIONS = [
    click.option(
        "--project-root",
        type=click.Path(exists=True, file_okay=False, resolve_path=True),
        default=".",
        help="Project root directory (default: cwd).",
    ),
    click.option(
        "--file",
        "changelog_file",
        type=click.Path(exists=True, dir_okay=False, resolve_path=True),
        default=None,
        help="Changelog file (default: config 'changelog', else auto-discovered).",
    ),
    click.option(
        "--format",
        "fmt",
        type=click.Choice(FORMAT_CHOICES),
        default=None,
        help="Header format (default: config 'format', else auto).",
    ),
    click.option(
        "--pattern",
        default=None,
        help="Custom header regex: group 1 = version, group 2 = YYYY-MM-DD date.",
    ),
]


def _source_options(func: Callable[..., Any]) -> Callable[..., Any]:
    for option in reversed(_SOURCE_OPTIONS):
        func = option(func)
    return func


def _load_parser(
    project_root: str,
    changelog_file: str | None,
    fmt: str | None,
    pattern: str | None,
) -> Parser:
    """Resolve the changelog file and options, then parse it."""
    from relnotes.config import ConfigError, load_config, resolve_changelog_path
    from relnotes.files import find_changelog, parse_file

    root = Path(project_root)
    try:
        config = load_config(root)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if changelog_file:
        path: Path | None = Path(changelog_file)
    else:
        path = resolve_changelog_path(config, root)
        if path is None:
            discovery = config["discovery"]
            path = find_changelog(
                root,
                filenames=discovery["filenames"],
                extensions=discovery["extensions"],
                min_bytes=discovery["min_bytes"],
                max_bytes=discovery["max_bytes"],
            )
    if path is None:
        raise click.ClickException(f"No changelog found in {root}")

    if pattern is None and fmt is None:
        pattern = config["pattern"]
    try:
        return parse_file(path, fmt=fmt or config["format"], pattern=pattern)
    except OSError as exc:
        raise click.ClickException(f"Cannot read {path}: {exc}") from exc
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """relnotes: parse and slice changelogs by version."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


@cli.command()
@_source_options
@click.option("--dates", is_flag=True, help="Show release dates next to versions.")
def versions(
    project_root: str,
    changelog_file: str | None,
    fmt: str | None,
    pattern: str | None,
    dates: bool,
) -> None:
    """List versions in document order."""
    parser = _load_parser(project_root, changelog_file, fmt, pattern)
    for record in parser.records():
        if dates:
            when = record.entry.date.isoformat() if record.entry.date else "-"
            click.echo(f"{record.version}\t{when}")
        else:
            click.echo(record.version)


@cli.command()
@_source_options
@click.argument("version")
def show(
    project_root: str,
    changelog_file: str | None,
    fmt: str | None,
    pattern: str | None,
    version: str,
) -> None:
    """Print the notes for VERSION."""
    parser = _load_parser(project_root, changelog_file, fmt, pattern)
    entry = parser.entry(version)
    if entry is None:
        click.echo(f"Version {version} not found", err=True)
        raise SystemExit(1)
    click.echo(entry.content)


@cli.command()
@_source_options
@click.argument("version")
def line(
    project_root: str,
    changelog_file: str | None,
    fmt: str | None,
    pattern: str | None,
    version: str,
) -> None:
    """Print the 0-based line number of the VERSION header."""
    parser = _load_parser(project_root, changelog_file, fmt, pattern)
    lineno = parser.line_for_version(version)
    if lineno < 0:
        click.echo(f"Version {version} not found", err=True)
        raise SystemExit(1)
    click.echo(str(lineno))


@cli.command()
@_source_options
@click.option("--from", "old_version", default="", help="Older version (exclusive).")
@click.option("--to", "new_version", default="", help="Newer version (inclusive).")
def between(
    project_root: str,
    changelog_file: str | None,
    fmt: str | None,
    pattern: str | None,
    old_version: str,
    new_version: str,
) -> None:
    """Print the changelog text between two versions."""
    parser = _load_parser(project_root, changelog_file, fmt, pattern)
    text = parser.between(old_version, new_version)
    if text is None:
        click.echo("No matching version range found", err=True)
        raise SystemExit(1)
    click.echo(text)


@cli.command()
@click.option(
    "--project-root",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    default=".",
    help="Project root directory (default: cwd).",
)
def find(project_root: str) -> None:
    """Print the path of the project's changelog."""
    from relnotes.config import ConfigError, load_config
    from relnotes.files import find_changelog

    root = Path(project_root)
    try:
        config = load_config(root)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    discovery = config["discovery"]
    path = find_changelog(
        root,
        filenames=discovery["filenames"],
        extensions=discovery["extensions"],
        min_bytes=discovery["min_bytes"],
        max_bytes=discovery["max_bytes"],
    )
    if path is None:
        click.echo(f"No changelog found in {root}", err=True)
        raise SystemExit(1)
    click.echo(str(path))


@cli.command()
@click.argument("repo_url")
@click.argument("filename", default="CHANGELOG.md")
@click.option("--ref", default=None, help="Branch, tag or commit (default: config, else HEAD).")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Request timeout in seconds.",
)
@click.option(
    "--project-root",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    default=".",
    help="Project root directory for config lookup (default: cwd).",
)
def fetch(
    repo_url: str,
    filename: str,
    ref: str | None,
    timeout: float | None,
    project_root: str,
) -> None:
    """Fetch FILENAME from a GitHub/GitLab repository and list its versions."""
    from relnotes.config import ConfigError, load_config
    from relnotes.fetch import FetchError, RepositoryURLError, fetch_and_parse

    try:
        config = load_config(Path(project_root))
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    try:
        parser = fetch_and_parse(
            repo_url,
            filename,
            ref=ref or config["fetch"]["ref"],
            timeout=timeout if timeout is not None else config["fetch"]["timeout"],
        )
    except (RepositoryURLError, FetchError) as exc:
        raise click.ClickException(str(exc)) from exc

    for version in parser.versions():
        click.echo(version)
