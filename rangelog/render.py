"""
Rendering functions for rangelog output.

This module handles all pretty-printing. Services return data, this module
makes it human-readable: release tables and the combined changelog.
"""

from itertools import groupby
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from .domain import CombinedGroup, Release, get_display_version, is_stable_release
from .markdown import blocks_to_markdown
from .services import ChangelogResult

console = Console()


def _releases_in_group(group: CombinedGroup):
    """Yield (release, markdown) per release, joining that release's entries."""
    for _, entries in groupby(group.entries, key=lambda entry: entry.release.tag):
        entries = list(entries)
        text = '\n\n'.join(blocks_to_markdown(entry.content) for entry in entries)
        yield entries[0].release, text


def document_to_markdown(result: ChangelogResult) -> str:
    """
    Combined changelog as one markdown document.

    Layout:
        # owner/name
        ## Changes from X to Y
        ## <group>
        ### [<version>](<release url>)
        <release content>
    """
    lines = [
        f"# [{result.repository.full_name}]({result.repository.html_url})",
        "",
        f"## {result.heading}",
        "",
    ]

    if result.is_empty:
        lines.append("No changes found in this range.")
        return '\n'.join(lines) + '\n'

    for group in result.document:
        lines.extend([f"## {group.group.capitalize()}", ""])
        for release, text in _releases_in_group(group):
            version = get_display_version(release)
            title = f"[{version}]({release.html_url})" if release.html_url else version
            lines.extend([f"### {title}", "", text, ""])

    return '\n'.join(lines).rstrip('\n') + '\n'


def render_changelog(result: ChangelogResult, target: Optional[Console] = None) -> None:
    """
    Print a combined changelog.

    Args:
        result: Resolution result
        target: Console to print to (module console by default)
    """
    out = target or console
    repo = result.repository

    out.print(f"[bold][link={repo.html_url}]{repo.full_name}[/link][/bold]")
    out.print(f"[bold cyan]{result.heading}[/bold cyan]")
    out.print()

    if result.is_empty:
        out.print("[yellow]No changes found in this range.[/yellow]")
        return

    for group in result.document:
        out.rule(f"[bold magenta]{group.group.capitalize()}[/bold magenta]", align="left")
        for release, text in _releases_in_group(group):
            version = get_display_version(release)
            if release.html_url:
                out.print(f"[bold green][link={release.html_url}]{version}[/link][/bold green]")
            else:
                out.print(f"[bold green]{version}[/bold green]")
            out.print(Markdown(text))
            out.print()

    out.print(f"[dim]rangelog compare --query '{result.share_query}'[/dim]", soft_wrap=True)


def render_release_table(
    releases: Sequence[Release],
    title: Optional[str] = None,
    target: Optional[Console] = None
) -> None:
    """
    Render releases as a table with a stability column.

    Args:
        releases: Releases to show, in order
        title: Optional table title
        target: Console to print to (module console by default)
    """
    out = target or console
    if not releases:
        out.print("[yellow]Releases not found.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Version", style="cyan")
    table.add_column("Name")
    table.add_column("Published", style="dim")
    table.add_column("Stable", style="green")

    for release in releases:
        table.add_row(
            get_display_version(release),
            release.display_name,
            (release.published_at or '')[:10],
            "✅" if is_stable_release(release) else "",
        )

    out.print(table)


def release_option_rows(releases: Sequence[Release]) -> List[dict]:
    """Rows for JSON output of version choices."""
    return [
        {
            'tag': release.tag,
            'label': get_display_version(release),
            'stable': is_stable_release(release),
        }
        for release in releases
    ]
