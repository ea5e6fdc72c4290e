"""
Releases command for rangelog.

Lists the versions that can be picked as range endpoints.
"""

from typing import Optional

import click

from ..cli_utils import build_service, handle_command_errors
from ..config import configure_logging, load_config
from ..domain import RepositoryRef
from ..output import emit
from ..render import release_option_rows, render_release_table


@click.command('releases')
@click.argument('repository')
@click.option('--pages', type=click.IntRange(min=1),
              help='Release pages to read (default: releases.default_pages)')
@click.option('--fixture', type=click.Path(exists=True, dir_okay=False),
              help='Read releases from a JSON/YAML file instead of GitHub')
@click.option('--json', 'output_json', is_flag=True, help='Output as JSONL')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging')
@handle_command_errors
def releases_handler(
    repository: str,
    pages: Optional[int],
    fixture: Optional[str],
    output_json: bool,
    verbose: bool,
):
    """
    List the releases available as --from and --to choices.

    The newest release is not offered as a --from choice, and --to also
    accepts "latest".

    \b
    Examples:
        rangelog releases testing-library/dom-testing-library
        rangelog releases renovatebot/renovate --pages 3 --json
    """
    config = load_config()
    configure_logging(config, verbose)
    if pages:
        config['releases']['default_pages'] = pages

    repo = RepositoryRef.parse(repository)
    if not repo.is_complete:
        raise click.UsageError("Repository must be given as OWNER/NAME")

    service = build_service(config, fixture)
    from_options, to_options = service.release_options(repo)

    if output_json:
        emit({'end': 'from', **row} for row in release_option_rows(from_options))
        emit({'end': 'to', **row} for row in release_option_rows(to_options))
        return

    render_release_table(to_options, title=f"{repo.full_name}: --to choices")
    if from_options:
        render_release_table(from_options, title=f"{repo.full_name}: --from choices")
