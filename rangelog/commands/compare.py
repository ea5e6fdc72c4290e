"""
Compare command for rangelog.

Shows one combined changelog for every release between two tags.
"""

import json
from typing import Optional

import click

from ..cli_utils import build_service, handle_command_errors
from ..config import configure_logging, load_config
from ..domain import LATEST_TAG, RepositoryRef, VersionRange
from ..query import parse_comparator_query
from ..render import document_to_markdown, render_changelog


@click.command('compare')
@click.argument('repository', required=False)
@click.option('--from', '-f', 'from_tag', help='Changes since this release (excluded)')
@click.option('--to', '-t', 'to_tag', default=None,
              help='Changes up to this release, included (default: latest)')
@click.option('--query', '-q', 'query',
              help='Comparator URL or query string (repo=owner/name&from=..&to=..)')
@click.option('--fixture', type=click.Path(exists=True, dir_okay=False),
              help='Read releases from a JSON/YAML file instead of GitHub')
@click.option('--max-pages', type=click.IntRange(min=1),
              help='Stop after this many release pages')
@click.option('--page-size', type=click.IntRange(1, 100), help='Releases per page')
@click.option('--json', 'output_json', is_flag=True, help='Output as JSON')
@click.option('--markdown', 'output_markdown', is_flag=True, help='Output as markdown')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging')
@handle_command_errors
def compare_handler(
    repository: Optional[str],
    from_tag: Optional[str],
    to_tag: Optional[str],
    query: Optional[str],
    fixture: Optional[str],
    max_pages: Optional[int],
    page_size: Optional[int],
    output_json: bool,
    output_markdown: bool,
    verbose: bool,
):
    """
    Show the combined changelog between two releases.

    Entries from every release after --from up to and including --to are
    grouped by category (breaking changes, features, bug fixes, ...).

    \b
    Examples:
        rangelog compare testing-library/dom-testing-library --from v6.16.0 --to v8.1.0
        rangelog compare renovatebot/renovate --from 26.9.0
        rangelog compare --query 'repo=renovatebot%2Frenovate&from=26.9.0&to=latest'
        rangelog compare owner/name --from v1.0.0 --fixture releases.json --json
    """
    config = load_config()
    configure_logging(config, verbose)

    if max_pages:
        config['releases']['max_pages'] = max_pages
    if page_size:
        config['releases']['page_size'] = page_size

    repo = RepositoryRef.parse(repository)
    version_range = None
    if query:
        parsed = parse_comparator_query(query)
        repo = parsed.repository if parsed.repository.owner else repo
        version_range = parsed.version_range

    if from_tag:
        to = to_tag or (version_range.to_tag if version_range else LATEST_TAG)
        version_range = VersionRange(from_tag, to)
    elif to_tag and version_range:
        version_range = VersionRange(version_range.from_tag, to_tag)

    if not repo.is_complete:
        raise click.UsageError("A repository is required as OWNER/NAME (or via --query)")
    if version_range is None:
        raise click.UsageError("A --from release is required (see 'rangelog releases')")

    service = build_service(config, fixture)
    result = service.resolve(repo, version_range)

    if output_json:
        print(json.dumps(result.to_dict(), ensure_ascii=False), flush=True)
    elif output_markdown:
        click.echo(document_to_markdown(result), nl=False)
    else:
        render_changelog(result)
