#!/usr/bin/env python3

import click

from rangelog.commands.compare import compare_handler
from rangelog.commands.releases import releases_handler
from rangelog.commands.config import config_cmd


@click.group()
@click.version_option(package_name='rangelog')
def cli():
    """rangelog - Combined changelogs across a range of GitHub releases.

    Pick a repository and two release tags; rangelog fetches just the
    releases in between and merges their notes by category.
    """
    pass


cli.add_command(compare_handler, name='compare')
cli.add_command(releases_handler, name='releases')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
