"""
Common CLI utilities and decorators for consistent command behavior.
"""

import sys
from functools import wraps
from typing import Any, Dict, Optional

import click
from rich.console import Console

from .exit_codes import CommandError, get_exit_code_for_exception
from .infra import GitHubClient, StaticReleaseFeed
from .output import emit_error
from .services import ComparatorService

err_console = Console(stderr=True)


def handle_command_errors(func):
    """
    Decorator giving commands consistent error handling.

    CommandErrors become their exit code, reported as a JSON object on
    stderr when the command was asked for ``--json`` output and as a red
    message otherwise.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt as e:
            err_console.print("[red]Interrupted by user[/red]")
            sys.exit(get_exit_code_for_exception(e))
        except click.ClickException:
            raise
        except CommandError as e:
            if kwargs.get('output_json'):
                context: Dict[str, Any] = {'exit_code': e.exit_code}
                if getattr(e, 'tag', None) is not None:
                    context['tag'] = e.tag
                emit_error(str(e), type=type(e).__name__, context=context)
            else:
                err_console.print(f"[red]Error:[/red] {e}")
            sys.exit(get_exit_code_for_exception(e))
    return wrapper


def build_service(config: Dict[str, Any], fixture: Optional[str] = None) -> ComparatorService:
    """ComparatorService over a fixture file, or over GitHub when none is given."""
    if fixture:
        try:
            feed = StaticReleaseFeed.from_file(fixture)
        except (OSError, ValueError) as e:
            raise click.BadParameter(str(e), param_hint='--fixture')
    else:
        feed = GitHubClient.from_config(config)
    return ComparatorService(feed, config=config)
