import json

import click

from ..cli_utils import handle_command_errors
from ..config import get_config_path, get_default_config, load_config, save_config
from ..exit_codes import ConfigError


@click.group("config")
def config_cmd():
    """Inspect or create the rangelog config file."""


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Indent the JSON")
@click.option("--path", is_flag=True, help="Print only which config file is read")
def show_config(pretty, path):
    """Print the effective configuration.

    Defaults, the config file and RANGELOG_* variables are merged first,
    so this is exactly what compare and releases will use.
    """
    if path:
        click.echo(json.dumps({"config_path": str(get_config_path())}))
        return

    click.echo(json.dumps(load_config(), indent=2 if pretty else None, ensure_ascii=False))


@config_cmd.command("init")
@click.option("--format", "file_format", type=click.Choice(["json", "toml", "yaml"]),
              default="json", show_default=True, help="Config file format")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@handle_command_errors
def init_config(file_format, force):
    """Write the default configuration to ~/.rangelog/."""
    existing = get_config_path()
    if existing.exists() and not force:
        click.echo(f"Configuration already exists at {existing} (use --force to overwrite)")
        return

    config_path = existing.with_suffix(f".{file_format}")
    saved = save_config(get_default_config(), config_path)
    if saved is None:
        raise ConfigError(f"Could not write {config_path}")
    click.echo(f"Configuration written to {saved}")
