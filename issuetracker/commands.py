import pathlib
import sys

import click

from . import config, controls, utils
from .api.github import GitHubClient
from .config import defaults
from .models import AppState, MenuItems
from .ui import terminal_session


@click.command()
@click.option(
    "--token",
    "-t",
    envvar="GITHUB_TOKEN",
    help="GitHub access token (stored in the config file)",
)
@click.option(
    "--user-name",
    "-u",
    envvar="GITHUB_USER",
    help="GitHub user name sent as User-Agent (stored in the config file)",
)
@click.option(
    "--file-path",
    "-f",
    is_flag=True,
    help="Print the path of the configuration file and exit",
)
@click.option(
    "-c",
    "--config-file",
    default=defaults.CONFIG_FILE,
    type=click.Path(dir_okay=False, path_type=pathlib.Path),
    help="Config file to use",
)
@click.option("--insecure", is_flag=True, help="Disable SSL verification for requests")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, token, user_name, file_path, config_file, insecure, verbose):
    """Browse the GitHub issues assigned to you"""
    if file_path:
        click.echo(str(config_file), err=True)
        ctx.exit(1)

    flag_config = {
        "github_access_token": token,
        "user_name": user_name,
        "insecure": insecure,
        "verbose": verbose,
    }
    wconfig = config.make_config(flag_config, pathlib.Path(config_file))
    utils.log(
        f"Using config file: {config_file}",
        verbose_only=True,
        verbose=verbose,
        file=sys.stderr,
    )

    # Invalid key bindings must fail before anything is fetched
    menu = MenuItems(wconfig.get("keys"))
    issues = GitHubClient(wconfig).fetch_issues()

    with terminal_session() as terminal:
        controls.run_app(terminal, AppState(issues), menu)
