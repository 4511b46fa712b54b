"""CLI entry point for the issue-tracker tool."""

import sys

import click

from . import commands, utils


def main():
    verbose = "--verbose" in sys.argv or "-v" in sys.argv

    if "-h" in sys.argv:
        sys.argv.remove("-h")
        sys.argv.append("--help")

    try:
        # pylint: disable=no-value-for-parameter
        exit_code = commands.cli(standalone_mode=False)
    except (KeyboardInterrupt, click.Abort):
        click.secho("Operation cancelled by user", fg="yellow", err=True)
        sys.exit(1)
    except click.UsageError as e:
        e.show()
        sys.exit(e.exit_code)
    except Exception as e:
        click.secho("Error", fg="red", bold=True, err=True, nl=False)
        click.echo(f": {e}", err=True)
        if verbose:
            utils.log("Verbose mode enabled. Full error details:", file=sys.stderr)
            raise e
        sys.exit(1)

    if isinstance(exit_code, int):
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
