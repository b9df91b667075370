#!/usr/bin/env python3

import click

from regcheck.commands.pr import pr_cmd
from regcheck.commands.releases import releases_cmd
from regcheck.commands.schema import schema_cmd
from regcheck.commands.scan import scan_cmd
from regcheck.commands.changes import changes_cmd
from regcheck.commands.config import config_cmd


@click.group()
@click.version_option(package_name='regcheck')
def cli():
    """regcheck - Validation pipeline for plugin and theme registry changes.

    Checks a pull request against plugins.json / themes.json: one registry
    per change, well-formed registry files, clean plugin sources, and
    GitHub releases that actually ship what the registry promises.
    """
    pass


# Pipeline
cli.add_command(pr_cmd)

# Individual stages
cli.add_command(schema_cmd)
cli.add_command(changes_cmd)
cli.add_command(scan_cmd)
cli.add_command(releases_cmd)

cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
