#!/usr/bin/env python3

import click

from reposeed.commands.new import new_handler
from reposeed.commands.templates import templates_handler


@click.group()
@click.version_option(package_name='reposeed')
def cli():
    """reposeed - Scaffold new projects from template repositories.

    Clones a known template repository, extracts the relevant tree and
    leaves it in the current directory as a fresh project without git
    history.
    """
    pass


cli.add_command(new_handler, name='new')
cli.add_command(templates_handler, name='templates')


def main():
    cli()

if __name__ == "__main__":
    main()
