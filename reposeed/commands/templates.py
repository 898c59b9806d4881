"""
Handles the 'templates' command: list the built-in templates.
"""

import click
import json

from rich.console import Console
from rich.table import Table

from ..catalog import builtin_table
from ..cli_utils import add_common_options
from ..services import TemplateResolver


@click.command('templates')
@add_common_options('json')
def templates_handler(output_json: bool):
    """List the templates 'reposeed new' accepts."""
    table = builtin_table()
    identifiers = TemplateResolver(table).identifiers()

    if output_json:
        for identifier in identifiers:
            record = {'template': identifier}
            record.update(table[identifier].to_dict())
            print(json.dumps(record), flush=True)
        return

    view = Table(title="Templates", show_header=True)
    view.add_column("Template", style="cyan")
    view.add_column("Repository")
    view.add_column("Branch", style="green")
    view.add_column("Subdirectory", style="green")

    for identifier in identifiers:
        entry = table[identifier]
        view.add_row(identifier, entry.location, entry.branch or "-", entry.subdirectory or "-")

    Console().print(view)
