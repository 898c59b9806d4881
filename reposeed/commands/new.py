"""
Handles the 'new' command: scaffold a project from a template repository.
"""

import click
import os
from typing import Optional

from rich.console import Console

from ..catalog import builtin_table
from ..cli_utils import add_common_options, handle_command_errors
from ..config import load_config, apply_logging_config
from ..infra import GitClient
from ..progress import NullProgressSink, ProgressReporter, TransferProgressRenderer
from ..services import ScaffoldService, TemplateResolver, WorkspaceAllocator


def validate_project_name(ctx, param, value: Optional[str]) -> Optional[str]:
    """Accept a single relative path segment as the project directory name."""
    if value is None:
        return value
    separators = {os.sep, '/'} | ({os.altsep} if os.altsep else set())
    if not value.strip() or value in ('.', '..') or any(sep in value for sep in separators):
        raise click.BadParameter(f"'{value}' must be a single directory name")
    return value


@click.command('new')
@click.argument('template')
@click.argument('name', required=False, callback=validate_project_name)
@add_common_options('quiet', 'debug')
@handle_command_errors
def new_handler(template: str, name: Optional[str], quiet: bool, debug: bool,
                progress: ProgressReporter):
    """
    Create a new project from TEMPLATE in the current directory.

    NAME is the directory to create; it defaults to the template
    repository's name. Run 'reposeed templates' to list templates.

    Examples:

        reposeed new phat-contract

        reposeed new phat-contract my-contract
    """
    config = load_config()
    apply_logging_config(config, debug=debug)
    general = config.get('general', {})

    show_progress = bool(general.get('progress', True)) and not quiet
    renderer = TransferProgressRenderer() if show_progress else None

    def report(message: str):
        if renderer:
            renderer.end_line()
        progress(message)

    service = ScaffoldService(
        resolver=TemplateResolver(builtin_table()),
        allocator=WorkspaceAllocator(general.get('staging_root') or None),
        fetcher=GitClient(),
        sink=renderer or NullProgressSink(),
        report=report,
    )
    result = service.run(template, name)

    if renderer:
        renderer.end_line()
    if not result.success:
        raise result.error

    if not quiet:
        Console(stderr=True).print(
            f"[bold green]✓[/bold green] Created [bold]{result.destination}[/bold]"
        )
