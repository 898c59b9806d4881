"""
Common CLI utilities and decorators for consistent command behavior.
"""

import sys
import click
from functools import wraps
from .progress import ProgressReporter
from .exit_codes import (
    INTERRUPTED,
    ScaffoldError
)


def handle_command_errors(func):
    """
    Decorator that provides standard error handling:
    - Injects a ProgressReporter as ``progress`` (disabled by --quiet)
    - ScaffoldError: filesystem failures print their diagnostic, others
      print only the error kind
    - KeyboardInterrupt: exit 130
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        quiet = kwargs.get('quiet', False)
        debug = kwargs.get('debug', False)
        progress = ProgressReporter(enabled=not quiet)
        kwargs['progress'] = progress

        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            progress.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except ScaffoldError as e:
            if e.filesystem or debug:
                progress.error(f"{e.kind}: {e}")
            else:
                progress.error(e.kind)
            sys.exit(e.exit_code)

    return wrapper


# Standard options that commands share
common_options = {
    'quiet': click.option('-q', '--quiet', is_flag=True,
                          help='Suppress progress and status output'),
    'debug': click.option('--debug', is_flag=True,
                          help='Enable debug logging'),
    'json': click.option('--json', 'output_json', is_flag=True,
                         help='Output as JSONL'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('quiet', 'debug')
        def my_command(quiet, debug):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
