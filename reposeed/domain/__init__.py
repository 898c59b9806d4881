"""
Domain layer for reposeed.

Contains pure domain objects with no I/O or side effects:
- TemplateEntry: Repository location, branch and subdirectory of a template
- TemplateTable: Read-only identifier lookup built at startup
- RunContext: Values for one scaffolding run
"""

from .template import TemplateEntry, TemplateTable, RunContext, repository_base_name

__all__ = [
    'TemplateEntry',
    'TemplateTable',
    'RunContext',
    'repository_base_name',
]
