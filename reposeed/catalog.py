"""
Built-in template catalog.

The table is compiled into the program; no configuration file or
environment variable changes it.
"""

from .domain import TemplateEntry, TemplateTable

BUILTIN_TEMPLATES = {
    "phat-contract": TemplateEntry(
        location="https://github.com/tenheadedlion/phat-contract-starter.git",
    ),
}


def builtin_table() -> TemplateTable:
    """Build the read-only table of built-in templates."""
    return TemplateTable(BUILTIN_TEMPLATES)
