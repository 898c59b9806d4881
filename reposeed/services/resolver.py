"""
Template resolution for reposeed.

Maps a template identifier to its TemplateEntry by exact lookup in an
injected TemplateTable. No fuzzy matching, no I/O.
"""

import logging
from typing import List, Mapping

from ..domain import TemplateEntry
from ..exit_codes import UnknownTemplateError

logger = logging.getLogger(__name__)


class TemplateResolver:
    """
    Resolves template identifiers against a fixed table.

    Example:
        resolver = TemplateResolver(builtin_table())
        entry = resolver.resolve("phat-contract")
        print(entry.location)
    """

    def __init__(self, table: Mapping[str, TemplateEntry]):
        self.table = table

    def identifiers(self) -> List[str]:
        """Known template identifiers, sorted."""
        return sorted(self.table)

    def resolve(self, identifier: str) -> TemplateEntry:
        """
        Look up a template identifier.

        Raises:
            UnknownTemplateError: If the identifier is not in the table
        """
        try:
            entry = self.table[identifier]
        except KeyError:
            raise UnknownTemplateError(identifier, self.identifiers()) from None
        logger.debug(f"Resolved template '{identifier}' to {entry.location}")
        return entry
