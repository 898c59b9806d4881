"""
Staging workspace allocation for reposeed.
"""

import secrets
import string
import tempfile
from pathlib import Path
from typing import Optional, Union

TOKEN_ALPHABET = string.ascii_letters + string.digits


class WorkspaceAllocator:
    """
    Produces staging paths under a shared temporary area.

    The returned path is not created; git creates it while cloning. Collisions
    between concurrent runs are avoided only probabilistically by the random
    suffix, and there is no retry.
    """

    def __init__(self, root: Optional[Union[str, Path]] = None, token_length: int = 7):
        self.root = Path(root) if root else None
        self.token_length = token_length

    def allocate(self) -> Path:
        root = self.root if self.root is not None else Path(tempfile.gettempdir())
        token = ''.join(secrets.choice(TOKEN_ALPHABET) for _ in range(self.token_length))
        return root / token
