"""
Service layer for reposeed.

Contains the logic that orchestrates domain objects and infrastructure:
- TemplateResolver: Identifier lookup
- WorkspaceAllocator: Staging paths
- MaterializeService: Copy, rename and clean the staged tree
- ScaffoldService: The fetch-and-materialize pipeline

Services are the primary API for commands to use.
"""

from .resolver import TemplateResolver
from .workspace import WorkspaceAllocator
from .materialize_service import MaterializeService
from .scaffold_service import ScaffoldService, ScaffoldResult, PipelineStage

__all__ = [
    'TemplateResolver',
    'WorkspaceAllocator',
    'MaterializeService',
    'ScaffoldService',
    'ScaffoldResult',
    'PipelineStage',
]
