"""
reposeed - Scaffold new projects from template repositories.

Quick Start:
    from reposeed import (
        ScaffoldService, TemplateResolver, WorkspaceAllocator,
        GitClient, TransferProgressRenderer, builtin_table,
    )

    service = ScaffoldService(
        resolver=TemplateResolver(builtin_table()),
        allocator=WorkspaceAllocator(),
        fetcher=GitClient(),
        sink=TransferProgressRenderer(),
    )
    result = service.run("phat-contract", "my-contract")
    if not result.success:
        print(result.error.kind, result.error)

Domain Objects:
    TemplateEntry - Repository location, branch and subdirectory
    TemplateTable - Read-only identifier lookup
    RunContext - Values for one run

Services:
    TemplateResolver - Identifier lookup
    WorkspaceAllocator - Staging paths
    MaterializeService - Copy, rename, strip .git
    ScaffoldService - The whole pipeline
"""

__version__ = "0.1.0"

from .domain import TemplateEntry, TemplateTable, RunContext
from .catalog import builtin_table
from .infra import GitClient
from .progress import (
    NetworkStats,
    ProgressSink,
    NullProgressSink,
    TransferState,
    TransferProgressRenderer,
)
from .services import (
    TemplateResolver,
    WorkspaceAllocator,
    MaterializeService,
    ScaffoldService,
    ScaffoldResult,
    PipelineStage,
)

__all__ = [
    "__version__",
    # Domain objects
    "TemplateEntry",
    "TemplateTable",
    "RunContext",
    "builtin_table",
    # Infrastructure
    "GitClient",
    # Progress
    "NetworkStats",
    "ProgressSink",
    "NullProgressSink",
    "TransferState",
    "TransferProgressRenderer",
    # Services
    "TemplateResolver",
    "WorkspaceAllocator",
    "MaterializeService",
    "ScaffoldService",
    "ScaffoldResult",
    "PipelineStage",
]
