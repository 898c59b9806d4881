"""
Scaffold service for reposeed.

Runs the fetch-and-materialize pipeline for one template:

    START -> RESOLVED -> STAGED -> MATERIALIZED -> DONE

Any failure moves the run to ERROR and stops it. Failures are returned in a
ScaffoldResult rather than raised, so callers decide how to exit.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol

from ..domain import RunContext
from ..exit_codes import ScaffoldError
from ..progress import NullProgressSink, ProgressSink
from .materialize_service import MaterializeService
from .resolver import TemplateResolver
from .workspace import WorkspaceAllocator

logger = logging.getLogger(__name__)


class PipelineStage(Enum):
    """Stage reached by a scaffolding run."""
    START = "start"
    RESOLVED = "resolved"
    STAGED = "staged"
    MATERIALIZED = "materialized"
    DONE = "done"
    ERROR = "error"


class Fetcher(Protocol):
    def clone(self, location: str, destination: Path, branch: Optional[str] = None,
              sink: Optional[ProgressSink] = None) -> None:
        ...


@dataclass
class ScaffoldResult:
    """Outcome of one scaffolding run."""
    stage: PipelineStage = PipelineStage.START
    failed_stage: Optional[PipelineStage] = None
    error: Optional[ScaffoldError] = None
    context: Optional[RunContext] = None
    destination: Optional[Path] = None

    @property
    def success(self) -> bool:
        return self.stage == PipelineStage.DONE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {
            'stage': self.stage.value,
            'success': self.success,
        }
        if self.context:
            result['location'] = self.context.location
            result['staging_path'] = str(self.context.staging_path)
        if self.destination:
            result['destination'] = str(self.destination)
        if self.error:
            result['error'] = str(self.error)
            result['type'] = self.error.kind
            result['failed_stage'] = self.failed_stage.value if self.failed_stage else None
        return result


class ScaffoldService:
    """
    Service that sequences resolve, allocate, fetch and materialize.

    Single attempt, no retries, no cleanup of partial results.

    Example:
        service = ScaffoldService(
            resolver=TemplateResolver(builtin_table()),
            allocator=WorkspaceAllocator(),
            fetcher=GitClient(),
            sink=TransferProgressRenderer(),
        )
        result = service.run("phat-contract", "myproj")
        if not result.success:
            print(result.error)
    """

    def __init__(
        self,
        resolver: TemplateResolver,
        allocator: WorkspaceAllocator,
        fetcher: Fetcher,
        materializer: Optional[MaterializeService] = None,
        sink: Optional[ProgressSink] = None,
        report: Optional[Callable[[str], None]] = None,
    ):
        self.resolver = resolver
        self.allocator = allocator
        self.fetcher = fetcher
        self.materializer = materializer or MaterializeService()
        self.sink = sink or NullProgressSink()
        self.report = report or (lambda message: None)

    def run(
        self,
        identifier: str,
        destination_name: Optional[str] = None,
        working_directory: Optional[Path] = None,
    ) -> ScaffoldResult:
        """
        Scaffold ``identifier`` into ``working_directory / destination_name``.

        Args:
            identifier: Template identifier
            destination_name: Final directory name (default: repository name)
            working_directory: Target directory (default: process cwd)

        Returns:
            ScaffoldResult; ``success`` is True only when stage is DONE
        """
        result = ScaffoldResult()

        try:
            entry = self.resolver.resolve(identifier)
            context = RunContext.build(
                entry,
                staging_path=self.allocator.allocate(),
                destination_name=destination_name,
                working_directory=working_directory,
            )
            result.context = context
            result.stage = PipelineStage.RESOLVED

            self.report(f"{context.location} -> {context.staging_path}")
            self.fetcher.clone(
                context.location,
                context.staging_path,
                branch=context.branch,
                sink=self.sink,
            )
            result.stage = PipelineStage.STAGED

            self.report(f"{context.staging_path} -> {context.destination_name}")
            result.destination = self.materializer.materialize(
                context.staging_path,
                context.subdirectory,
                context.destination_name,
                context.working_directory,
            )
            result.stage = PipelineStage.MATERIALIZED

        except ScaffoldError as e:
            logger.debug(f"Scaffold of '{identifier}' failed after {result.stage.value}: {e}")
            result.failed_stage = result.stage
            result.stage = PipelineStage.ERROR
            result.error = e
            return result

        result.stage = PipelineStage.DONE
        logger.debug(f"Scaffolded '{identifier}' into {result.destination}")
        return result
