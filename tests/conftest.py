"""
Shared fixtures: throwaway git repositories, fake fetchers and recording sinks.
"""

import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

from reposeed.exit_codes import FetchError
from reposeed.progress import NetworkStats

GIT = shutil.which('git')

requires_git = pytest.mark.skipif(GIT is None, reason="git executable not available")


def run_git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ['git', '-c', 'user.name=Test', '-c', 'user.email=test@example.com',
         '-c', 'commit.gpgsign=false', *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def template_repo(tmp_path):
    """
    A local repository named 'starter'.

    main:    README.md, src/app.py, pkg/widget/{__init__.py, data.bin}
    feature: main plus pkg/widget/feature.txt and a changed README.md
    """
    repo = tmp_path / 'remote' / 'starter'
    repo.mkdir(parents=True)
    run_git(repo, 'init', '-q')
    run_git(repo, 'symbolic-ref', 'HEAD', 'refs/heads/main')

    (repo / 'README.md').write_text('# starter\n')
    (repo / 'src').mkdir()
    (repo / 'src' / 'app.py').write_text('print("hello")\n')
    widget = repo / 'pkg' / 'widget'
    widget.mkdir(parents=True)
    (widget / '__init__.py').write_text('VERSION = "1.0"\n')
    (widget / 'data.bin').write_bytes(bytes(range(256)) * 4)
    run_git(repo, 'add', '-A')
    run_git(repo, 'commit', '-q', '-m', 'Initial template')

    run_git(repo, 'checkout', '-q', '-b', 'feature')
    (widget / 'feature.txt').write_text('feature only\n')
    (repo / 'README.md').write_text('# starter (feature)\n')
    run_git(repo, 'add', '-A')
    run_git(repo, 'commit', '-q', '-m', 'Feature work')
    run_git(repo, 'checkout', '-q', 'main')

    return repo


def tree_snapshot(root: Path) -> dict:
    """Map of relative path -> bytes for every file under root."""
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob('*'))
        if path.is_file()
    }


def committed_snapshot(repo: Path, ref: str, subdirectory: Optional[str] = None) -> dict:
    """Map of relative path -> bytes for the files of ``ref`` in ``repo``."""
    listing = run_git(repo, 'ls-tree', '-r', '--name-only', ref)
    snapshot = {}
    prefix = f"{subdirectory.strip('/')}/" if subdirectory else ''
    for name in listing.splitlines():
        if not name.startswith(prefix):
            continue
        content = subprocess.run(
            ['git', 'show', f'{ref}:{name}'],
            cwd=repo, capture_output=True, check=True,
        ).stdout
        snapshot[name[len(prefix):]] = content
    return snapshot


class RecordingSink:
    """Progress sink that records every event for assertions."""

    def __init__(self):
        self.events: List[Tuple[str, object]] = []

    def on_network_progress(self, stats: NetworkStats) -> None:
        self.events.append(('network', stats))

    def on_checkout_progress(self, path, completed, total) -> None:
        self.events.append(('checkout', (path, completed, total)))

    def of(self, kind: str) -> list:
        return [payload for name, payload in self.events if name == kind]


class FakeFetcher:
    """Fetcher that writes a canned tree (with .git) instead of cloning."""

    def __init__(self, files: Optional[dict] = None, fail: Optional[str] = None):
        self.files = files if files is not None else {
            'README.md': '# demo\n',
            'pkg/widget/mod.py': 'x = 1\n',
        }
        self.fail = fail
        self.calls: list = []

    def clone(self, location, destination, branch=None, sink=None):
        self.calls.append((location, Path(destination), branch))
        if self.fail:
            raise FetchError(self.fail)
        destination = Path(destination)
        (destination / '.git').mkdir(parents=True)
        (destination / '.git' / 'HEAD').write_text('ref: refs/heads/main\n')
        for name, content in self.files.items():
            path = destination / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        if sink is not None:
            sink.on_network_progress(NetworkStats(1, 2, 512, 1, 0, 0))
            sink.on_network_progress(NetworkStats(2, 2, 1024, 2, 0, 1))
            sink.on_network_progress(NetworkStats(2, 2, 1024, 2, 1, 1))
            sink.on_checkout_progress(None, len(self.files), len(self.files))


@pytest.fixture
def recording_sink():
    return RecordingSink()
