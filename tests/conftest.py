"""Shared fixtures for SVN migration tests."""

import asyncio
import os
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import pytest

from svn_migrate.config.config import Config
from svn_migrate.git.runner import JobResult
from svn_migrate.models.project import Project


@dataclass
class RecordedCall:
    """One command seen by the fake runner."""

    project: str
    command: str
    args: List[str]
    cwd: Optional[str]
    working_directory: str


class FakeRunner:
    """Stands in for JobRunner without starting processes.

    A successful ``git svn clone`` creates the destination directory so the
    cleanup phase can enter it.
    """

    def __init__(
        self,
        fail: Optional[Callable[[str, str, List[str]], bool]] = None,
        delays: Optional[Dict[str, float]] = None,
        create_dirs: bool = True,
    ):
        self.calls: List[RecordedCall] = []
        self.fail = fail or (lambda project, command, args: False)
        self.delays = delays or {}
        self.create_dirs = create_dirs

    async def run(self, command, args, log_sink, cwd=None):
        args = list(args)
        project = os.path.basename(log_sink.name)[: -len('.log')]
        log_sink.write(f'{" ".join([command, *args])}\n')
        log_sink.flush()
        self.calls.append(
            RecordedCall(project, command, args, cwd, os.getcwd())
        )

        delay = self.delays.get(project, 0)
        if delay:
            await asyncio.sleep(delay)

        if self.fail(project, command, args):
            return JobResult(success=False, error='exit status 1', return_code=1)

        if args[:2] == ['svn', 'clone'] and self.create_dirs:
            os.makedirs(args[-1], exist_ok=True)

        return JobResult(success=True, return_code=0)

    def calls_for(self, project: str) -> List[RecordedCall]:
        return [call for call in self.calls if call.project == project]


@pytest.fixture
def base_path(tmp_path, monkeypatch):
    """Base directory for converted repositories; cwd is restored afterwards."""
    monkeypatch.chdir(tmp_path)
    base = tmp_path / 'base'
    base.mkdir()
    return base


@pytest.fixture
def users_file(tmp_path):
    path = tmp_path / 'authors.txt'
    path.write_text('jdoe = John Doe <jdoe@example.com>\n', encoding='utf-8')
    return path


@pytest.fixture
def make_config(base_path, users_file):
    """Build a Config for the given projects."""

    def _make(*projects: Project, **overrides) -> Config:
        data = {
            'base_path': str(base_path),
            'users_path': str(users_file),
            'projects': list(projects),
        }
        data.update(overrides)
        return Config(**data)

    return _make


@pytest.fixture
def standard_project():
    return Project(name='alpha', svn='https://svn.example.com/alpha', std=True)


@pytest.fixture
def flat_project():
    return Project(
        name='beta', svn='https://svn.example.com/beta', title='Beta Tools', std=False
    )
