"""Shared fixtures for steve tests."""

import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import httpx
import pytest

from steve.actions import build_registry
from steve.config import Settings, get_settings
from steve.errors import ExternalProcessError
from steve.registry import ActionContext
from steve.utils import Runner


class FakeRunner(Runner):
    """Records commands instead of running them."""

    def __init__(self, fail: Optional[Callable[[List[str]], int]] = None) -> None:
        self.calls: List[List[str]] = []
        self._fail = fail

    def run(self, cmd, capture=False) -> subprocess.CompletedProcess:
        cmd = list(cmd)
        self.calls.append(cmd)
        returncode = self._fail(cmd) if self._fail else 0
        if returncode:
            raise ExternalProcessError(cmd, returncode)
        return subprocess.CompletedProcess(cmd, 0, "", "")


class ScriptedConfirm:
    """Answers confirmation prompts from a fixed script."""

    def __init__(self, answers: Iterable[bool] = ()) -> None:
        self.answers = list(answers)
        self.prompts: List[str] = []

    def __call__(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        if not self.answers:
            return False
        return self.answers.pop(0)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a temporary directory."""
    user_setup = tmp_path / "user_setup"
    (user_setup / "bin").mkdir(parents=True)
    (user_setup / "profile").write_text("export PATH=$HOME/bin:$PATH\n")
    (user_setup / "bin" / "kctx").write_text("#!/bin/sh\nkubectl config current-context\n")
    (tmp_path / "tree").mkdir()
    (tmp_path / "home").mkdir()

    return get_settings(
        matchbox_dir=tmp_path / "matchbox",
        config_dir=tmp_path / "tree",
        ignition_output=tmp_path / "ignition.json",
        home_root=tmp_path / "home",
        user_setup_dir=user_setup,
        shared_tools_dir=tmp_path / "tools",
        shared_tools={"kubectl": "https://dl.example.test/kubectl"},
        sync_interval=0.5,
    )


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_context(settings: Settings, runner: FakeRunner) -> Callable[..., ActionContext]:
    """Build an ActionContext with fake capabilities."""

    def _make(
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
        answers: Iterable[bool] = (),
        **overrides,
    ) -> ActionContext:
        http = None
        if handler is not None:
            http = httpx.Client(transport=httpx.MockTransport(handler))
        options = dict(
            settings=settings,
            registry=build_registry(),
            runner=runner,
            confirm=ScriptedConfirm(answers),
            http=http,
            sleep=lambda seconds: None,
        )
        options.update(overrides)
        return ActionContext(**options)

    return _make


@pytest.fixture
def failing_runner() -> Callable[[Callable[[List[str]], int]], FakeRunner]:
    """Build a FakeRunner whose commands fail with the given status."""
    return FakeRunner
