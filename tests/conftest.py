"""Shared fixtures for the modpublish test-suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from modpublish.environment import StaticBuildEnvironment
from modpublish.models import ConfigDraft, UploadRequest


class FakeClient:
    """In-memory stand-in for :class:`modpublish.services.ModrinthClient`."""

    def __init__(
        self,
        projects: dict[str, str] | None = None,
        errors: dict[str, Exception] | None = None,
        version_id: str = "VERSION1",
    ) -> None:
        self.projects = projects if projects is not None else {"my-mod": "PROJ1234"}
        self.errors = errors or {}
        self.version_id = version_id
        self.calls: list[tuple[str, Any]] = []

    def _maybe_fail(self, method: str) -> None:
        if method in self.errors:
            raise self.errors[method]

    async def get_project_id(self, idx: str) -> str | None:
        self.calls.append(("get_project_id", idx))
        self._maybe_fail("get_project_id")
        return self.projects.get(idx)

    async def get_dependency_project_id(self, idx: str) -> str | None:
        self.calls.append(("get_dependency_project_id", idx))
        self._maybe_fail("get_dependency_project_id")
        return self.projects.get(idx)

    async def create_version(self, request: UploadRequest) -> dict[str, Any]:
        self.calls.append(("create_version", request))
        self._maybe_fail("create_version")
        return {
            "id": self.version_id,
            "project_id": request.project_id,
            "version_number": request.version_number,
        }

    def called(self, method: str) -> list[Any]:
        return [arg for name, arg in self.calls if name == method]


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def jar(tmp_path: Path) -> Path:
    path = tmp_path / "build" / "libs" / "my-mod-1.0.0.jar"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"PK\x03\x04")
    return path


@pytest.fixture
def fabric_env() -> StaticBuildEnvironment:
    return StaticBuildEnvironment(
        plugins=["fabric-loom"],
        configurations={"minecraft": ["1.20.1"]},
        version="1.0.0",
    )


def make_draft(upload_file: Any = None, **overrides: Any) -> ConfigDraft:
    values: dict[str, Any] = {
        "project_id": "my-mod",
        "upload_file": upload_file,
        "version_number": "1.0.0",
        "loaders": ["fabric"],
        "game_versions": ["1.20.1"],
    }
    values.update(overrides)
    return ConfigDraft(**values)
