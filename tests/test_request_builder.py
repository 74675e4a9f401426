"""Tests for :mod:`modpublish.services.request_builder`."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import make_draft
from modpublish.exceptions import ConfigError, ConfigValidationError
from modpublish.models import DependencyType, ResolvedDependency, VersionType
from modpublish.services.request_builder import build_request, normalize_changelog


def _snapshot(**overrides):
    return make_draft(upload_file="mod.jar", **overrides).freeze()


def test_builds_request_from_snapshot() -> None:
    dependency = ResolvedDependency(project_id="AANobbMI")
    request = build_request(
        _snapshot(version_name="My Mod 1.0"), [dependency], [Path("mod.jar")]
    )

    assert request.project_id == "my-mod"
    assert request.version_number == "1.0.0"
    assert request.name == "My Mod 1.0"
    assert request.version_type is VersionType.RELEASE
    assert request.game_versions == ("1.20.1",)
    assert request.loaders == ("fabric",)
    assert request.dependencies == (dependency,)
    assert request.files == (Path("mod.jar"),)


def test_name_defaults_to_version_number() -> None:
    request = build_request(_snapshot(), [], [Path("mod.jar")])

    assert request.name == "1.0.0"


def test_project_id_override() -> None:
    request = build_request(_snapshot(), [], [Path("mod.jar")], project_id="PROJ1234")

    assert request.project_id == "PROJ1234"


def test_changelog_crlf_is_normalized() -> None:
    request = build_request(
        _snapshot(changelog="- fixed\r\n- added\r\n\rdone"), [], [Path("mod.jar")]
    )

    assert request.changelog == "- fixed\n- added\n\rdone"
    assert "\r\n" not in request.changelog
    assert normalize_changelog(request.changelog) == request.changelog


@pytest.mark.parametrize("raw", ["BETA", "Beta", "beta"])
def test_version_type_is_case_insensitive(raw: str) -> None:
    request = build_request(_snapshot(version_type=raw), [], [Path("mod.jar")])

    assert request.version_type is VersionType.BETA


def test_invalid_version_type_fails() -> None:
    with pytest.raises(ConfigError, match="invalid version type"):
        build_request(_snapshot(version_type="snapshot"), [], [Path("mod.jar")])


def test_building_is_deterministic() -> None:
    snapshot = _snapshot(changelog="a\r\nb")
    dependencies = [
        ResolvedDependency(file_name="lib.jar", dependency_type=DependencyType.EMBEDDED)
    ]
    files = [Path("mod.jar"), Path("extra.jar")]

    assert build_request(snapshot, dependencies, files) == build_request(
        snapshot, dependencies, files
    )


def test_payload_marks_first_file_as_primary() -> None:
    request = build_request(
        _snapshot(), [ResolvedDependency(project_id="P1")], [Path("a.jar"), Path("b.jar")]
    )

    data = request.to_dict()

    assert data["file_parts"] == ["file-0", "file-1"]
    assert data["primary_file"] == "file-0"
    assert data["version_type"] == "release"
    assert data["dependencies"] == [
        {
            "project_id": "P1",
            "version_id": None,
            "file_name": None,
            "dependency_type": "required",
        }
    ]


def test_empty_files_are_rejected() -> None:
    with pytest.raises(ConfigError):
        build_request(_snapshot(), [], [])


def test_resolved_dependency_requires_identifier() -> None:
    with pytest.raises(ConfigValidationError, match="project_id, version_id or file_name"):
        ResolvedDependency()
