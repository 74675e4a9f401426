"""Tests for :mod:`modpublish.services.api_client` with a stubbed session."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import aiohttp
import pytest

from modpublish.exceptions import (
    APIAuthError,
    APIError,
    APINetworkError,
    APINotFoundError,
    APIRateLimitError,
    APIServerError,
    APIValidationError,
)
from modpublish.models import UploadRequest, VersionType
from modpublish.services.api_client import ModrinthClient, error_for_status


class _Response:
    def __init__(self, status: int, body: Any, url: str) -> None:
        self.status = status
        self._body = body
        self.url = url

    async def json(self) -> Any:
        return self._body

    async def text(self) -> str:
        return self._body if isinstance(self._body, str) else json.dumps(self._body)

    async def __aenter__(self) -> "_Response":
        return self

    async def __aexit__(self, *exc: object) -> None:
        return None


class _Session:
    closed = False

    def __init__(self, status: int = 200, body: Any = None, error: Exception | None = None):
        self.status = status
        self.body = body
        self.error = error
        self.requests: list[tuple[str, str, dict[str, Any]]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> _Response:
        self.requests.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return _Response(self.status, self.body, url)


def _client(session: _Session, token: str | None = "secret") -> ModrinthClient:
    return ModrinthClient(
        token=token, base_url="https://api.modrinth.com/v2/", session=session
    )


@pytest.mark.parametrize(
    ("status", "error_cls"),
    [
        (400, APIValidationError),
        (401, APIAuthError),
        (403, APIAuthError),
        (404, APINotFoundError),
        (429, APIRateLimitError),
        (502, APIServerError),
        (418, APIError),
    ],
)
def test_error_for_status(status: int, error_cls: type) -> None:
    error = error_for_status(status, "failed", url="https://x")

    assert type(error) is error_cls
    assert error.status == status
    assert error.context == {"status_code": status, "url": "https://x"}


def test_get_project_id_returns_id() -> None:
    session = _Session(body={"id": "AANobbMI", "slug": "sodium"})

    project_id = asyncio.run(_client(session).get_project_id("sodium"))

    assert project_id == "AANobbMI"
    method, url, kwargs = session.requests[0]
    assert method == "GET"
    assert url == "https://api.modrinth.com/v2/project/sodium"
    assert kwargs["headers"]["Authorization"] == "secret"
    assert kwargs["headers"]["User-Agent"].startswith("modpublish/")


def test_get_project_id_missing_returns_none() -> None:
    session = _Session(status=404, body={"error": "not_found"})

    assert asyncio.run(_client(session).get_dependency_project_id("ghost")) is None


def test_auth_failure_raises() -> None:
    session = _Session(
        status=401, body={"error": "unauthorized", "description": "bad token"}
    )

    with pytest.raises(APIAuthError, match="bad token"):
        asyncio.run(_client(session).get_project_id("sodium"))


def test_transport_failure_raises_network_error() -> None:
    session = _Session(error=aiohttp.ClientConnectionError("refused"))

    with pytest.raises(APINetworkError):
        asyncio.run(_client(session).get_project_id("sodium"))


def test_no_token_sends_no_authorization() -> None:
    assert "Authorization" not in _client(_Session(), token=None).headers


def test_create_version_posts_multipart(tmp_path: Path) -> None:
    jar = tmp_path / "mod.jar"
    jar.write_bytes(b"jar-bytes")
    request = UploadRequest(
        project_id="PROJ1234",
        version_number="1.0.0",
        name="1.0.0",
        changelog="",
        version_type=VersionType.RELEASE,
        game_versions=("1.20.1",),
        loaders=("fabric",),
        dependencies=(),
        files=(jar,),
    )
    session = _Session(status=200, body={"id": "VERSION1", "project_id": "PROJ1234"})

    data = asyncio.run(_client(session).create_version(request))

    assert data["id"] == "VERSION1"
    method, url, kwargs = session.requests[0]
    assert method == "POST"
    assert url == "https://api.modrinth.com/v2/version"
    assert isinstance(kwargs["data"], aiohttp.FormData)


def test_create_version_validation_error(tmp_path: Path) -> None:
    jar = tmp_path / "mod.jar"
    jar.write_bytes(b"x")
    request = UploadRequest(
        project_id="PROJ1234",
        version_number="1.0.0",
        name="1.0.0",
        changelog="",
        version_type=VersionType.ALPHA,
        game_versions=("1.20.1",),
        loaders=("fabric",),
        dependencies=(),
        files=(jar,),
    )
    session = _Session(status=400, body="invalid input")

    with pytest.raises(APIValidationError, match="invalid input"):
        asyncio.run(_client(session).create_version(request))
