"""
API 客户端

Modrinth API 的最小封装：解析项目 ID、创建版本。
"""

import json
from typing import Any, Optional

import aiofiles
import aiohttp
from loguru import logger

from modpublish import __version__
from modpublish.models import DEFAULT_API_URL, UploadRequest
from modpublish.exceptions import (
    APIError,
    APIAuthError,
    APINetworkError,
    APINotFoundError,
    APIRateLimitError,
    APIServerError,
    APIValidationError,
)


USER_AGENT = f"modpublish/{__version__}"


def error_for_status(status: int, message: str, url: Optional[str] = None) -> APIError:
    """根据 HTTP 状态码构造对应的 APIError"""
    if status in (401, 403):
        error_cls = APIAuthError
    elif status == 400:
        error_cls = APIValidationError
    elif status == 404:
        error_cls = APINotFoundError
    elif status == 429:
        error_cls = APIRateLimitError
    elif status >= 500:
        error_cls = APIServerError
    else:
        error_cls = APIError
    return error_cls(message, status=status, url=url)


class ModrinthClient:
    """Modrinth API 客户端"""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = DEFAULT_API_URL,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    @property
    def headers(self) -> dict:
        headers = {"User-Agent": USER_AGENT}
        if self.token:
            headers["Authorization"] = self.token
        return headers

    async def _request(
        self,
        method: str,
        endpoint: str,
        allow_missing: bool = False,
        **kwargs: Any,
    ) -> Optional[Any]:
        """发送 API 请求，404 在 allow_missing 时返回 None"""
        url = f"{self.base_url}{endpoint}"
        try:
            async with self.session.request(
                method, url, headers=self.headers, **kwargs
            ) as response:
                if response.status in (200, 201):
                    return await response.json()
                if response.status == 404 and allow_missing:
                    return None
                detail = await self._error_detail(response)
                raise error_for_status(
                    response.status,
                    f"API 请求失败 (状态码: {response.status}): {detail}",
                    url=str(response.url),
                )
        except aiohttp.ClientError as e:
            raise APINetworkError(f"网络请求失败: {e}", url=url) from e

    @staticmethod
    async def _error_detail(response: aiohttp.ClientResponse) -> str:
        text = await response.text()
        try:
            body = json.loads(text)
        except ValueError:
            return text
        if isinstance(body, dict):
            return body.get("description") or body.get("error") or text
        return text

    async def get_project_id(self, idx: str) -> Optional[str]:
        """通过 slug 或 ID 获取项目 ID，不存在时返回 None"""
        response = await self._request("GET", f"/project/{idx}", allow_missing=True)
        if response is None:
            return None
        return response.get("id")

    async def get_dependency_project_id(self, idx: str) -> Optional[str]:
        """解析依赖项目的 ID"""
        return await self.get_project_id(idx)

    async def create_version(self, request: UploadRequest) -> dict:
        """
        创建新版本

        以 multipart 形式上传：``data`` 字段为 JSON，随后是各文件字段。

        Returns:
            Modrinth 返回的版本信息
        """
        form = aiohttp.FormData()
        form.add_field(
            "data", json.dumps(request.to_dict()), content_type="application/json"
        )
        for part, path in zip(request.file_parts, request.files):
            async with aiofiles.open(path, "rb") as f:
                content = await f.read()
            logger.debug(f"附加文件 {path.name} ({len(content)} 字节) 为 {part}")
            form.add_field(
                part,
                content,
                filename=path.name,
                content_type="application/java-archive",
            )
        return await self._request("POST", "/version", data=form)

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
