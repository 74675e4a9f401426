"""
ModPublish 服务层

包含业务逻辑服务：API 客户端、加载器检测、游戏版本解析、依赖映射、文件解析、请求构建。
"""

from modpublish.services.api_client import ModrinthClient
from modpublish.services.loader_detector import LoaderDetector
from modpublish.services.game_version_resolver import (
    FallbackProvider,
    GameVersionResolver,
)
from modpublish.services.dependency_mapper import DependencyMapper
from modpublish.services.file_resolver import FileResolver
from modpublish.services.request_builder import build_request

__all__ = [
    "ModrinthClient",
    "LoaderDetector",
    "FallbackProvider",
    "GameVersionResolver",
    "DependencyMapper",
    "FileResolver",
    "build_request",
]
