"""
ModPublish 数据模型包

包含配置模型和 API 模型定义。
"""

from modpublish.models.config import (
    DEFAULT_API_URL,
    VersionType,
    DependencyType,
    ArtifactRef,
    FileRef,
    ProtoDependency,
    ConfigSnapshot,
    ConfigDraft,
)
from modpublish.models.api import (
    ResolvedDependency,
    UploadRequest,
    UploadResult,
)

__all__ = [
    # 配置模型
    "DEFAULT_API_URL",
    "VersionType",
    "DependencyType",
    "ArtifactRef",
    "FileRef",
    "ProtoDependency",
    "ConfigSnapshot",
    "ConfigDraft",
    # API 模型
    "ResolvedDependency",
    "UploadRequest",
    "UploadResult",
]
