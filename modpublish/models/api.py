"""
API 数据模型

定义上传请求与响应相关的数据类。
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from modpublish.exceptions import ConfigValidationError
from modpublish.models.config import DependencyType, VersionType


@dataclass(frozen=True)
class ResolvedDependency:
    """已解析、可被 Modrinth 识别的依赖"""

    project_id: Optional[str] = None
    version_id: Optional[str] = None
    file_name: Optional[str] = None
    dependency_type: DependencyType = DependencyType.REQUIRED

    def __post_init__(self):
        if not (self.project_id or self.version_id or self.file_name):
            raise ConfigValidationError(
                "resolved dependency needs a project_id, version_id or file_name"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project_id": self.project_id,
            "version_id": self.version_id,
            "file_name": self.file_name,
            "dependency_type": self.dependency_type.value,
        }


@dataclass(frozen=True)
class UploadRequest:
    """
    单次上传请求

    构建后不再修改，files[0] 为主文件。
    """

    project_id: str
    version_number: str
    name: str
    changelog: str
    version_type: VersionType
    game_versions: Tuple[str, ...]
    loaders: Tuple[str, ...]
    dependencies: Tuple[ResolvedDependency, ...]
    files: Tuple[Path, ...]

    @property
    def file_parts(self) -> List[str]:
        """multipart 中各文件对应的字段名"""
        return [f"file-{i}" for i in range(len(self.files))]

    def to_dict(self) -> Dict[str, Any]:
        """
        转换为 Modrinth 创建版本接口的 ``data`` 字段
        """
        return {
            "project_id": self.project_id,
            "version_number": self.version_number,
            "name": self.name,
            "changelog": self.changelog,
            "version_type": self.version_type.value,
            "game_versions": list(self.game_versions),
            "loaders": list(self.loaders),
            "dependencies": [dep.to_dict() for dep in self.dependencies],
            "featured": False,
            "file_parts": self.file_parts,
            "primary_file": self.file_parts[0] if self.files else None,
        }

    def describe(self) -> Dict[str, Any]:
        """调试模式输出：请求数据加上本地文件路径"""
        data = self.to_dict()
        data["files"] = [str(path) for path in self.files]
        return data


@dataclass
class UploadResult:
    """上传成功后返回的版本信息"""

    version_id: str
    version_number: str
    project_id: str
    web_url: str

    @classmethod
    def from_modrinth(cls, data: dict, web_url: str) -> "UploadResult":
        """
        将 Modrinth API 返回的版本信息转换为 UploadResult 对象。
        """
        return cls(
            version_id=data.get("id", ""),
            version_number=data.get("version_number", ""),
            project_id=data.get("project_id", ""),
            web_url=web_url,
        )
