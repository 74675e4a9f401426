"""
请求构建服务

将冻结的配置、已解析依赖与文件组装为上传请求。
"""

from pathlib import Path
from typing import Optional, Sequence

from modpublish.models import (
    ConfigSnapshot,
    ResolvedDependency,
    UploadRequest,
    VersionType,
)
from modpublish.exceptions import ConfigError


def normalize_changelog(changelog: str) -> str:
    """将 CRLF 换行统一为 LF"""
    return changelog.replace("\r\n", "\n")


def parse_version_type(value: str) -> VersionType:
    """忽略大小写匹配版本类型"""
    try:
        return VersionType(str(value).lower())
    except ValueError:
        raise ConfigError(f"invalid version type: {value}")


def build_request(
    snapshot: ConfigSnapshot,
    dependencies: Sequence[ResolvedDependency],
    files: Sequence[Path],
    project_id: Optional[str] = None,
) -> UploadRequest:
    """
    构建上传请求

    纯函数，不访问网络与文件系统。project_id 缺省时使用配置中的项目标识。
    """
    if not snapshot.game_versions:
        raise ConfigError("no game versions specified")
    if not snapshot.loaders:
        raise ConfigError("no loaders specified")
    if not files:
        raise ConfigError("upload file is missing or null")

    return UploadRequest(
        project_id=project_id or snapshot.project_id,
        version_number=snapshot.version_number,
        name=snapshot.version_name or snapshot.version_number,
        changelog=normalize_changelog(snapshot.changelog),
        version_type=parse_version_type(snapshot.version_type),
        game_versions=tuple(snapshot.game_versions),
        loaders=tuple(snapshot.loaders),
        dependencies=tuple(dependencies),
        files=tuple(Path(f) for f in files),
    )
