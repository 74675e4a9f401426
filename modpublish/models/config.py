"""
配置数据模型

上传配置分两阶段：解析阶段使用可变的 ConfigDraft，
解析完成后冻结为只读的 ConfigSnapshot。
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from modpublish.exceptions import ConfigParseError, ConfigValidationError


DEFAULT_API_URL = "https://api.modrinth.com/v2"


class VersionType(Enum):
    """版本发布类型"""

    RELEASE = "release"
    BETA = "beta"
    ALPHA = "alpha"


class DependencyType(Enum):
    """依赖类型"""

    REQUIRED = "required"
    OPTIONAL = "optional"
    INCOMPATIBLE = "incompatible"
    EMBEDDED = "embedded"

    @classmethod
    def parse(cls, value: Union[str, "DependencyType"]) -> "DependencyType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigParseError(f"invalid dependency type: {value}")


@dataclass(frozen=True)
class ArtifactRef:
    """
    延迟解析的构建产物

    在解析时于 directory 中按 pattern 查找，取最新修改的文件。
    """

    directory: str
    pattern: str = "*.jar"

    def __str__(self) -> str:
        return f"{self.directory}/{self.pattern}"


# 文件引用：路径、延迟产物描述，或返回以上任一项的无参函数
FileRef = Union[str, "os.PathLike[str]", ArtifactRef, Callable[[], Any], None]


@dataclass(frozen=True)
class ProtoDependency:
    """用户声明的、尚未解析的依赖"""

    project: Optional[str] = None
    version: Optional[str] = None
    file_name: Optional[str] = None
    dependency_type: DependencyType = DependencyType.REQUIRED

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProtoDependency":
        dep = cls(
            project=data.get("project") or data.get("project_id"),
            version=data.get("version") or data.get("version_id"),
            file_name=data.get("file_name"),
            dependency_type=DependencyType.parse(
                data.get("type", data.get("dependency_type", "required"))
            ),
        )
        if not (dep.project or dep.version or dep.file_name):
            raise ConfigValidationError(
                "dependency needs a project, version or file_name",
                context={"dependency": data},
            )
        return dep


def _parse_file_ref(value: Any) -> FileRef:
    """将配置中的文件引用转换为 FileRef"""
    if isinstance(value, dict):
        if "directory" not in value:
            raise ConfigParseError(f"artifact reference needs a directory: {value}")
        return ArtifactRef(
            directory=value["directory"], pattern=value.get("pattern", "*.jar")
        )
    return value


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (str, dict)):
        return [value]
    return list(value)


def _unique(items) -> List[str]:
    return list(dict.fromkeys(items))


@dataclass(frozen=True)
class ConfigSnapshot:
    """冻结后的上传配置"""

    project_id: str
    version_number: str
    version_name: Optional[str]
    changelog: str
    version_type: str
    game_versions: Tuple[str, ...]
    loaders: Tuple[str, ...]
    dependencies: Tuple[ProtoDependency, ...]
    upload_file: FileRef
    additional_files: Tuple[FileRef, ...]
    debug_mode: bool = False
    fail_silently: bool = False
    detect_loaders: bool = True
    api_url: str = DEFAULT_API_URL


@dataclass
class ConfigDraft:
    """
    解析阶段使用的可变配置

    仅 loaders、game_versions、version_number、version_name 会在解析阶段被补全，
    之后通过 freeze() 生成 ConfigSnapshot。
    """

    project_id: str
    upload_file: FileRef = None
    version_number: Optional[str] = None
    version_name: Optional[str] = None
    changelog: str = ""
    version_type: str = "release"
    game_versions: List[str] = field(default_factory=list)
    loaders: List[str] = field(default_factory=list)
    named_dependencies: List[ProtoDependency] = field(default_factory=list)
    dependencies: List[ProtoDependency] = field(default_factory=list)
    additional_files: List[FileRef] = field(default_factory=list)
    debug_mode: bool = False
    fail_silently: bool = False
    detect_loaders: bool = True
    api_url: str = DEFAULT_API_URL
    token: Optional[str] = None

    def __post_init__(self):
        self.game_versions = _unique(self.game_versions)
        self.loaders = _unique(self.loaders)

    def add_loader(self, loader: str) -> None:
        if loader not in self.loaders:
            self.loaders.append(loader)

    def add_game_version(self, version: str) -> None:
        if version not in self.game_versions:
            self.game_versions.append(version)

    def all_dependencies(self) -> List[ProtoDependency]:
        """命名依赖在前，原始依赖列表在后"""
        return [*self.named_dependencies, *self.dependencies]

    def freeze(self) -> ConfigSnapshot:
        if not self.version_number:
            raise ConfigValidationError("no version number specified")
        return ConfigSnapshot(
            project_id=self.project_id,
            version_number=self.version_number,
            version_name=self.version_name,
            changelog=self.changelog,
            version_type=self.version_type,
            game_versions=tuple(self.game_versions),
            loaders=tuple(self.loaders),
            dependencies=tuple(self.all_dependencies()),
            upload_file=self.upload_file,
            additional_files=tuple(self.additional_files),
            debug_mode=self.debug_mode,
            fail_silently=self.fail_silently,
            detect_loaders=self.detect_loaders,
            api_url=self.api_url,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigDraft":
        """
        从配置字典构建草稿

        接受完整的配置文件内容（读取其中的 ``modrinth`` 表）或 ``modrinth`` 表本身。
        """
        cfg = data.get("modrinth", data)
        if not isinstance(cfg, dict):
            raise ConfigParseError("modrinth 配置必须是一个表")

        project_id = cfg.get("project_id") or cfg.get("project")
        if not project_id:
            raise ConfigValidationError("project_id is required")

        named = []
        for dep_type in DependencyType:
            for project in _as_list(cfg.get(dep_type.value)):
                named.append(
                    ProtoDependency(project=str(project), dependency_type=dep_type)
                )

        changelog = cfg.get("changelog", "")
        if changelog_file := cfg.get("changelog_file"):
            try:
                with open(changelog_file, encoding="utf-8") as f:
                    changelog = f.read()
            except OSError as e:
                raise ConfigParseError(
                    f"cannot read changelog file {changelog_file}: {e}"
                )

        return cls(
            project_id=str(project_id),
            upload_file=_parse_file_ref(cfg.get("upload_file")),
            version_number=cfg.get("version_number"),
            version_name=cfg.get("version_name"),
            changelog=changelog,
            version_type=cfg.get("version_type", "release"),
            game_versions=[str(v) for v in _as_list(cfg.get("game_versions"))],
            loaders=[str(v) for v in _as_list(cfg.get("loaders"))],
            named_dependencies=named,
            dependencies=[
                ProtoDependency.from_dict(d) for d in _as_list(cfg.get("dependencies"))
            ],
            additional_files=[
                _parse_file_ref(f) for f in _as_list(cfg.get("additional_files"))
            ],
            debug_mode=bool(cfg.get("debug_mode", False)),
            fail_silently=bool(cfg.get("fail_silently", False)),
            detect_loaders=bool(cfg.get("detect_loaders", True)),
            api_url=cfg.get("api_url", DEFAULT_API_URL),
            token=cfg.get("token") or os.environ.get("MODRINTH_TOKEN"),
        )
