"""
构建环境适配层

提供“构建环境是否启用某能力”的查询接口，以及读取回退值（游戏版本、依赖版本）的方法。
"""

import re
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from loguru import logger

from modpublish.exceptions import ConfigParseError


class Capability(Enum):
    """已知的构建插件能力（值为 Gradle 插件 ID）"""

    FORGE = "net.minecraftforge.gradle"
    FABRIC = "fabric-loom"
    QUILT = "org.quiltmc.loom"
    SPONGE = "org.spongepowered.gradle.plugin"
    PAPER = "io.papermc.paperweight.userdev"


class BuildEnvironment(ABC):
    """构建环境能力查询接口"""

    @abstractmethod
    def has_capability(self, capability: Capability) -> bool:
        """能力是否存在"""
        pass

    @abstractmethod
    def extra_property(self, name: str) -> Optional[str]:
        """读取构建环境记录的额外属性（如 ForgeGradle 的 MC_VERSION）"""
        pass

    @abstractmethod
    def dependency_versions(self, configuration: str) -> List[Optional[str]]:
        """按声明顺序返回某个依赖配置中各依赖的版本，无法确定的版本为 None"""
        pass

    def project_version(self) -> Optional[str]:
        """项目自身的版本号，用作默认 version_number"""
        return None


class StaticBuildEnvironment(BuildEnvironment):
    """
    静态声明的构建环境

    对应配置文件中的 ``[environment]`` 表::

        [environment]
        plugins = ["fabric-loom"]
        version = "1.0.0"
        properties = { MC_VERSION = "1.20.1" }
        configurations = { minecraft = ["1.20.1"] }
    """

    def __init__(
        self,
        plugins: Iterable[Union[str, Capability]] = (),
        properties: Optional[Dict[str, str]] = None,
        configurations: Optional[Dict[str, List[str]]] = None,
        version: Optional[str] = None,
    ):
        self.plugins = {p.value if isinstance(p, Capability) else p for p in plugins}
        self.properties = dict(properties or {})
        self.configurations = {k: list(v) for k, v in (configurations or {}).items()}
        self.version = version

    @classmethod
    def from_dict(cls, data: dict) -> "StaticBuildEnvironment":
        return cls(
            plugins=data.get("plugins", []),
            properties=data.get("properties"),
            configurations=data.get("configurations"),
            version=data.get("version"),
        )

    def has_capability(self, capability: Capability) -> bool:
        return capability.value in self.plugins

    def extra_property(self, name: str) -> Optional[str]:
        return self.properties.get(name)

    def dependency_versions(self, configuration: str) -> List[str]:
        return list(self.configurations.get(configuration, []))

    def project_version(self) -> Optional[str]:
        return self.version


_PLUGIN_ID_RE = re.compile(r"""\bid\s*\(?\s*["']([\w.\-]+)["']""")
_APPLY_PLUGIN_RE = re.compile(r"""\bapply\s*\(?\s*plugin\s*[:=]\s*["']([\w.\-]+)["']""")
# 引号内的 ${...} 整体匹配，Kotlin DSL 的 ${property("x")} 中含有同种引号
_DEPENDENCY_RE = re.compile(
    r"""^\s*(\w+)\s*\(?\s*(["'])((?:\$\{[^}\n]*\}|(?!\2)[^\n])*)\2""", re.MULTILINE
)
_VERSION_RE = re.compile(
    r"""^\s*version\s*=\s*(["'])((?:\$\{[^}\n]*\}|(?!\1)[^\n])*)\1""", re.MULTILINE
)
_PROPERTY_RE = re.compile(r"([^=:\s]+)\s*[=:]\s*(.*)")
_PLACEHOLDER_RE = re.compile(
    r"""\$\{\s*(?:project\.)?(?:property|findProperty)\(\s*["']([\w.\-]+)["']\s*\)\s*\}"""
    r"""|\$\{(?:project\.)?([\w.\-]+)\}"""
    r"""|\$([A-Za-z_]\w*)"""
)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(
            f"cannot read build file {path}: {e}", context={"path": str(path)}
        ) from e


class GradleBuildEnvironment(BuildEnvironment):
    """
    扫描 Gradle 项目目录得到的构建环境

    读取 build.gradle / build.gradle.kts 中的插件 ID 与依赖声明，
    以及 gradle.properties 中的属性（用于 ``${prop}`` 与 ``${property("prop")}`` 插值）。
    无法插值的值视为缺失。

    Raises:
        ConfigParseError: 构建文件无法读取或不是 UTF-8 编码
    """

    BUILD_FILES = ("build.gradle", "build.gradle.kts")

    def __init__(self, project_dir: Union[str, Path] = "."):
        self.project_dir = Path(project_dir)
        self.properties = self._read_properties(self.project_dir / "gradle.properties")
        self.script = self._read_build_script()
        self.plugins = set(_PLUGIN_ID_RE.findall(self.script))
        self.plugins.update(_APPLY_PLUGIN_RE.findall(self.script))
        logger.debug(f"Gradle 插件: {sorted(self.plugins)}")

    def _read_build_script(self) -> str:
        parts = []
        for name in self.BUILD_FILES:
            path = self.project_dir / name
            if path.is_file():
                parts.append(_read_text(path))
        return "\n".join(parts)

    @staticmethod
    def _read_properties(path: Path) -> Dict[str, str]:
        """解析 gradle.properties（key=value 或 key:value）"""
        properties: Dict[str, str] = {}
        if not path.is_file():
            return properties
        for line in _read_text(path).splitlines():
            line = line.strip()
            if not line or line[0] in "#!":
                continue
            if match := _PROPERTY_RE.match(line):
                properties[match.group(1)] = match.group(2).strip()
        return properties

    def _interpolate(self, value: str) -> Optional[str]:
        """替换占位符，仍有未解析的占位符时返回 None"""

        def replace(match: re.Match) -> str:
            name = match.group(1) or match.group(2) or match.group(3)
            return self.properties.get(name, match.group(0))

        result = _PLACEHOLDER_RE.sub(replace, value)
        if "$" in result:
            logger.debug(f"无法解析的构建脚本占位符: {value}")
            return None
        return result

    def _dependencies(self, configuration: str) -> List[Tuple[str, str, Optional[str]]]:
        dependencies = []
        for conf, _, coordinate in _DEPENDENCY_RE.findall(self.script):
            parts = coordinate.split(":", 2)
            if conf != configuration or len(parts) < 3:
                continue
            group, name, version = parts
            dependencies.append((group, name, self._interpolate(version)))
        return dependencies

    def has_capability(self, capability: Capability) -> bool:
        return capability.value in self.plugins

    def extra_property(self, name: str) -> Optional[str]:
        if name in self.properties:
            return self.properties[name]
        if name == "MC_VERSION":
            # ForgeGradle 从 net.minecraftforge:forge:<mc>-<forge> 中取得 MC 版本
            for group, artifact, version in self._dependencies("minecraft"):
                if group == "net.minecraftforge" and artifact == "forge" and version:
                    return version.split("-", 1)[0]
        return None

    def dependency_versions(self, configuration: str) -> List[Optional[str]]:
        return [version for _, _, version in self._dependencies(configuration)]

    def project_version(self) -> Optional[str]:
        if match := _VERSION_RE.search(self.script):
            return self._interpolate(match.group(2))
        return self.properties.get("version") or self.properties.get("mod_version")
