"""
游戏版本解析服务

未指定游戏版本时，从各加载器对应的构建插件状态中读取回退版本。
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from loguru import logger

from modpublish.environment import BuildEnvironment, Capability
from modpublish.exceptions import ConfigError
from modpublish.models import ConfigDraft


@dataclass(frozen=True)
class FallbackProvider:
    """
    回退版本来源

    当 loaders 与 capabilities 各自至少命中一项时，调用 reader 读取游戏版本。
    """

    name: str
    loaders: Tuple[str, ...]
    capabilities: Tuple[Capability, ...]
    reader: Callable[[BuildEnvironment], Optional[str]]

    def applies(self, loaders: Sequence[str], environment: BuildEnvironment) -> bool:
        return any(loader in loaders for loader in self.loaders) and any(
            environment.has_capability(cap) for cap in self.capabilities
        )


def _read_forge_version(environment: BuildEnvironment) -> Optional[str]:
    # ForgeGradle 将游戏版本记录在额外属性 MC_VERSION 中
    return environment.extra_property("MC_VERSION")


def _read_loom_version(environment: BuildEnvironment) -> Optional[str]:
    # Loom 使用 minecraft 配置中第一个依赖的版本
    versions = environment.dependency_versions("minecraft")
    return versions[0] if versions else None


DEFAULT_PROVIDERS: Tuple[FallbackProvider, ...] = (
    FallbackProvider(
        name="ForgeGradle",
        loaders=("forge",),
        capabilities=(Capability.FORGE,),
        reader=_read_forge_version,
    ),
    FallbackProvider(
        name="Loom",
        loaders=("fabric", "quilt"),
        capabilities=(Capability.FABRIC, Capability.QUILT),
        reader=_read_loom_version,
    ),
)


class GameVersionResolver:
    """游戏版本解析器"""

    def __init__(
        self,
        environment: BuildEnvironment,
        providers: Sequence[FallbackProvider] = DEFAULT_PROVIDERS,
    ):
        self.environment = environment
        self.providers = list(providers)

    def fallback_versions(self, loaders: Sequence[str]) -> List[str]:
        """
        按提供者顺序读取回退版本

        Raises:
            ConfigError: 提供者适用但读不到版本
        """
        versions = []
        for provider in self.providers:
            if not provider.applies(loaders, self.environment):
                continue
            version = provider.reader(self.environment)
            if not version:
                raise ConfigError(
                    f"{provider.name} did not record a game version",
                    context={"provider": provider.name},
                )
            logger.debug(f"从 {provider.name} 添加回退游戏版本 {version}")
            versions.append(version)
        return versions

    def resolve(self, draft: ConfigDraft) -> None:
        """
        在未指定游戏版本时自动补全，需在加载器确定后调用

        Raises:
            ConfigError: 补全后仍没有任何游戏版本
        """
        if not draft.game_versions:
            for version in self.fallback_versions(draft.loaders):
                draft.add_game_version(version)

        if not draft.game_versions:
            raise ConfigError("no game versions specified")
