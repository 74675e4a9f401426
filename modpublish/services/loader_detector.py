"""
加载器检测服务

根据构建环境中启用的插件推断模组加载器。
"""

from typing import Dict, List

from loguru import logger

from modpublish.environment import BuildEnvironment, Capability
from modpublish.exceptions import ConfigError
from modpublish.models import ConfigDraft


LOADER_CAPABILITIES: Dict[Capability, str] = {
    Capability.FORGE: "forge",
    Capability.FABRIC: "fabric",
    Capability.QUILT: "quilt",
    Capability.SPONGE: "sponge",
    Capability.PAPER: "paper",
}


class LoaderDetector:
    """加载器检测器"""

    def __init__(self, environment: BuildEnvironment):
        self.environment = environment

    def detect(self) -> List[str]:
        """返回构建环境中存在能力的加载器列表"""
        loaders = []
        for capability, loader in LOADER_CAPABILITIES.items():
            if self.environment.has_capability(capability):
                logger.debug(f"检测到插件 {capability.value}，添加加载器 {loader}")
                loaders.append(loader)
        return loaders

    def resolve(self, draft: ConfigDraft) -> None:
        """
        在未指定加载器时自动补全

        Raises:
            ConfigError: 补全后仍没有任何加载器
        """
        if not draft.loaders and draft.detect_loaders:
            for loader in self.detect():
                draft.add_loader(loader)

        if not draft.loaders:
            raise ConfigError("no loaders specified")
