"""
依赖映射服务

将用户声明的依赖转换为 Modrinth 可识别的依赖记录。
"""

from typing import List, Sequence

from loguru import logger

from modpublish.models import ProtoDependency, ResolvedDependency
from modpublish.services.api_client import ModrinthClient
from modpublish.exceptions import DependencyResolutionError


class DependencyMapper:
    """依赖映射器"""

    def __init__(self, client: ModrinthClient):
        self.client = client

    async def map_one(self, dependency: ProtoDependency) -> ResolvedDependency:
        """
        解析单个依赖

        项目引用通过 API 解析为项目 ID，版本与文件名原样传递。

        Raises:
            DependencyResolutionError: 项目不存在
        """
        project_id = None
        if dependency.project:
            project_id = await self.client.get_dependency_project_id(
                dependency.project
            )
            if not project_id:
                raise DependencyResolutionError(
                    f"dependency project not found: {dependency.project}",
                    context={"project": dependency.project},
                )
            logger.debug(f"依赖 {dependency.project} 解析为 {project_id}")

        return ResolvedDependency(
            project_id=project_id,
            version_id=dependency.version,
            file_name=dependency.file_name,
            dependency_type=dependency.dependency_type,
        )

    async def map(
        self, dependencies: Sequence[ProtoDependency]
    ) -> List[ResolvedDependency]:
        """按声明顺序解析全部依赖，任一失败即中止"""
        results = []
        for dependency in dependencies:
            results.append(await self.map_one(dependency))
        return results
