"""
主协调器

整合所有服务层组件，实现“解析元数据 → 构建请求 → 上传”的流程编排。
"""

import dataclasses
import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from loguru import logger

from modpublish import __version__
from modpublish.environment import BuildEnvironment
from modpublish.models import ConfigDraft, ConfigSnapshot, UploadRequest, UploadResult
from modpublish.services import (
    ModrinthClient,
    LoaderDetector,
    GameVersionResolver,
    DependencyMapper,
    FileResolver,
    build_request,
)
from modpublish.exceptions import APINotFoundError, UploadError
from modpublish.utils import version_web_url


class RunState(Enum):
    """上传任务状态"""

    START = "start"
    RESOLVING_METADATA = "resolving_metadata"
    BUILDING_REQUEST = "building_request"
    DEBUG_EXIT = "debug_exit"
    UPLOADING = "uploading"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class UploadOutcome:
    """一次运行的结果"""

    state: RunState
    result: Optional[UploadResult] = None
    error: Optional[Exception] = None
    request: Optional[UploadRequest] = None

    @property
    def failed(self) -> bool:
        return self.state is RunState.FAILED


class UploadOrchestrator:
    """ModPublish 主协调器"""

    def __init__(
        self,
        draft: ConfigDraft,
        environment: Union[BuildEnvironment, Callable[[], BuildEnvironment]],
        client: ModrinthClient,
        base_dir: Union[str, Path] = ".",
    ):
        self.draft = draft
        self.environment = environment
        self.client = client
        self.dependency_mapper = DependencyMapper(client)
        self.file_resolver = FileResolver(base_dir)

        self.state = RunState.START
        self.snapshot: Optional[ConfigSnapshot] = None
        self.result: Optional[UploadResult] = None

    async def run(self) -> UploadOutcome:
        """
        执行完整的上传流程

        流水线中的任何异常都不会抛出，而是以 FAILED 状态返回。
        每个实例只能执行一次。
        """
        if self.state is not RunState.START:
            raise RuntimeError("上传任务已执行过，不能重复执行")

        logger.info(f"ModPublish: {__version__}")
        request = None
        try:
            self.snapshot = self._resolve_metadata()
            request = await self._build_request(self.snapshot)

            if self.snapshot.debug_mode:
                logger.info(
                    "待上传的完整数据: "
                    + json.dumps(request.describe(), indent=2, ensure_ascii=False)
                )
                logger.info("调试模式已启用，不会上传该版本")
                self.state = RunState.DEBUG_EXIT
                return UploadOutcome(RunState.DEBUG_EXIT, request=request)

            self.result = await self._upload(self.snapshot, request)
            self.state = RunState.SUCCESS
            return UploadOutcome(RunState.SUCCESS, result=self.result, request=request)

        except Exception as e:
            self.state = RunState.FAILED
            return UploadOutcome(RunState.FAILED, error=e, request=request)

    async def apply(self) -> UploadOutcome:
        """
        运行并应用错误策略

        fail_silently 时仅记录日志；否则以 UploadError 包装原始异常抛出。
        """
        outcome = await self.run()
        if outcome.failed:
            if self.draft.fail_silently:
                logger.info("上传至 Modrinth 失败，详情请查看日志")
                logger.opt(exception=outcome.error).error("Modrinth 上传失败（已静默处理）")
            else:
                raise UploadError(
                    f"Failed to upload file to Modrinth! {outcome.error}",
                    context={"state": self.state.value},
                ) from outcome.error
        return outcome

    def _resolve_metadata(self) -> ConfigSnapshot:
        """补全版本号、加载器与游戏版本，然后冻结配置"""
        self.state = RunState.RESOLVING_METADATA
        draft = self.draft

        # 构建环境可延迟创建
        if not isinstance(self.environment, BuildEnvironment):
            self.environment = self.environment()

        if not draft.version_number:
            draft.version_number = self.environment.project_version()
        if draft.version_name is None:
            draft.version_name = draft.version_number

        LoaderDetector(self.environment).resolve(draft)
        GameVersionResolver(self.environment).resolve(draft)

        snapshot = draft.freeze()
        logger.debug(
            f"加载器: {list(snapshot.loaders)}, 游戏版本: {list(snapshot.game_versions)}"
        )
        return snapshot

    async def _build_request(self, snapshot: ConfigSnapshot) -> UploadRequest:
        # 先解析文件，保证文件缺失时不会发出任何网络请求
        files = self.file_resolver.resolve_all(
            snapshot.upload_file, snapshot.additional_files
        )
        dependencies = await self.dependency_mapper.map(snapshot.dependencies)

        self.state = RunState.BUILDING_REQUEST
        return build_request(snapshot, dependencies, files)

    async def _upload(
        self, snapshot: ConfigSnapshot, request: UploadRequest
    ) -> UploadResult:
        self.state = RunState.UPLOADING

        project_id = await self.client.get_project_id(snapshot.project_id)
        if not project_id:
            raise APINotFoundError(f"project not found: {snapshot.project_id}")
        logger.debug(f"上传版本至项目 {project_id}")

        request = dataclasses.replace(request, project_id=project_id)
        data = await self.client.create_version(request)

        result = UploadResult.from_modrinth(
            data, version_web_url(snapshot.api_url, project_id, data.get("id", ""))
        )
        logger.success(
            f"成功上传版本 {result.version_number} 至 {snapshot.project_id} "
            f"({project_id})，版本 ID {result.version_id}。{result.web_url}"
        )
        return result
