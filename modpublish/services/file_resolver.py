"""
文件解析服务

将各种文件引用（路径、延迟产物、惰性函数）解析为已存在的文件。
"""

import os
from pathlib import Path
from typing import List, Optional, Sequence, Union

from loguru import logger

from modpublish.models import ArtifactRef, FileRef
from modpublish.exceptions import ConfigError


class FileResolver:
    """文件解析器"""

    def __init__(self, base_dir: Union[str, Path] = "."):
        self.base_dir = Path(base_dir)

    def resolve(self, ref: FileRef) -> Optional[Path]:
        """
        将文件引用解析为路径（不检查是否存在）

        Returns:
            解析得到的路径，无法解析时返回 None
        """
        if ref is None:
            return None
        if isinstance(ref, ArtifactRef):
            return self._resolve_artifact(ref)
        if isinstance(ref, (str, os.PathLike)):
            if not str(ref):
                return None
            path = Path(ref)
            return path if path.is_absolute() else self.base_dir / path
        if callable(ref):
            return self.resolve(ref())
        return None

    def _resolve_artifact(self, ref: ArtifactRef) -> Optional[Path]:
        """取目录中匹配 pattern 且最新修改的文件"""
        directory = self.resolve(ref.directory)
        if directory is None or not directory.is_dir():
            return None
        candidates = [p for p in directory.glob(ref.pattern) if p.is_file()]
        if not candidates:
            return None
        return max(candidates, key=lambda p: p.stat().st_mtime)

    def resolve_all(
        self, primary: FileRef, additional: Sequence[FileRef] = ()
    ) -> List[Path]:
        """
        解析主文件与附加文件，主文件在前

        Raises:
            ConfigError: 任一文件无法解析或不存在
        """
        primary_path = self.resolve(primary)
        if primary_path is None:
            raise ConfigError("upload file is missing or null")
        if not primary_path.is_file():
            raise ConfigError(
                f"upload file missing: {primary}", context={"path": str(primary_path)}
            )

        files = [primary_path]
        for ref in additional:
            path = self.resolve(ref)
            if path is None or not path.is_file():
                raise ConfigError(f"upload file missing: {ref}")
            files.append(path)

        logger.debug(f"待上传文件: {[str(f) for f in files]}")
        return files
