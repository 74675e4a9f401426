"""
日志模块

使用 loguru 输出上传流程日志。
"""

import os
import sys
from typing import Optional

from loguru import logger


LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"


def _default_level() -> str:
    """MODPUBLISH_LOG_LEVEL 优先，其次 MODPUBLISH_DEBUG=1 时为 DEBUG"""
    if level := os.environ.get("MODPUBLISH_LOG_LEVEL"):
        return level.upper()
    return "DEBUG" if os.environ.get("MODPUBLISH_DEBUG", "0") == "1" else "INFO"


def setup_logger(
    level: Optional[str] = None,
    sink=sys.stderr,
    colorize: bool = True,
) -> None:
    """
    设置日志记录器

    Args:
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR)，为空时读取环境变量
        sink: 输出目标
        colorize: 是否启用颜色
    """
    level = level or _default_level()
    debug = level == "DEBUG"

    logger.remove()
    logger.add(
        sink=sink,
        format=LOG_FORMAT,
        level=level,
        colorize=colorize,
        backtrace=debug,
        diagnose=debug,
    )
    logger.debug("DEBUG 日志已启用")


__all__ = ["logger", "setup_logger"]
