"""
ModPublish 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和 JSON 序列化。
"""

from typing import Any, Dict, Optional


class ModPublishError(Exception):
    """ModPublish 基础异常类"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._get_default_code()
        self.context = context or {}

    def _get_default_code(self) -> str:
        """获取默认错误代码"""
        return "E000"

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ConfigError(ModPublishError):
    """配置缺失或无效（加载器、游戏版本、文件、版本类型等）"""

    def _get_default_code(self) -> str:
        return "E100"


class ConfigParseError(ConfigError):
    """配置解析错误"""

    def _get_default_code(self) -> str:
        return "E101"


class ConfigValidationError(ConfigError):
    """配置验证错误"""

    def _get_default_code(self) -> str:
        return "E102"


class DependencyResolutionError(ModPublishError):
    """声明的依赖项目无法解析"""

    def _get_default_code(self) -> str:
        return "E150"


class APIError(ModPublishError):
    """API 相关错误"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        status: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message, code, context)
        self.status = status
        if status is not None:
            self.context["status_code"] = status
        if url:
            self.context["url"] = url

    def _get_default_code(self) -> str:
        return "E200"


class APINetworkError(APIError):
    """网络传输错误"""

    def _get_default_code(self) -> str:
        return "E201"


class APIValidationError(APIError):
    """请求被服务端拒绝（数据无效）"""

    def _get_default_code(self) -> str:
        return "E400"


class APIAuthError(APIError):
    """认证失败或权限不足"""

    def _get_default_code(self) -> str:
        return "E401"


class APINotFoundError(APIError):
    """API 资源不存在"""

    def _get_default_code(self) -> str:
        return "E404"


class APIRateLimitError(APIError):
    """API 速率限制"""

    def _get_default_code(self) -> str:
        return "E429"


class APIServerError(APIError):
    """API 服务器错误"""

    def _get_default_code(self) -> str:
        return "E500"


class UploadError(ModPublishError):
    """上传任务的致命失败（包装原始异常）"""

    def _get_default_code(self) -> str:
        return "E900"


__all__ = [
    # 基础异常
    "ModPublishError",
    # 配置异常
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    # 依赖异常
    "DependencyResolutionError",
    # API 异常
    "APIError",
    "APINetworkError",
    "APIValidationError",
    "APIAuthError",
    "APINotFoundError",
    "APIRateLimitError",
    "APIServerError",
    # 上传异常
    "UploadError",
]
