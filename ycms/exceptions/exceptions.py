"""业务异常类定义

定义内容管理核心使用的异常类体系。
"""

import copy
from typing import Optional, List, Any, Dict, Union
from fastapi import status
from enum import Enum


class ErrorCode(str, Enum):
    """错误代码枚举

    继承自 str，可以直接作为字符串使用。

    使用示例:
        from ycms.exceptions import ErrorCode, ResourceNotFoundException

        raise ResourceNotFoundException(
            "菜单项不存在",
            code=ErrorCode.MENU_NOT_FOUND
        )
    """

    # ==================== 通用错误 ====================
    BUSINESS_ERROR = "BUSINESS_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"

    # ==================== 资源相关 (404) ====================
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    MENU_NOT_FOUND = "MENU_NOT_FOUND"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    NO_DEFAULT = "NO_DEFAULT"

    # ==================== 数据完整性 (500) ====================
    MALFORMED_TREE = "MALFORMED_TREE"

    # ==================== 验证相关 (422) ====================
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_POSITIONS = "INVALID_POSITIONS"
    DEFAULT_REQUIRED = "DEFAULT_REQUIRED"
    CONFIG_LOCKED = "CONFIG_LOCKED"

    # ==================== 服务相关 (503) ====================
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    DATABASE_ERROR = "DATABASE_ERROR"


# 类型别名，支持枚举和字符串
ErrorCodeType = Union[str, ErrorCode]


class BusinessException(Exception):
    """业务异常基类

    所有异常都继承此类。

    属性:
        message: 错误消息
        code: 错误代码（ErrorCode 枚举或字符串）
        status_code: 边界层映射使用的 HTTP 状态码
        details: 详细错误信息列表
        extra: 额外的上下文信息

    使用示例:
        raise BusinessException(
            message="模板保存失败",
            code=ErrorCode.VALIDATION_ERROR,
            extra={"template_id": 3}
        )
    """

    def __init__(
        self,
        message: str,
        code: ErrorCodeType = ErrorCode.BUSINESS_ERROR,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or []
        self.extra = extra
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式

        Returns:
            包含异常信息的字典
        """
        return {
            "message": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "details": copy.deepcopy(self.details),
            "extra": copy.deepcopy(self.extra)
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"status_code={self.status_code})"
        )


class ResourceNotFoundException(BusinessException):
    """资源不存在异常

    显式按 ID / 键查找且加载后仍不存在时抛出。调用方可恢复，
    通常在边界层映射为 404。

    使用示例:
        raise ResourceNotFoundException(
            "菜单不存在",
            code=ErrorCode.MENU_NOT_FOUND,
            resource_type="menu",
            resource_id=12
        )
    """

    def __init__(
        self,
        message: str = "资源不存在",
        code: ErrorCodeType = ErrorCode.RESOURCE_NOT_FOUND,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            **extra
        )


class NoDefaultException(BusinessException):
    """缺少默认节点异常

    需要默认菜单项或默认模板，但从未配置过时抛出。
    """

    def __init__(
        self,
        message: str = "未设置默认项",
        code: ErrorCodeType = ErrorCode.NO_DEFAULT,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            **extra
        )


class MalformedTreeException(BusinessException):
    """树数据损坏异常

    行顺序或根节点约定被破坏（例如第一行不是根节点）。
    属于数据损坏或调用方错误，不重试。
    """

    def __init__(
        self,
        message: str = "树结构数据不合法",
        code: ErrorCodeType = ErrorCode.MALFORMED_TREE,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            **extra
        )


class InvalidArgumentException(BusinessException, TypeError):
    """参数错误异常

    编程错误（例如向解析器传入非字符串），运行时不可恢复。
    同时是 TypeError 的子类，便于按 Python 习惯捕获。
    """

    def __init__(
        self,
        message: str = "参数不合法",
        code: ErrorCodeType = ErrorCode.INVALID_ARGUMENT,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            **extra
        )


class ValidationException(BusinessException):
    """数据验证异常

    使用示例:
        raise ValidationException(
            "区块必须以整数 ID 注册",
            code=ErrorCode.INVALID_POSITIONS,
            details=["sidebar: 'abc'"]
        )
    """

    def __init__(
        self,
        message: str = "数据验证失败",
        code: ErrorCodeType = ErrorCode.VALIDATION_ERROR,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            **extra
        )


class ServiceUnavailableException(BusinessException):
    """服务不可用异常

    依赖的存储无法完成写入时抛出（例如分类根节点创建失败）。
    """

    def __init__(
        self,
        message: str = "服务暂时不可用",
        code: ErrorCodeType = ErrorCode.SERVICE_UNAVAILABLE,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
            **extra
        )


class Err:
    """异常快捷创建类

    提供统一入口，只需导入一个类即可创建所有类型的异常。

    使用示例:
        from ycms.exceptions import Err

        raise Err.not_found("菜单不存在", resource_type="menu", resource_id=3)
        raise Err.malformed_tree("第一行必须是根节点")
        raise Err.no_default("未设置默认菜单项")
        raise Err.invalid_argument("解析数据必须是字符串")
    """

    @staticmethod
    def not_found(message: str = "资源不存在", **kwargs) -> ResourceNotFoundException:
        """资源不存在 (404)"""
        return ResourceNotFoundException(message, **kwargs)

    @staticmethod
    def no_default(message: str = "未设置默认项", **kwargs) -> NoDefaultException:
        """缺少默认节点 (404)"""
        return NoDefaultException(message, **kwargs)

    @staticmethod
    def malformed_tree(message: str = "树结构数据不合法", **kwargs) -> MalformedTreeException:
        """树数据损坏 (500)"""
        return MalformedTreeException(message, **kwargs)

    @staticmethod
    def invalid_argument(message: str = "参数不合法", **kwargs) -> InvalidArgumentException:
        """参数错误 (500)"""
        return InvalidArgumentException(message, **kwargs)

    @staticmethod
    def invalid(message: str = "数据验证失败", **kwargs) -> ValidationException:
        """数据验证失败 (422)"""
        return ValidationException(message, **kwargs)

    @staticmethod
    def unavailable(message: str = "服务暂时不可用", **kwargs) -> ServiceUnavailableException:
        """服务不可用 (503)"""
        return ServiceUnavailableException(message, **kwargs)
