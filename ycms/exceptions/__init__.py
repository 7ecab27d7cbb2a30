"""异常处理模块

提供内容管理核心使用的异常类体系。

使用示例:
    from ycms.exceptions import Err

    def get_menu_item(item_id: int):
        item = store.search_items(lambda node: node.id == item_id)
        if item is None:
            raise Err.not_found("菜单项不存在", resource_id=item_id)
        return item
"""

from .exceptions import (
    # ===== 推荐使用 =====
    Err,                            # 异常快捷创建类
    ErrorCode,                      # 错误代码枚举
    ErrorCodeType,

    # ===== 高级用法 =====
    BusinessException,              # 异常基类
    ResourceNotFoundException,      # 404
    NoDefaultException,             # 404
    MalformedTreeException,         # 500
    InvalidArgumentException,       # 500 / TypeError
    ValidationException,            # 422
    ServiceUnavailableException,    # 503
)

__all__ = [
    "Err",
    "ErrorCode",
    "ErrorCodeType",
    "BusinessException",
    "ResourceNotFoundException",
    "NoDefaultException",
    "MalformedTreeException",
    "InvalidArgumentException",
    "ValidationException",
    "ServiceUnavailableException",
]
