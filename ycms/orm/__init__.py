"""ORM 模块

提供内容表模型和数据库会话管理。

使用示例:
    from ycms.orm import init_database, create_all, db_session_scope, MenuItem

    engine, factory = init_database("sqlite:///./cms.db")
    create_all()
"""

from .models import (
    Base,
    NestedSetFieldsMixin,
    SeoFieldsMixin,
    MenuItem,
    Category,
    Template,
    Block,
    ConfigEntry,
    row_to_dict,
)

from .db_session import (
    db_manager,
    init_database,
    get_engine,
    get_session_factory,
    db_session_scope,
    create_all,
)

__all__ = [
    "Base",
    "NestedSetFieldsMixin",
    "SeoFieldsMixin",
    "MenuItem",
    "Category",
    "Template",
    "Block",
    "ConfigEntry",
    "row_to_dict",
    "db_manager",
    "init_database",
    "get_engine",
    "get_session_factory",
    "db_session_scope",
    "create_all",
]
