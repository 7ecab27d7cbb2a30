"""管理器模块

- MenuManager: 菜单树，默认菜单、激活菜单项、按属性查找
- CategoryManager: 按模块划分的分类树
- ConfigManager: 按分区保存的键值配置
"""

from .menu import MenuManager
from .category import CategoryManager
from .config import (
    ConfigManager,
    ConfigRule,
    ConfigSection,
    ConfigSource,
    SectionRule,
    SqlConfigSource,
)

__all__ = [
    "MenuManager",
    "CategoryManager",
    "ConfigManager",
    "ConfigRule",
    "ConfigSection",
    "ConfigSource",
    "SectionRule",
    "SqlConfigSource",
]
