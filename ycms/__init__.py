"""
YCMS - 内容管理核心

提供嵌套集合菜单/分类管理、模板位置分配、区块注册、布局 include 解析和基于菜单的地址路由
"""

from .version import __version__, __author__, __description__

# 导出配置
from .config import (
    AppSettings,
    CmsSettings,
    DatabaseSettings,
    LoggingSettings,
    load_yaml_config,
)

# 导出异常
from .exceptions import (
    BusinessException,
    ResourceNotFoundException,
    NoDefaultException,
    MalformedTreeException,
    InvalidArgumentException,
    ValidationException,
    ServiceUnavailableException,
    Err,
    ErrorCode,
)

# 导出ORM
from .orm import (
    MenuItem,
    Category,
    Template,
    Block,
    ConfigEntry,
    init_database,
    db_session_scope,
    create_all,
)

# 导出树引擎与管理器
from .tree import TreeNode, MenuNode, CategoryNode, TreeStore, SqlRowSource
from .managers import MenuManager, CategoryManager, ConfigManager, SqlConfigSource

# 导出模板、区块、解析与路由
from .template import TemplateAssignment, TemplateManager, SqlTemplateSource
from .blocks import BlockRegistry, SqlBlockProvider
from .parser import IncludeStatementParser, IncludeTokenizer
from .routing import MenuUrlRouter
from .page import PageAssembler
from .factory import CmsComponents, create_cms

# 导出日志
from .log import setup_logger, setup_root_logger, get_logger

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    # 配置
    "AppSettings",
    "CmsSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "load_yaml_config",
    # 异常
    "BusinessException",
    "ResourceNotFoundException",
    "NoDefaultException",
    "MalformedTreeException",
    "InvalidArgumentException",
    "ValidationException",
    "ServiceUnavailableException",
    "Err",
    "ErrorCode",
    # ORM
    "MenuItem",
    "Category",
    "Template",
    "Block",
    "ConfigEntry",
    "init_database",
    "db_session_scope",
    "create_all",
    # 树
    "TreeNode",
    "MenuNode",
    "CategoryNode",
    "TreeStore",
    "SqlRowSource",
    "MenuManager",
    "CategoryManager",
    "ConfigManager",
    "SqlConfigSource",
    # 页面组装
    "TemplateAssignment",
    "TemplateManager",
    "SqlTemplateSource",
    "BlockRegistry",
    "SqlBlockProvider",
    "IncludeStatementParser",
    "IncludeTokenizer",
    "MenuUrlRouter",
    "PageAssembler",
    "CmsComponents",
    "create_cms",
    # 日志
    "setup_logger",
    "setup_root_logger",
    "get_logger",
]
