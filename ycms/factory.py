"""组件装配

按配置创建并连接全部组件，所有依赖通过构造函数注入。

使用示例:
    from ycms import AppSettings, create_cms, init_database

    settings = AppSettings()
    engine, session_factory = init_database(config=settings.database)

    cms = create_cms(settings.cms, session_factory)
    cms.menus.init()
    route = cms.router.parse_request("company/about.html")
    html = cms.page.render(layout)
"""

from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.orm import Session

from .blocks import BlockContentProvider, BlockRegistry, SqlBlockProvider
from .config import CmsSettings
from .managers import CategoryManager, ConfigManager, MenuManager, SqlConfigSource
from .orm import Category, MenuItem
from .page import PageAssembler
from .parser import IncludeStatementParser
from .routing import MenuUrlRouter
from .template import SqlTemplateSource, TemplateManager
from .tree import SqlRowSource


@dataclass
class CmsComponents:
    """装配好的组件容器"""

    settings: CmsSettings
    menus: MenuManager
    categories: CategoryManager
    config: ConfigManager
    templates: TemplateManager
    blocks: BlockRegistry
    router: MenuUrlRouter
    parser: IncludeStatementParser
    page: PageAssembler


def create_cms(
    settings: Optional[CmsSettings] = None,
    session_factory: Callable[[], Session] = None,
    block_provider: Optional[BlockContentProvider] = None,
) -> CmsComponents:
    """创建组件

    Args:
        settings: 内容管理配置，默认 CmsSettings()
        session_factory: 返回 Session 的可调用对象
        block_provider: 自定义区块内容提供者，默认从区块表读取

    Returns:
        CmsComponents 容器
    """
    if session_factory is None:
        raise ValueError("session_factory 是必需的")
    settings = settings or CmsSettings()

    menus = MenuManager.from_settings(SqlRowSource(MenuItem, session_factory), settings)
    categories = CategoryManager(SqlRowSource(Category, session_factory))
    config = ConfigManager.from_settings(SqlConfigSource(session_factory), settings)
    templates = TemplateManager.from_settings(SqlTemplateSource(session_factory), settings)
    blocks = BlockRegistry(block_provider or SqlBlockProvider(session_factory))
    router = MenuUrlRouter.from_settings(menus, settings)
    parser = IncludeStatementParser.from_settings(settings, router=router)
    page = PageAssembler(
        templates,
        blocks,
        parser,
        enable_dynamic_content=settings.enable_dynamic_content,
    )

    return CmsComponents(
        settings=settings,
        menus=menus,
        categories=categories,
        config=config,
        templates=templates,
        blocks=blocks,
        router=router,
        parser=parser,
        page=page,
    )
