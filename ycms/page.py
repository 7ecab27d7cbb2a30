"""页面组装

把布局标记组装成最终页面：
    布局中的位置 -> 当前模板的区块分配 -> 渲染区块 -> 替换 include 语句并重写地址
"""

from .blocks import BlockRegistry
from .log import get_logger
from .parser import IncludeStatementParser
from .template import TemplateManager

logger = get_logger()


class PageAssembler:
    """页面组装器

    Args:
        template_manager: 模板管理器
        block_registry: 区块注册表
        parser: include 语句解析器
        enable_dynamic_content: 为 False 时原样返回布局标记

    使用示例:
        page = PageAssembler(templates, registry, parser)
        html = page.render(layout_markup)
    """

    def __init__(
        self,
        template_manager: TemplateManager,
        block_registry: BlockRegistry,
        parser: IncludeStatementParser,
        enable_dynamic_content: bool = True,
    ):
        self.template_manager = template_manager
        self.block_registry = block_registry
        self.parser = parser
        self.enable_dynamic_content = enable_dynamic_content

    def render_blocks(self, markup: str):
        """登记布局中各位置在当前模板下分配的区块"""
        names = list(self.parser.find_positions(markup))
        if not names:
            return
        template = self.template_manager.load()
        self.block_registry.register_positions(template.get_positions(names))

    def is_position_active(self, position: str) -> bool:
        """当前模板是否给该位置分配了区块

        布局可据此省略空位置的外层标记。
        """
        return bool(self.template_manager.load().get_position(position))

    def render(self, markup: str) -> str:
        """渲染一次页面，结束后清空本次登记的区块"""
        if not self.enable_dynamic_content:
            return markup
        try:
            self.render_blocks(markup)
            return self.parser.run(markup, self.block_registry.get_blocks())
        finally:
            self.block_registry.clear()
