"""测试辅助工具模块

提供协议的内存实现和种子数据，避免在核心代码中添加测试专用方法。
"""

from .fakes import (
    menu_rows,
    category_rows,
    template_rows,
    ListRowSource,
    DictTemplateSource,
    DictBlockProvider,
    MappingRouter,
)

__all__ = [
    # 种子数据
    'menu_rows',
    'category_rows',
    'template_rows',
    # 协议实现
    'ListRowSource',
    'DictTemplateSource',
    'DictBlockProvider',
    'MappingRouter',
]
