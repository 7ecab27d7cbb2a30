"""模板模块

- TemplateAssignment: 位置 -> 区块 ID 列表
- TemplateManager: 当前模板的加载与切换
- TemplateSource / SqlTemplateSource: 模板读取与保存
"""

from .assignment import TemplateAssignment, decode_positions
from .manager import TemplateManager, DEFAULT_TEMPLATE_TEXT
from .source import (
    TemplateSource,
    SqlTemplateSource,
    prepare_positions,
    demote_previous_default,
    UNREGISTERED_POSITION,
)

__all__ = [
    "TemplateAssignment",
    "decode_positions",
    "TemplateManager",
    "DEFAULT_TEMPLATE_TEXT",
    "TemplateSource",
    "SqlTemplateSource",
    "prepare_positions",
    "demote_previous_default",
    "UNREGISTERED_POSITION",
]
