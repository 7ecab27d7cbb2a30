"""区块注册表

渲染阶段按模板的位置分配把区块 HTML 片段登记到各个位置，供解析器替换
include 语句。区块的渲染由 BlockContentProvider 负责。
"""

import html
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..exceptions import Err
from ..log import get_logger
from ..orm.models import Block, row_to_dict

logger = get_logger()


class BlockContentProvider(Protocol):
    """区块内容提供者协议

    返回 {区块ID: HTML}，只包含启用的区块，未知 ID 直接跳过。
    """

    def render_blocks(self, ids: Sequence[int]) -> Mapping[int, str]:
        ...


def render_block_row(row: Mapping[str, Any]) -> str:
    """默认区块渲染：可选的标题加上区块内容"""
    content = row.get("content") or ""
    if row.get("show_title") and row.get("title"):
        return f"<h3>{html.escape(row['title'])}</h3>\n{content}"
    return content


class SqlBlockProvider:
    """从区块表读取并渲染区块

    Args:
        session_factory: 返回 Session 的可调用对象
        renderer: 把一行区块数据渲染为 HTML 的函数，默认 render_block_row
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        renderer: Optional[Callable[[Mapping[str, Any]], str]] = None,
    ):
        self.session_factory = session_factory
        self.renderer = renderer or render_block_row

    def render_blocks(self, ids: Sequence[int]) -> Dict[int, str]:
        if not ids:
            return {}
        stmt = select(Block).where(Block.id.in_(list(ids)), Block.state == 1)
        with self.session_factory() as session:
            rows = [row_to_dict(obj) for obj in session.scalars(stmt)]
        return {row["id"]: self.renderer(row) for row in rows}


class BlockRegistry:
    """区块注册表

    使用示例:
        registry = BlockRegistry(SqlBlockProvider(session_factory))
        registry.register_positions({"sidebar": [4, 7]})
        registry.add_block("footer", "<p>(c) 2024</p>")
        registry.get_blocks()   # {"sidebar": [...], "footer": ["<p>(c) 2024</p>"]}
    """

    def __init__(self, provider: Optional[BlockContentProvider] = None):
        self.provider = provider
        self._blocks: Dict[str, List[str]] = {}

    def add_block(self, position: str, content: str):
        self._blocks.setdefault(position, []).append(content)

    def register_positions(self, positions: Mapping[str, Sequence[int]]):
        """渲染位置分配中的区块并按分配顺序登记

        每个区块 ID 只渲染一次；停用或不存在的区块被跳过。

        Raises:
            InvalidArgumentException: 没有配置区块内容提供者
        """
        if self.provider is None:
            raise Err.invalid_argument("未配置区块内容提供者")

        ids: List[int] = []
        for block_ids in positions.values():
            for block_id in block_ids:
                if block_id not in ids:
                    ids.append(block_id)

        rendered = self.provider.render_blocks(ids) if ids else {}
        for position, block_ids in positions.items():
            for block_id in block_ids:
                if block_id in rendered:
                    self.add_block(position, rendered[block_id])
                else:
                    logger.debug(f"区块 {block_id} 未启用或不存在，位置 {position} 跳过")

    def get_blocks(self, position: Optional[str] = None):
        """获取登记的区块

        Returns:
            不传 position 时返回 {位置: [HTML]}，否则返回该位置的 HTML 列表
        """
        if position is None:
            return {name: list(contents) for name, contents in self._blocks.items()}
        return list(self._blocks.get(position, []))

    def clear(self):
        self._blocks = {}
