"""区块模块"""

from .registry import (
    BlockContentProvider,
    BlockRegistry,
    SqlBlockProvider,
    render_block_row,
)

__all__ = [
    "BlockContentProvider",
    "BlockRegistry",
    "SqlBlockProvider",
    "render_block_row",
]
