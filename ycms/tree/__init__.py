"""树模块

嵌套集合树引擎：节点记录、行数据来源和带缓存的树存储。

使用示例:
    from ycms.tree import TreeStore, SqlRowSource, MenuNode

    store = TreeStore(SqlRowSource(MenuItem, session_factory), node_class=MenuNode)
    for root in store.get_roots().values():
        print(root.title, [n.title for n in store.get_items(root.id)])
"""

from .node import TreeNode, MenuNode, CategoryNode, STRUCTURE_FIELDS
from .row_source import RowSource, SqlRowSource
from .store import TreeStore

__all__ = [
    "TreeNode",
    "MenuNode",
    "CategoryNode",
    "STRUCTURE_FIELDS",
    "RowSource",
    "SqlRowSource",
    "TreeStore",
]
