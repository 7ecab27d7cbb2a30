"""嵌套集合树存储

把按 lft 排序的扁平行重建为 根节点 -> 节点 的两级缓存，并提供父节点、祖先、
子节点等只读查询。缓存按需加载，每棵树在存储实例生命周期内最多加载一次。

缓存结构:
    roots: {根节点ID: 根节点}，保持加载顺序
    items: {根节点ID: {节点ID: 节点}}，不含根节点，保持 lft 顺序

使用示例:
    from ycms.tree import TreeStore, SqlRowSource
    from ycms.orm import MenuItem

    store = TreeStore(SqlRowSource(MenuItem, session_factory))
    roots = store.get_roots()
    item = store.get_item(5)
    parent = store.get_parent(item)
"""

import threading
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Type

from ..exceptions import Err, ErrorCode
from ..log import get_logger
from .node import TreeNode
from .row_source import RowSource

logger = get_logger()

Predicate = Callable[[TreeNode], bool]


class TreeStore:
    """嵌套集合树存储

    子类通过 node_class 指定节点类型，通过 not_found_code 指定查找失败时的错误码。
    实例内部使用可重入锁保护缓存，可在多个工作线程之间共享。
    """

    node_class: Type[TreeNode] = TreeNode
    not_found_code = ErrorCode.RESOURCE_NOT_FOUND

    def __init__(self, row_source: RowSource, node_class: Optional[Type[TreeNode]] = None):
        self.row_source = row_source
        if node_class is not None:
            self.node_class = node_class
        self._lock = threading.RLock()
        self._roots: Dict[int, TreeNode] = {}
        self._items: Dict[int, Dict[int, TreeNode]] = {}
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        """是否已执行过全量加载"""
        return self._loaded

    # ==================== 构建 ====================

    def create_node(self, row: Mapping[str, Any]) -> TreeNode:
        return self.node_class.from_row(row)

    def _build_into(
        self,
        rows: Iterable[Mapping[str, Any]],
        roots: Dict[int, TreeNode],
        items: Dict[int, Dict[int, TreeNode]],
    ):
        root_id = None
        for row in rows:
            node = self.create_node(row)
            if node.is_root:
                root_id = node.id
                roots[root_id] = node
                items[root_id] = {}
            elif root_id is None:
                logger.error(f"树数据第一行不是根节点: {self.__class__.__name__} node={node.id}")
                raise Err.malformed_tree(
                    "树数据必须以根节点（lft == 1）开始",
                    node_id=node.id,
                )
            else:
                items[root_id][node.id] = node

    def build_tree(self, rows: Iterable[Mapping[str, Any]]):
        """把按 lft 排序的行合并进缓存

        lft == 1 的行开启一棵新树并重置该树的节点表，其余行归入本次调用中最近
        出现的根节点。

        Raises:
            MalformedTreeException: 第一行不是根节点
        """
        with self._lock:
            self._build_into(rows, self._roots, self._items)

    def reset(self):
        """清空缓存"""
        with self._lock:
            self._roots = {}
            self._items = {}
            self._loaded = False
        logger.info(f"{self.__class__.__name__} 缓存已重置")

    # ==================== 加载 ====================

    def load_tree(self, column: str, value: Any) -> bool:
        """加载 column == value 的行所在的整棵树

        Returns:
            是否查到数据
        """
        with self._lock:
            rows = self.row_source.fetch_tree(column, value)
            logger.debug(f"{self.__class__.__name__} 加载树 {column}={value!r}: {len(rows)} 行")
            if not rows:
                return False
            self.build_tree(rows)
            return True

    def get_roots(self, reload: bool = False) -> Dict[int, TreeNode]:
        """获取全部根节点，首次调用或 reload 时全量加载"""
        with self._lock:
            if reload or not self._loaded:
                rows = self.row_source.fetch_all()
                roots: Dict[int, TreeNode] = {}
                items: Dict[int, Dict[int, TreeNode]] = {}
                self._build_into(rows, roots, items)
                self._roots, self._items = roots, items
                self._loaded = True
                logger.debug(f"{self.__class__.__name__} 全量加载: {len(roots)} 棵树, {len(rows)} 行")
            return dict(self._roots)

    def get_root(self, root_id: int) -> TreeNode:
        with self._lock:
            root_id = int(root_id)
            if root_id not in self._roots:
                self.load_tree("id", root_id)
            if root_id not in self._roots:
                raise Err.not_found(
                    f"根节点不存在: {root_id}",
                    code=self.not_found_code,
                    resource_id=root_id,
                )
            return self._roots[root_id]

    def get_items(self, root_id: int) -> List[TreeNode]:
        """获取一棵树的全部非根节点（lft 顺序）

        Raises:
            ResourceNotFoundException: 没有以 root_id 为根的树
        """
        with self._lock:
            root_id = int(root_id)
            if root_id not in self._items:
                self.load_tree("id", root_id)
            if root_id not in self._items:
                raise Err.not_found(
                    f"树不存在: {root_id}",
                    code=self.not_found_code,
                    resource_id=root_id,
                )
            return list(self._items[root_id].values())

    def get_item(self, node_id: int) -> TreeNode:
        """按 ID 获取非根节点，缓存未命中时加载其所在的树"""
        with self._lock:
            node_id = int(node_id)
            node = self._find_item(node_id)
            if node is None and self.load_tree("id", node_id):
                node = self._find_item(node_id)
            if node is None:
                raise Err.not_found(
                    f"节点不存在: {node_id}",
                    code=self.not_found_code,
                    resource_id=node_id,
                )
            return node

    def _find_item(self, node_id: int) -> Optional[TreeNode]:
        for items in self._items.values():
            if node_id in items:
                return items[node_id]
        return None

    # ==================== 缓存查询 ====================

    def _tree_nodes(self, tree_id: int) -> Iterator[TreeNode]:
        """按树顺序遍历缓存中某棵树的节点（根节点在前）"""
        for root_id, root in list(self._roots.items()):
            if root.tree == tree_id:
                yield root
                yield from self._items.get(root_id, {}).values()

    def root_of(self, node: TreeNode) -> Optional[TreeNode]:
        """缓存中节点所在树的根节点"""
        with self._lock:
            for root in self._roots.values():
                if root.tree == node.tree:
                    return root
            return None

    def get_parent(self, node: TreeNode) -> Optional[TreeNode]:
        """获取父节点（只查缓存）

        根节点和未保存的节点（id 为 0）没有父节点。第一层节点的父节点是根节点。
        """
        if node.is_root or not node.id:
            return None
        with self._lock:
            for candidate in self._tree_nodes(node.tree):
                if candidate.depth == node.depth - 1 and candidate.contains(node):
                    return candidate
            return None

    def get_ancestors(self, node: TreeNode) -> List[TreeNode]:
        """获取祖先链，根节点在前"""
        ancestors = []
        parent = self.get_parent(node)
        while parent is not None:
            ancestors.append(parent)
            parent = self.get_parent(parent)
        ancestors.reverse()
        return ancestors

    def get_children(self, node: TreeNode) -> List[TreeNode]:
        with self._lock:
            return [
                candidate for candidate in self._tree_nodes(node.tree)
                if candidate.depth == node.depth + 1 and node.contains(candidate)
            ]

    def search_roots(self, predicate: Predicate) -> Optional[TreeNode]:
        with self._lock:
            for root in self._roots.values():
                if predicate(root):
                    return root
            return None

    def search_items(self, predicate: Predicate) -> Optional[TreeNode]:
        with self._lock:
            for items in self._items.values():
                for node in items.values():
                    if predicate(node):
                        return node
            return None
