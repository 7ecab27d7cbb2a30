"""分类管理器

每个模块拥有一棵分类树。管理器维护 模块 -> 根节点ID 的映射，首次访问某模块时
加载其分类树，该模块还没有分类树时自动创建根节点。
"""

from typing import Dict, List, Optional

from ..exceptions import Err, ErrorCode
from ..log import get_logger
from ..tree import CategoryNode, RowSource, TreeStore

logger = get_logger()


class CategoryManager(TreeStore):
    """分类管理器

    使用示例:
        categories = CategoryManager(SqlRowSource(Category, session_factory))

        items = categories.get_items("content")
        options = categories.get_drop_down_list("content", unselected="- None -")
    """

    node_class = CategoryNode
    not_found_code = ErrorCode.CATEGORY_NOT_FOUND

    def __init__(self, row_source: RowSource):
        super().__init__(row_source)
        self._mapper: Dict[str, int] = {}

    def reset(self):
        with self._lock:
            super().reset()
            self._mapper = {}

    def get_items(self, module: Optional[str]) -> List[CategoryNode]:
        """获取模块的全部分类（lft 顺序）

        Raises:
            InvalidArgumentException: 未提供模块
        """
        if module is None:
            raise Err.invalid_argument("加载分类时必须提供模块")

        with self._lock:
            if module in self._mapper or self.load_category_tree(module):
                return super().get_items(self._mapper[module])
            self.create_root_node(module)
            return []

    get_categories = get_items

    def get_item(self, category_id: int) -> CategoryNode:
        with self._lock:
            node = super().get_item(category_id)
            root = self.root_of(node)
            if root is not None:
                self._mapper[root.module] = root.id
            return node

    def load_category_tree(self, module: str) -> bool:
        with self._lock:
            if not self.load_tree("module", module):
                return False
            root = self.search_roots(lambda r: r.module == module)
            if root is None:
                logger.error(f"模块 {module} 的分类数据没有根节点")
                raise Err.malformed_tree(f"模块 {module} 的分类树缺少根节点", module=module)
            self._mapper[module] = root.id
            return True

    def create_root_node(self, module: str) -> CategoryNode:
        """为模块创建分类树根节点

        Raises:
            ServiceUnavailableException: 根节点写入失败
        """
        with self._lock:
            row = self.row_source.create_root({"module": module, "title": module})
            self.build_tree([row])
            root_id = int(row["id"])
            self._mapper[module] = root_id
            logger.info(f"模块 {module} 的分类根节点已创建: {root_id}")
            return self._roots[root_id]

    def get_drop_down_list(
        self,
        module: str,
        unselected: Optional[str] = None,
        indenter: str = "- ",
    ) -> Dict[int, str]:
        """下拉列表选项 {分类ID: 带缩进的标题}

        Args:
            module: 模块
            unselected: 提供时作为 ID 0 的“未选择”项
            indenter: 每层缩进的前缀，第一层分类不缩进
        """
        options: Dict[int, str] = {}
        if unselected:
            options[0] = unselected
        for category in self.get_items(module):
            options[category.id] = indenter * (category.depth - 1) + category.title
        return options
