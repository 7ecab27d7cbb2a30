"""菜单管理器

在树存储之上提供菜单语义：默认菜单（含首页菜单项的那棵树）、当前激活菜单项、
按属性查找菜单项以及站内搜索条目。

使用示例:
    from ycms.managers import MenuManager
    from ycms.tree import SqlRowSource
    from ycms.orm import MenuItem

    menus = MenuManager(SqlRowSource(MenuItem, session_factory), auto_load=True)
    menus.init()

    home = menus.get_default()
    route, params = menus.default_route()
    item = menus.search("alias", "about")
"""

from typing import Any, Dict, List, Optional, Tuple, Union

from ..exceptions import Err, ErrorCode
from ..log import get_logger
from ..tree import MenuNode, RowSource, TreeNode, TreeStore

logger = get_logger()


class MenuManager(TreeStore):
    """菜单管理器

    Args:
        row_source: 菜单表的行来源
        auto_load: 为 True 时 init() 一次性加载全部菜单树，
                   查找菜单项时也不再回退到单行查询
    """

    node_class = MenuNode
    not_found_code = ErrorCode.MENU_NOT_FOUND

    def __init__(self, row_source: RowSource, auto_load: bool = True):
        super().__init__(row_source)
        self.auto_load = auto_load
        self._default: Optional[int] = None
        self._active: Optional[int] = None

    @classmethod
    def from_settings(cls, row_source: RowSource, settings) -> "MenuManager":
        """按 CmsSettings 创建"""
        return cls(row_source, auto_load=settings.menu_auto_load)

    def init(self):
        if self.auto_load:
            self.get_menus()

    def reset(self):
        with self._lock:
            super().reset()
            self._default = None

    # ==================== 菜单与菜单项 ====================

    def get_menus(self, reload: bool = False) -> Dict[int, MenuNode]:
        return self.get_roots(reload)

    def get_menu_items(self, menu_id: int = 0) -> List[MenuNode]:
        """获取菜单的全部菜单项，未指定菜单时返回默认菜单"""
        if menu_id:
            return self.get_items(menu_id)
        return self.get_default_menu()

    def get_menu_item(self, item_id: int) -> MenuNode:
        return self.get_item(item_id)

    def get_default_menu(self) -> List[MenuNode]:
        """获取默认菜单（包含首页菜单项的树）的全部菜单项

        依次查找：已记住的默认菜单 -> 缓存中带默认标记的菜单项 -> 数据库。
        数据库中也没有默认菜单项时返回空列表，不改动缓存。
        """
        with self._lock:
            if self._default is not None:
                return self.get_items(self._default)

            node = self.search_items(lambda n: n.is_default)
            if node is not None:
                root = self.root_of(node)
                if root is not None:
                    self._default = root.id
                    return self.get_items(self._default)

            rows = self.row_source.fetch_tree("is_default", 1)
            if not rows:
                logger.debug("没有设置默认菜单项")
                return []

            self.build_tree(rows)
            self._default = int(rows[0]["id"])
            return self.get_items(self._default)

    def get_default(self) -> MenuNode:
        """获取首页菜单项

        Raises:
            NoDefaultException: 默认菜单为空或没有带默认标记的菜单项
        """
        for item in self.get_default_menu():
            if item.is_default:
                return item
        raise Err.no_default("未设置默认菜单项", resource_type="menu")

    def default_route(self) -> Tuple[str, Dict[str, str]]:
        """首页菜单项的 (路由, 参数)，用作应用的默认路由"""
        return self.get_default().route_parts

    # ==================== 激活菜单项 ====================

    def set_active(self, menu: Union[TreeNode, int, None]):
        """设置当前激活的菜单项，传入空值时清除"""
        if isinstance(menu, TreeNode):
            self._active = menu.id or None
        else:
            self._active = int(menu) if menu else None

    def get_active(self) -> Optional[MenuNode]:
        if self._active:
            return self.get_item(self._active)
        return None

    # ==================== 查找 ====================

    def search(self, prop: str, value: Any, extended: bool = False) -> Optional[MenuNode]:
        """按属性查找已加载的菜单项

        Args:
            prop: 属性名（如 alias、route）
            value: 属性值
            extended: 缓存未命中且未启用 auto_load 时，回退到单行查询，
                      返回的节点不会加入缓存
        """
        node = self.search_items(lambda n: n.get(prop) == value)
        if node is None and extended and not self.auto_load:
            row = self.row_source.fetch_one(prop, value)
            if row is not None:
                node = self.create_node(row)
        return node

    def search_entries(self) -> List[Dict[str, Any]]:
        """站内搜索条目：每个非根菜单项一条"""
        entries = []
        for root_id in self.get_menus():
            for item in self.get_items(root_id):
                entries.append({
                    "title": item.title,
                    "route": item.route,
                    "text": item.meta_description,
                    "date": None,
                    "section": "Menus",
                })
        return entries
