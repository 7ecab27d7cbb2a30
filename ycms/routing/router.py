"""基于菜单的地址路由

内部地址形如 "content/page/view&id=3"（或带入口的 "index.php?r=content/page/view&id=3"）。
菜单项的 route 字段保存内部地址，alias 字段保存 SEO 片段，路由器据此互相转换：

    create_url("content/page/view", {"id": 3})  ->  "company/about.html"
    parse_request("company/about.html")         ->  ("content/page/view", {"id": "3"})
"""

import threading
from typing import Dict, Mapping, Optional, Protocol, Tuple
from urllib.parse import parse_qsl, urlencode

from cachetools import LRUCache

from ..log import get_logger
from ..managers import MenuManager

logger = get_logger()

ENTRY_SCRIPT = "index.php"

RouteParts = Tuple[str, Dict[str, str]]


class UrlRouter(Protocol):
    """地址路由协议"""

    def create_url(self, route: str, params: Optional[Mapping[str, object]] = None) -> str:
        ...

    def parse_internal_url(self, query: str) -> str:
        ...

    def parse_request(self, path: str) -> Optional[RouteParts]:
        ...


class MenuUrlRouter:
    """按菜单树生成和解析 SEO 地址

    Args:
        menu_manager: 菜单管理器
        route_param: 内部动态地址中承载路由的参数名
        url_suffix: SEO 地址后缀，如 ".html"
        cache_size: 已生成地址的缓存条目数

    使用示例:
        router = MenuUrlRouter.from_settings(menus, settings.cms)
        router.create_url("content/page/view", {"id": 3})
        router.parse_internal_url("r=content/page/view&amp;id=3")
    """

    def __init__(
        self,
        menu_manager: MenuManager,
        route_param: str = "r",
        url_suffix: str = "",
        cache_size: int = 256,
    ):
        self.menu_manager = menu_manager
        self.route_param = route_param
        self.url_suffix = url_suffix
        self._cache = LRUCache(maxsize=cache_size)
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, menu_manager: MenuManager, settings) -> "MenuUrlRouter":
        return cls(
            menu_manager,
            route_param=settings.route_param,
            url_suffix=settings.url_suffix,
            cache_size=settings.url_cache_size,
        )

    def clear_cache(self):
        """菜单变更后清空已生成的地址"""
        with self._lock:
            self._cache.clear()

    def create_internal_url(
        self,
        route: str,
        params: Optional[Mapping[str, object]] = None,
        dynamic: bool = False,
    ) -> str:
        """生成内部地址

        Args:
            route: 路由
            params: 查询参数
            dynamic: 为 True 时带入口脚本和路由参数（index.php?r=...）
        """
        url = f"{ENTRY_SCRIPT}?{self.route_param}={route}" if dynamic else route
        if params:
            url += "&" + urlencode(params)
        return url

    def create_url(self, route: str, params: Optional[Mapping[str, object]] = None) -> str:
        """生成 SEO 地址

        route 对应首页菜单项时返回空字符串；对应其他菜单项时返回祖先菜单项的
        alias 加上自身 alias，以 / 连接并追加后缀；没有对应菜单项时返回
        "route后缀?参数"。
        """
        internal = self.create_internal_url(route, params)
        with self._lock:
            if internal in self._cache:
                return self._cache[internal]

        menu = self.menu_manager.search("route", internal, extended=True)
        if menu is None:
            url = route + self.url_suffix
            if params:
                url += "?" + urlencode(params)
        elif menu.is_default:
            url = ""
        else:
            aliases = [
                ancestor.alias
                for ancestor in self.menu_manager.get_ancestors(menu)
                if not ancestor.is_root
            ]
            aliases.append(menu.alias)
            url = "/".join(aliases) + self.url_suffix

        with self._lock:
            self._cache[internal] = url
        return url

    def parse_internal_url(self, query: str) -> str:
        """把内部动态地址的查询部分转换为 SEO 地址"""
        query = query.replace("&amp;", "&")
        prefix = f"{ENTRY_SCRIPT}?"
        if query.startswith(prefix):
            query = query[len(prefix):]
        params = dict(parse_qsl(query, keep_blank_values=True))
        route = params.pop(self.route_param, "")
        return self.create_url(route, params)

    def parse_request(self, path: str) -> Optional[RouteParts]:
        """把请求路径解析为 (路由, 参数)

        空路径对应首页菜单项。其余路径以最后一段作为菜单 alias 查找，命中时
        设为激活菜单项；未命中时依次用前面的路径段查找，只用于设置激活菜单项，
        不产生路由。

        Raises:
            NoDefaultException: 空路径且没有首页菜单项
        """
        path = path.strip("/")
        if not path:
            home = self.menu_manager.get_default()
            self.menu_manager.set_active(home)
            return home.route_parts

        if self.url_suffix:
            if not path.endswith(self.url_suffix):
                return None
            path = path[:-len(self.url_suffix)]

        segments = [segment for segment in path.split("/") if segment]
        if not segments:
            return None

        menu = self.menu_manager.search("alias", segments.pop(), extended=True)
        if menu is not None:
            self.menu_manager.set_active(menu)
            return menu.route_parts

        while segments:
            menu = self.menu_manager.search("alias", segments.pop(), extended=True)
            if menu is not None:
                self.menu_manager.set_active(menu)
                break

        logger.debug(f"请求路径没有对应菜单项: {path}")
        return None
