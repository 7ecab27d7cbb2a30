"""协议的内存实现

不依赖数据库的单元测试使用，记录每次调用便于断言查询次数。
"""

import copy
from typing import Any, Dict, List, Mapping, Optional, Sequence


def menu_rows() -> List[Dict[str, Any]]:
    """两棵菜单树

    Main (1)
      Company (2)
        About (3)
        Team (4)
      Home (5)  <- 首页
    Footer (6)
      Contact (7)
    """
    def row(id, tree, lft, rgt, depth, title, alias="", route="", is_default=0, state=1):
        return {
            "id": id, "tree": tree, "lft": lft, "rgt": rgt, "depth": depth,
            "title": title, "alias": alias, "route": route,
            "is_default": is_default, "state": state,
            "meta_title": "", "meta_description": f"{title} page", "meta_keywords": "",
        }

    return [
        row(1, 1, 1, 10, 0, "Main", "main"),
        row(2, 1, 2, 7, 1, "Company", "company", "content/page/view&id=1"),
        row(3, 1, 3, 4, 2, "About", "about", "content/page/view&id=3"),
        row(4, 1, 5, 6, 2, "Team", "team", "content/page/view&id=4", state=0),
        row(5, 1, 8, 9, 1, "Home", "home", "content/page/index", is_default=1),
        row(6, 6, 1, 4, 0, "Footer", "footer"),
        row(7, 6, 2, 3, 1, "Contact", "contact", "content/contact/index"),
    ]


def category_rows() -> List[Dict[str, Any]]:
    """两个模块的分类树

    content (1)
      News (2)
        Local (3)
    shop (4)
      Books (5)
    """
    def row(id, tree, lft, rgt, depth, module, title, template_id=0):
        return {
            "id": id, "tree": tree, "lft": lft, "rgt": rgt, "depth": depth,
            "module": module, "title": title, "alias": title.lower(),
            "state": 1, "template_id": template_id,
        }

    return [
        row(1, 1, 1, 6, 0, "content", "content"),
        row(2, 1, 2, 5, 1, "content", "News", template_id=2),
        row(3, 1, 3, 4, 2, "content", "Local"),
        row(4, 4, 1, 4, 0, "shop", "shop"),
        row(5, 4, 2, 3, 1, "shop", "Books"),
    ]


def template_rows() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "title": "Default", "is_default": 1, "layout": "",
         "positions": '{"sidebar": [1, 2], "footer": [3]}'},
        {"id": 2, "title": "Wide", "is_default": 0, "layout": "wide",
         "positions": '{"footer": [3]}'},
    ]


class ListRowSource:
    """按列表数据实现 RowSource"""

    def __init__(self, rows: Sequence[Mapping[str, Any]]):
        self.rows = [dict(row) for row in rows]
        self.calls: List[tuple] = []

    @staticmethod
    def _order(rows):
        return [dict(row) for row in sorted(rows, key=lambda r: (r["tree"], r["lft"]))]

    def fetch_all(self):
        self.calls.append(("fetch_all",))
        return self._order(self.rows)

    def fetch_tree(self, column, value):
        self.calls.append(("fetch_tree", column, value))
        trees = {row["tree"] for row in self.rows if row.get(column) == value}
        return self._order(row for row in self.rows if row["tree"] in trees)

    def fetch_one(self, column, value):
        self.calls.append(("fetch_one", column, value))
        for row in self._order(self.rows):
            if row.get(column) == value:
                return row
        return None

    def create_root(self, values):
        self.calls.append(("create_root", dict(values)))
        new_id = max((row["id"] for row in self.rows), default=0) + 1
        row = dict(values, id=new_id, tree=new_id, lft=1, rgt=2, depth=0)
        self.rows.append(row)
        return dict(row)


class DictTemplateSource:
    """按列表数据实现 TemplateSource"""

    def __init__(self, rows: Sequence[Mapping[str, Any]]):
        self.rows = [dict(row) for row in rows]
        self.calls: List[tuple] = []

    def fetch_by_id(self, template_id) -> Optional[Dict[str, Any]]:
        self.calls.append(("fetch_by_id", template_id))
        for row in self.rows:
            if row["id"] == template_id:
                return dict(row)
        return None

    def fetch_default(self) -> Optional[Dict[str, Any]]:
        self.calls.append(("fetch_default",))
        for row in self.rows:
            if row["is_default"]:
                return dict(row)
        return None

    def fetch_all(self):
        self.calls.append(("fetch_all",))
        return copy.deepcopy(self.rows)


class DictBlockProvider:
    """按 {区块ID: HTML} 实现 BlockContentProvider"""

    def __init__(self, blocks: Mapping[int, str]):
        self.blocks = dict(blocks)
        self.calls: List[List[int]] = []

    def render_blocks(self, ids):
        self.calls.append(list(ids))
        return {block_id: self.blocks[block_id] for block_id in ids if block_id in self.blocks}


class MappingRouter:
    """把内部地址查询按映射表转换为 SEO 地址"""

    def __init__(self, urls: Mapping[str, str]):
        self.urls = dict(urls)
        self.queries: List[str] = []

    def parse_internal_url(self, query):
        self.queries.append(query)
        return self.urls.get(query, query)
