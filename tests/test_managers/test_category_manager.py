"""分类管理器测试"""

import pytest

from ycms.exceptions import InvalidArgumentException, MalformedTreeException
from ycms.managers import CategoryManager
from ycms.orm import Category
from ycms.tree import SqlRowSource

from tests.helpers import ListRowSource, category_rows


class TestCategoryItems:
    """按模块加载测试"""

    def test_get_items_by_module(self, category_source):
        manager = CategoryManager(category_source)

        items = manager.get_items("content")

        assert [n.title for n in items] == ["News", "Local"]
        assert category_source.calls == [("fetch_tree", "module", "content")]

    def test_module_mapping_is_cached(self, category_source):
        manager = CategoryManager(category_source)
        manager.get_items("shop")

        manager.get_categories("shop")

        assert len(category_source.calls) == 1

    def test_none_module_raises(self, category_source):
        manager = CategoryManager(category_source)

        with pytest.raises(InvalidArgumentException):
            manager.get_items(None)

    def test_missing_module_creates_root(self, category_source):
        """测试模块没有分类树时创建根节点"""
        manager = CategoryManager(category_source)

        assert manager.get_items("blog") == []

        created = category_source.calls[-1]
        assert created == ("create_root", {"module": "blog", "title": "blog"})
        root = manager.search_roots(lambda r: r.module == "blog")
        assert root.lft == 1 and root.rgt == 2 and root.depth == 0
        assert root.tree == root.id
        # 之后直接使用映射，不再查询
        assert manager.get_items("blog") == []
        assert len(category_source.calls) == 2

    def test_module_rows_without_root_raise(self):
        """测试模块匹配的行所在树没有该模块的根节点"""
        rows = [dict(row) for row in category_rows()]
        rows[0]["module"] = "other"
        manager = CategoryManager(ListRowSource([rows[0], dict(rows[1], module="content")]))

        with pytest.raises(MalformedTreeException):
            manager.get_items("content")


class TestCategoryItem:
    """单个分类测试"""

    def test_get_item_records_module(self, category_source):
        """测试按 ID 加载后记录模块映射"""
        manager = CategoryManager(category_source)

        node = manager.get_item(5)

        assert node.title == "Books"
        manager.get_items("shop")
        assert category_source.calls == [("fetch_tree", "id", 5)]

    def test_parent_of_first_level_is_root(self, category_source):
        manager = CategoryManager(category_source)

        node = manager.get_item(3)

        assert manager.get_parent(node).title == "News"
        assert manager.get_parent(manager.get_parent(node)).module == "content"

    def test_reset_clears_mapping(self, category_source):
        manager = CategoryManager(category_source)
        manager.get_items("shop")

        manager.reset()
        manager.get_items("shop")

        assert category_source.calls.count(("fetch_tree", "module", "shop")) == 2


class TestCategoryDropDown:
    """下拉列表测试"""

    def test_indented_titles(self, category_source):
        manager = CategoryManager(category_source)

        assert manager.get_drop_down_list("content") == {2: "News", 3: "- Local"}

    def test_unselected_option(self, category_source):
        manager = CategoryManager(category_source)

        options = manager.get_drop_down_list("content", unselected="- None -", indenter="--")

        assert options == {0: "- None -", 2: "News", 3: "--Local"}
        assert list(options) == [0, 2, 3]


class TestCategoryManagerWithDatabase:
    """数据库集成测试"""

    def test_load_and_create(self, seeded_session_factory):
        manager = CategoryManager(SqlRowSource(Category, seeded_session_factory))

        assert [n.title for n in manager.get_items("content")] == ["News", "Local"]
        assert manager.get_items("blog") == []

        fresh = CategoryManager(SqlRowSource(Category, seeded_session_factory))
        assert fresh.get_items("blog") == []
        assert fresh.search_roots(lambda r: r.module == "blog") is not None
