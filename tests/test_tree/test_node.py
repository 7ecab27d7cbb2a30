"""节点记录测试"""

import pytest

from ycms.exceptions import MalformedTreeException
from ycms.tree import CategoryNode, MenuNode, TreeNode


class TestTreeNode:
    """TreeNode 测试"""

    def test_from_row_coerces_structure_fields(self):
        """测试结构字段转换为整数"""
        node = TreeNode.from_row({"id": "3", "tree": "1", "lft": "2", "rgt": "5", "depth": "1"})

        assert (node.id, node.tree, node.lft, node.rgt, node.depth) == (3, 1, 2, 5, 1)
        assert node.is_root is False

    def test_is_root(self):
        assert TreeNode(id=1, tree=1, lft=1, rgt=2, depth=0).is_root is True

    def test_missing_structure_field_raises(self):
        with pytest.raises(MalformedTreeException) as exc_info:
            TreeNode.from_row({"id": 1, "tree": 1, "lft": 1})

        assert exc_info.value.details == ["rgt", "depth"]

    def test_contains(self):
        parent = TreeNode(id=1, tree=1, lft=1, rgt=6, depth=0)
        child = TreeNode(id=2, tree=1, lft=2, rgt=3, depth=1)
        other_tree = TreeNode(id=9, tree=9, lft=2, rgt=3, depth=1)

        assert parent.contains(child)
        assert not child.contains(parent)
        assert not parent.contains(other_tree)

    def test_undeclared_attribute_raises(self):
        """测试访问未声明的属性"""
        node = TreeNode.from_row({"id": 1, "tree": 1, "lft": 1, "rgt": 2, "depth": 0, "x": 1})

        with pytest.raises(AttributeError):
            node.x


class TestMenuNode:
    """MenuNode 测试"""

    def test_typed_columns(self):
        node = MenuNode.from_row({
            "id": 5, "tree": 1, "lft": 8, "rgt": 9, "depth": 1,
            "title": "Home", "route": "content/page/index",
            "is_default": "1", "state": "0", "meta_title": None,
        })

        assert node.is_default is True
        assert node.state == 0
        assert node.is_enabled is False
        assert node.meta_title == ""

    def test_route_parts(self):
        node = MenuNode(id=3, tree=1, lft=3, rgt=4, depth=2, route="content/page/view&id=3&lang=en")

        assert node.route_parts == ("content/page/view", {"id": "3", "lang": "en"})

    def test_route_parts_without_params(self):
        node = MenuNode(id=3, tree=1, lft=3, rgt=4, depth=2, route="site/index")

        assert node.route_parts == ("site/index", {})


class TestCategoryNode:
    """CategoryNode 测试"""

    def test_from_row(self):
        node = CategoryNode.from_row({
            "id": 2, "tree": 1, "lft": 2, "rgt": 5, "depth": 1,
            "module": "content", "title": "News", "template_id": "2",
            "content": "<p>long text</p>",
        })

        assert node.module == "content"
        assert node.template_id == 2
        assert node.payload == {"content": "<p>long text</p>"}
