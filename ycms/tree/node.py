"""树节点记录

把查询返回的一行数据转换为带类型的节点对象。结构字段（id/tree/lft/rgt/depth）
是树引擎唯一依赖的字段，其余列按节点类型声明为属性，未声明的列放入 payload。

使用示例:
    from ycms.tree import MenuNode

    node = MenuNode.from_row({"id": 2, "tree": 1, "lft": 2, "rgt": 3, "depth": 1,
                              "title": "About", "route": "page/view&id=3"})
    node.route_parts   # ("page/view", {"id": "3"})
"""

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, Mapping, Tuple
from urllib.parse import parse_qsl

from ..exceptions import Err

STRUCTURE_FIELDS = ("id", "tree", "lft", "rgt", "depth")


@dataclass
class TreeNode:
    """嵌套集合中的一个节点

    属性:
        id: 节点 ID，0 表示尚未保存
        tree: 树分组 ID（根节点 ID）
        lft / rgt: 左右值
        depth: 层级，根节点为 0
        payload: 未声明的其他列
    """

    id: int
    tree: int
    lft: int
    rgt: int
    depth: int
    payload: Dict[str, Any] = field(default_factory=dict, repr=False)

    # 需要转换为 int 的列
    int_fields: ClassVar[Tuple[str, ...]] = STRUCTURE_FIELDS
    bool_fields: ClassVar[Tuple[str, ...]] = ()

    @property
    def is_root(self) -> bool:
        return self.lft == 1

    def contains(self, other: "TreeNode") -> bool:
        """other 是否是当前节点的子孙"""
        return (
            self.tree == other.tree
            and self.lft < other.lft
            and self.rgt > other.rgt
        )

    def get(self, name: str, default: Any = None) -> Any:
        """按列名取值，先查声明的属性，再查 payload"""
        if name in self.payload:
            return self.payload[name]
        return getattr(self, name, default)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TreeNode":
        missing = [name for name in STRUCTURE_FIELDS if row.get(name) is None]
        if missing:
            raise Err.malformed_tree(
                f"节点数据缺少结构字段: {', '.join(missing)}",
                details=missing,
            )

        declared = {f.name for f in fields(cls) if f.name != "payload"}
        values: Dict[str, Any] = {}
        payload: Dict[str, Any] = {}
        for key, value in row.items():
            if key not in declared:
                payload[key] = value
            elif value is None:
                # 交给字段默认值
                continue
            elif key in cls.int_fields:
                values[key] = int(value)
            elif key in cls.bool_fields:
                values[key] = bool(int(value))
            else:
                values[key] = value
        return cls(payload=payload, **values)


@dataclass
class MenuNode(TreeNode):
    """菜单节点

    根节点代表菜单本身，非根节点是菜单项。route 形如 "module/controller/action&a=1"。
    """

    title: str = ""
    alias: str = ""
    route: str = ""
    state: int = 1
    is_default: bool = False
    meta_title: str = ""
    meta_description: str = ""
    meta_keywords: str = ""

    int_fields: ClassVar[Tuple[str, ...]] = STRUCTURE_FIELDS + ("state",)
    bool_fields: ClassVar[Tuple[str, ...]] = ("is_default",)

    @property
    def is_enabled(self) -> bool:
        return self.state == 1

    @property
    def route_parts(self) -> Tuple[str, Dict[str, str]]:
        """把 route 拆分为 (路由, 参数字典)"""
        route, _, query = self.route.partition("&")
        return route, dict(parse_qsl(query, keep_blank_values=True))


@dataclass
class CategoryNode(TreeNode):
    """分类节点，根节点的 module 标识所属模块"""

    module: str = ""
    title: str = ""
    alias: str = ""
    state: int = 1
    template_id: int = 0

    int_fields: ClassVar[Tuple[str, ...]] = STRUCTURE_FIELDS + ("state", "template_id")
