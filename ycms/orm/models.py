"""内容表模型

菜单、分类、模板、区块和配置五张表。菜单和分类使用嵌套集合（nested set）存储树形结构，
嵌套集合字段由 NestedSetFieldsMixin 统一提供。

使用示例:
    from ycms.orm import Base, MenuItem, create_all

    create_all(engine)
    root = MenuItem(title="Main", tree=1, lft=1, rgt=2, depth=0)
"""

from typing import Optional

from sqlalchemy import Integer, SmallInteger, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """所有内容表共享的声明基类"""


class NestedSetFieldsMixin:
    """嵌套集合字段 Mixin

    提供标准的嵌套集合字段：
    - tree: 树分组 ID，等于该树根节点的 id
    - lft / rgt: 左右值，子孙节点的区间严格包含在祖先区间内
    - depth: 节点层级（根节点为0）

    注意：
    - 每棵树有且只有一个 lft == 1 的节点，即根节点
    - 读取整棵树时必须按 lft 升序，树引擎依赖这个顺序重建层级
    """

    tree: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        index=True,
        comment="树分组ID（根节点ID）"
    )

    lft: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="左值"
    )

    rgt: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="右值"
    )

    depth: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="节点层级（根节点为0）"
    )


class SeoFieldsMixin:
    """页面 SEO 元信息字段"""

    meta_title: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    meta_description: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    meta_keywords: Mapped[str] = mapped_column(String(255), default="", nullable=False)


class MenuItem(NestedSetFieldsMixin, SeoFieldsMixin, Base):
    """菜单表

    每棵树是一个菜单，根节点代表菜单本身，其余节点是菜单项。
    route 保存内部路由（如 "content/page/view&id=3"），alias 是生成 SEO 地址用的片段。
    """
    __tablename__ = "menu"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    alias: Mapped[str] = mapped_column(String(255), default="", nullable=False, index=True)
    route: Mapped[str] = mapped_column(String(255), default="", nullable=False, index=True)
    state: Mapped[int] = mapped_column(SmallInteger, default=1, nullable=False, comment="1 启用 0 停用")
    is_default: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False, comment="是否首页菜单项")


class Category(NestedSetFieldsMixin, SeoFieldsMixin, Base):
    """分类表

    每个模块（module）拥有一棵分类树，根节点的 module 字段标识所属模块。
    """
    __tablename__ = "category"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    module: Mapped[str] = mapped_column(String(64), default="", nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    alias: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    state: Mapped[int] = mapped_column(SmallInteger, default=1, nullable=False)
    template_id: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[int] = mapped_column(Integer, default=0, nullable=False, comment="创建时间戳")
    updated_at: Mapped[int] = mapped_column(Integer, default=0, nullable=False, comment="更新时间戳")


class Template(Base):
    """模板表

    positions 以 JSON 文本保存位置名到区块 ID 列表的映射，如 {"sidebar": [1, 2]}。
    """
    __tablename__ = "template"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    positions: Mapped[str] = mapped_column(Text, default="", nullable=False)
    is_default: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False)
    layout: Mapped[str] = mapped_column(String(255), default="", nullable=False)


class Block(Base):
    """区块表"""
    __tablename__ = "block"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    extension_id: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    title: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    namespace: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    show_title: Mapped[int] = mapped_column(SmallInteger, default=1, nullable=False)
    state: Mapped[int] = mapped_column(SmallInteger, default=1, nullable=False)
    scope: Mapped[str] = mapped_column(String(64), default="", nullable=False)


class ConfigEntry(Base):
    """配置表

    按分区（section）保存键值对，(id, section) 为联合主键。
    """
    __tablename__ = "config"

    id: Mapped[str] = mapped_column(String(255), primary_key=True, comment="配置名")
    section: Mapped[str] = mapped_column(String(255), primary_key=True, comment="所属分区")
    value: Mapped[str] = mapped_column(Text, default="", nullable=False)


def row_to_dict(obj) -> dict:
    """把 ORM 实例转换为按列名索引的普通字典"""
    return {column.key: getattr(obj, column.key) for column in obj.__table__.columns}


__all__ = [
    "Base",
    "NestedSetFieldsMixin",
    "SeoFieldsMixin",
    "MenuItem",
    "Category",
    "Template",
    "Block",
    "ConfigEntry",
    "row_to_dict",
]
