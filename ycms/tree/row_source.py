"""树数据行来源

树引擎只通过 RowSource 协议读取数据，三种查询形状：
- fetch_all: 全表，按 (tree, lft) 排序
- fetch_tree: 与匹配行同属一棵树的所有行，按 lft 排序（自连接）
- fetch_one: 单行

SqlRowSource 用 SQLAlchemy 实现该协议，行以普通字典返回。
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from ..exceptions import Err
from ..log import get_logger
from ..orm.models import row_to_dict

logger = get_logger()

Row = Dict[str, Any]


class RowSource(Protocol):
    """树数据行来源协议"""

    def fetch_all(self) -> List[Row]:
        ...

    def fetch_tree(self, column: str, value: Any) -> List[Row]:
        ...

    def fetch_one(self, column: str, value: Any) -> Optional[Row]:
        ...

    def create_root(self, values: Mapping[str, Any]) -> Row:
        ...


class SqlRowSource:
    """基于 SQLAlchemy 的行来源

    Args:
        model: 带嵌套集合字段的模型类（MenuItem / Category）
        session_factory: 返回 Session 的可调用对象，通常是 sessionmaker

    使用示例:
        from ycms.orm import MenuItem, get_session_factory
        from ycms.tree import SqlRowSource

        source = SqlRowSource(MenuItem, get_session_factory())
        rows = source.fetch_tree("is_default", 1)
    """

    def __init__(self, model, session_factory: Callable[[], Session]):
        self.model = model
        self.session_factory = session_factory

    def _column(self, entity, name: str):
        if name not in self.model.__table__.columns:
            raise Err.invalid_argument(
                f"{self.model.__tablename__} 表没有列: {name}",
                column=name,
            )
        return getattr(entity, name)

    def _fetch(self, stmt) -> List[Row]:
        with self.session_factory() as session:
            return [row_to_dict(obj) for obj in session.scalars(stmt).unique()]

    def fetch_all(self) -> List[Row]:
        stmt = select(self.model).order_by(self.model.tree, self.model.lft)
        return self._fetch(stmt)

    def fetch_tree(self, column: str, value: Any) -> List[Row]:
        match = aliased(self.model)
        member = self.model
        stmt = (
            select(member)
            .join(match, match.tree == member.tree)
            .where(self._column(match, column) == value)
            .order_by(member.tree, member.lft)
        )
        return self._fetch(stmt)

    def fetch_one(self, column: str, value: Any) -> Optional[Row]:
        stmt = select(self.model).where(self._column(self.model, column) == value).limit(1)
        rows = self._fetch(stmt)
        return rows[0] if rows else None

    def create_root(self, values: Mapping[str, Any]) -> Row:
        """插入一个根节点（lft 1, rgt 2, depth 0），tree 取新行的 id"""
        try:
            with self.session_factory() as session:
                root = self.model(**dict(values), lft=1, rgt=2, depth=0, tree=0)
                session.add(root)
                session.flush()
                root.tree = root.id
                row = row_to_dict(root)
                session.commit()
        except SQLAlchemyError as e:
            logger.error(f"创建根节点失败: {self.model.__tablename__} {dict(values)}: {e}")
            raise Err.unavailable(
                "根节点创建失败",
                table=self.model.__tablename__,
            ) from e

        logger.info(f"已创建根节点: {self.model.__tablename__}#{row['id']}")
        return row
