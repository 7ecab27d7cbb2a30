"""模板数据源

TemplateSource 协议供 TemplateManager 读取模板；SqlTemplateSource 另外负责保存，
保存时在提交前显式降级之前的默认模板，保证最多只有一个默认模板。
"""

import json
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..exceptions import Err, ErrorCode
from ..log import get_logger
from ..orm.models import Template, row_to_dict

logger = get_logger()

# 后台拖拽界面中“未分配区块”区域的伪位置名，不保存
UNREGISTERED_POSITION = "UNREGISTERED"


class TemplateSource(Protocol):
    """模板读取协议"""

    def fetch_by_id(self, template_id: int) -> Optional[Dict[str, Any]]:
        ...

    def fetch_default(self) -> Optional[Dict[str, Any]]:
        ...

    def fetch_all(self) -> List[Dict[str, Any]]:
        ...


def prepare_positions(positions: Mapping[str, Any]) -> Dict[str, List[int]]:
    """去掉伪位置并校验区块 ID

    区块 ID 接受整数或纯数字字符串。

    Raises:
        ValidationException: 区块 ID 不是整数
    """
    prepared = {}
    errors = []
    for name, ids in positions.items():
        if name == UNREGISTERED_POSITION:
            continue
        block_ids = []
        for block_id in ids or ():
            if isinstance(block_id, bool):
                errors.append(f"{name}: {block_id!r}")
            elif isinstance(block_id, int):
                block_ids.append(block_id)
            elif isinstance(block_id, str) and block_id.strip().isdigit():
                block_ids.append(int(block_id))
            else:
                errors.append(f"{name}: {block_id!r}")
        prepared[name] = block_ids
    if errors:
        raise Err.invalid(
            "区块必须以整数 ID 注册",
            code=ErrorCode.INVALID_POSITIONS,
            details=errors,
        )
    return prepared


def demote_previous_default(session: Session, template: Template):
    """template 为默认模板时，把其他默认模板降级（提交前调用）"""
    if not template.is_default:
        return
    stmt = update(Template).where(Template.is_default == 1)
    if template.id is not None:
        stmt = stmt.where(Template.id != template.id)
    result = session.execute(stmt.values(is_default=0))
    if result.rowcount:
        logger.info(f"已降级 {result.rowcount} 个原默认模板")


class SqlTemplateSource:
    """基于 SQLAlchemy 的模板数据源

    使用示例:
        source = SqlTemplateSource(get_session_factory())
        saved = source.save({"title": "Two columns", "is_default": 1,
                             "positions": {"sidebar": [1, 2]}})
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def _fetch(self, stmt) -> List[Dict[str, Any]]:
        with self.session_factory() as session:
            return [row_to_dict(obj) for obj in session.scalars(stmt)]

    def fetch_by_id(self, template_id: int) -> Optional[Dict[str, Any]]:
        rows = self._fetch(select(Template).where(Template.id == template_id))
        return rows[0] if rows else None

    def fetch_default(self) -> Optional[Dict[str, Any]]:
        rows = self._fetch(
            select(Template).where(Template.is_default == 1).order_by(Template.id).limit(1)
        )
        return rows[0] if rows else None

    def fetch_all(self) -> List[Dict[str, Any]]:
        return self._fetch(select(Template).order_by(Template.id))

    def save(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        """新建或更新模板

        Args:
            values: 模板字段，包含 id 时更新该模板

        Returns:
            保存后的行数据

        Raises:
            ResourceNotFoundException: 要更新的模板不存在
            ValidationException: 标题为空、区块 ID 不合法或试图取消当前默认模板
        """
        with self.session_factory() as session:
            template_id = values.get("id")
            if template_id:
                template = session.get(Template, int(template_id))
                if template is None:
                    raise Err.not_found(
                        f"模板不存在: {template_id}",
                        code=ErrorCode.TEMPLATE_NOT_FOUND,
                        resource_id=template_id,
                    )
            else:
                template = Template(is_default=0)

            title = values.get("title", template.title)
            if not title:
                raise Err.invalid("模板标题不能为空")

            was_default = bool(template.is_default)
            is_default = int(values.get("is_default", template.is_default or 0))
            if was_default and not is_default:
                raise Err.invalid(
                    "不能取消默认模板，请把其他模板设为默认",
                    code=ErrorCode.DEFAULT_REQUIRED,
                )

            if "positions" in values or template.positions is None:
                template.positions = json.dumps(prepare_positions(values.get("positions") or {}))

            template.title = title
            template.layout = values.get("layout", template.layout) or ""
            template.is_default = is_default

            demote_previous_default(session, template)
            session.add(template)
            session.commit()
            row = row_to_dict(template)

        logger.info(f"模板已保存: {row['id']} ({row['title']})")
        return row
