"""模板位置分配

一个模板把页面位置名映射到有序的区块 ID 列表，例如
{"sidebar": [4, 7], "footer": [9]}。
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

from ..exceptions import Err, ErrorCode

Positions = Dict[str, List[int]]


def decode_positions(raw: Any) -> Positions:
    """把存储的 positions 转换为 {位置: [区块ID]}

    接受 JSON 文本或已解码的映射；空文本和空 JSON 数组视为没有位置。

    Raises:
        ValidationException: 文本不是合法 JSON，或结构不是 位置 -> ID 列表
    """
    if raw is None or raw == "":
        return {}
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            raise Err.invalid(
                "模板位置数据不是合法的 JSON",
                code=ErrorCode.INVALID_POSITIONS,
            ) from e
    if isinstance(raw, list) and not raw:
        return {}
    if not isinstance(raw, Mapping):
        raise Err.invalid("模板位置数据必须是对象", code=ErrorCode.INVALID_POSITIONS)
    try:
        return {str(name): [int(block_id) for block_id in ids] for name, ids in raw.items()}
    except (TypeError, ValueError) as e:
        raise Err.invalid(
            "模板位置的区块 ID 必须是整数",
            code=ErrorCode.INVALID_POSITIONS,
        ) from e


@dataclass
class TemplateAssignment:
    """模板位置分配

    属性:
        id: 模板 ID，0 表示空模板
        title: 标题
        is_default: 是否默认模板
        layout: 布局名，可选
        positions: {位置名: [区块ID]}

    使用示例:
        template = TemplateAssignment(id=1, positions={"a": [1, 2], "c": [3]})
        template.get_positions(["a", "b"])   # {"a": [1, 2]}
        template.get_positions()             # 全部位置
    """

    id: int = 0
    title: str = ""
    is_default: bool = False
    layout: str = ""
    positions: Positions = field(default_factory=dict)

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "TemplateAssignment":
        return cls(
            id=int(data.get("id") or 0),
            title=data.get("title") or "",
            is_default=bool(int(data.get("is_default") or 0)),
            layout=data.get("layout") or "",
            positions=decode_positions(data.get("positions")),
        )

    def get_positions(self, names: Iterable[str] = ()) -> Positions:
        """获取位置分配

        不传 names 时返回全部位置；否则只返回请求的、且分配了区块的位置。
        """
        names = list(names)
        if not names:
            return {name: list(ids) for name, ids in self.positions.items()}
        result = {}
        for name in names:
            ids = self.get_position(name)
            if ids:
                result[name] = ids
        return result

    def get_position(self, name: str) -> List[int]:
        return list(self.positions.get(name, ()))
