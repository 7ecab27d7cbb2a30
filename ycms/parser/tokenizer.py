"""include 语句分词

识别布局标记中的 <big:include position="..." .../> 语句。语句不跨行，position
必须是第一个属性且不能为空，大小写不敏感。
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List

INCLUDE_PATTERN = re.compile(r'<big:include\s+position="([^"]+)"(.*?)/>', re.IGNORECASE)
ATTRIBUTE_PATTERN = re.compile(r'([\w:-]+)\s?=\s?"([^"]*)"')


@dataclass
class IncludeStatement:
    """一条 include 语句

    属性:
        text: 语句原文，替换时按原文匹配
        position: 位置名
        attributes: position 之外的属性
    """

    text: str
    position: str
    attributes: Dict[str, str] = field(default_factory=dict)


class IncludeTokenizer:
    """include 语句分词器

    使用示例:
        tokenizer = IncludeTokenizer()
        statements = tokenizer.tokenize('<big:include position="sidebar" title="Menu" />')
        statements[0].position     # "sidebar"
        statements[0].attributes   # {"title": "Menu"}
    """

    include_pattern = INCLUDE_PATTERN
    attribute_pattern = ATTRIBUTE_PATTERN

    def tokenize(self, data: str) -> List[IncludeStatement]:
        """按出现顺序返回全部 include 语句（重复语句各出现一次）"""
        return [
            IncludeStatement(
                text=match.group(0),
                position=match.group(1),
                attributes=self.extract_attributes(match.group(2)),
            )
            for match in self.include_pattern.finditer(data)
        ]

    def extract_attributes(self, raw: str) -> Dict[str, str]:
        return {name: value for name, value in self.attribute_pattern.findall(raw)}
