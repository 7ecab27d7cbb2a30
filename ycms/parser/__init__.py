"""解析器模块

- IncludeTokenizer: 识别 <big:include .../> 语句
- IncludeStatementParser: 替换 include 语句并重写地址
"""

from .tokenizer import (
    IncludeStatement,
    IncludeTokenizer,
    INCLUDE_PATTERN,
    ATTRIBUTE_PATTERN,
)
from .include_parser import (
    IncludeStatementParser,
    INTERNAL_URL_PATTERN,
    RELATIVE_URL_PATTERN,
)

__all__ = [
    "IncludeStatement",
    "IncludeTokenizer",
    "INCLUDE_PATTERN",
    "ATTRIBUTE_PATTERN",
    "IncludeStatementParser",
    "INTERNAL_URL_PATTERN",
    "RELATIVE_URL_PATTERN",
]
