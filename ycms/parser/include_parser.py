"""include 语句解析器

把布局标记中的 include 语句替换为对应位置的区块片段，然后重写地址：
1. href="index.php?..." 内部动态地址交给路由器转换为 SEO 地址
2. 不以 /、协议、# 或 ' 开头的 src/href/poster 相对地址加上站点根地址

使用示例:
    from ycms.parser import IncludeStatementParser

    parser = IncludeStatementParser(router=router, home_url="https://example.com/")
    html = parser.run(layout, {"sidebar": ["<ul>...</ul>"]})
"""

import re
from typing import Dict, Mapping, Optional, Sequence, Union

from ..exceptions import Err
from ..log import get_logger
from .tokenizer import IncludeStatement, IncludeTokenizer

logger = get_logger()

INTERNAL_URL_PATTERN = re.compile(r'href="index\.php\?([^"]*)')
RELATIVE_URL_PATTERN = re.compile(r'(src|href|poster)="(?!/|[a-zA-Z0-9]+:|#|\')([^"]*)"')

BlockFragments = Mapping[str, Union[Sequence[str], str]]


class IncludeStatementParser:
    """include 语句解析器

    Args:
        router: 提供 parse_internal_url(query) 的路由器，为空时不转换内部地址
        home_url: 拼接在相对地址前的站点根地址
        tokenizer: include 语句分词器

    run() 每次调用独立，退出时（包括异常）清空内部数据。
    """

    def __init__(
        self,
        router=None,
        home_url: str = "/",
        tokenizer: Optional[IncludeTokenizer] = None,
    ):
        self.router = router
        self.home_url = home_url
        self.tokenizer = tokenizer or IncludeTokenizer()
        self._data: Optional[str] = None

    @classmethod
    def from_settings(cls, settings, router=None) -> "IncludeStatementParser":
        return cls(router=router, home_url=settings.home_url)

    @property
    def data(self) -> Optional[str]:
        return self._data

    def set_data(self, data: str):
        if not isinstance(data, str):
            raise Err.invalid_argument(
                f"解析数据必须是字符串，实际为 {type(data).__name__}"
            )
        self._data = data

    def clear(self):
        self._data = None

    def run(self, data: str, blocks: Optional[BlockFragments] = None) -> str:
        """解析布局标记

        Args:
            data: 布局标记
            blocks: {位置名: [区块 HTML 片段]}

        Returns:
            替换并重写地址后的标记

        Raises:
            InvalidArgumentException: data 不是字符串
        """
        self.set_data(data)
        try:
            statements = self.parse_include_statements()
            self.parse_data(statements, blocks or {})
            self.parse_urls()
            return self._data
        finally:
            self.clear()

    def parse_include_statements(self) -> Dict[str, IncludeStatement]:
        """提取 include 语句，按原文去重（后出现的覆盖先出现的）"""
        return {statement.text: statement for statement in self.tokenizer.tokenize(self._data)}

    def extract_attributes(self, raw: str) -> Dict[str, str]:
        return self.tokenizer.extract_attributes(raw)

    def parse_data(self, statements: Mapping[str, IncludeStatement], blocks: BlockFragments):
        """把每条语句的所有出现替换为该位置的区块片段，位置没有区块时替换为空"""
        data = self._data
        for text, statement in statements.items():
            fragments = blocks.get(statement.position) or ""
            if not isinstance(fragments, str):
                fragments = "\n".join(fragments)
            data = data.replace(text, fragments)
        self._data = data

    def parse_urls(self):
        data = self._data
        if self.router is not None:
            data = INTERNAL_URL_PATTERN.sub(
                lambda m: 'href="' + self.router.parse_internal_url(m.group(1)),
                data,
            )
        self._data = RELATIVE_URL_PATTERN.sub(
            lambda m: f'{m.group(1)}="{self.home_url}{m.group(2)}"',
            data,
        )

    def find_positions(self, data: str) -> Dict[str, Dict[str, str]]:
        """列出布局中的位置 {位置名: 属性}，按首次出现排序"""
        if not isinstance(data, str):
            raise Err.invalid_argument(
                f"解析数据必须是字符串，实际为 {type(data).__name__}"
            )
        positions: Dict[str, Dict[str, str]] = {}
        for statement in self.tokenizer.tokenize(data):
            positions.setdefault(statement.position, statement.attributes)
        logger.debug(f"布局中的位置: {list(positions)}")
        return positions
