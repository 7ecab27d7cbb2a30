"""文件大小解析工具

日志轮转配置使用，支持 B, KB, MB, GB, TB 等单位。

使用示例:
    from ycms.utils import parse_file_size

    size = parse_file_size("10MB")  # 返回 10485760
"""

from typing import Union


# 单位转换表（按长度降序排列）
SIZE_UNITS = [
    ('TB', 1024 ** 4),
    ('GB', 1024 ** 3),
    ('MB', 1024 ** 2),
    ('KB', 1024),
    ('B', 1),
]

# 单位别名
SIZE_UNIT_ALIASES = {
    'T': 'TB',
    'G': 'GB',
    'M': 'MB',
    'K': 'KB',
}


def parse_file_size(size_str: Union[str, int, float]) -> int:
    """解析文件大小字符串

    Args:
        size_str: 文件大小字符串，如 "10MB", "512KB"；也可以直接传入字节数

    Returns:
        int: 文件大小的字节数

    Raises:
        ValueError: 当格式无效时抛出异常
    """
    if isinstance(size_str, (int, float)):
        return int(size_str)

    size_str = str(size_str).strip().upper()

    if not size_str:
        raise ValueError("文件大小字符串不能为空")

    for alias, unit in SIZE_UNIT_ALIASES.items():
        if size_str.endswith(alias) and not size_str.endswith(unit):
            size_str = size_str[:-len(alias)] + unit
            break

    for unit, multiplier in SIZE_UNITS:
        if size_str.endswith(unit):
            number_str = size_str[:-len(unit)].strip()
            try:
                return int(float(number_str) * multiplier)
            except ValueError:
                raise ValueError(f"无法解析文件大小: {size_str}")

    try:
        return int(float(size_str))
    except ValueError:
        raise ValueError(f"无法解析文件大小: {size_str}")
