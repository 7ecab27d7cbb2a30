"""路由模块"""

from .router import UrlRouter, MenuUrlRouter, ENTRY_SCRIPT

__all__ = [
    "UrlRouter",
    "MenuUrlRouter",
    "ENTRY_SCRIPT",
]
