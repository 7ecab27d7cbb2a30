__version__ = "0.1.0"
__author__ = "ycms"
__description__ = "嵌套集合菜单/分类管理与布局 include 解析"
