"""
Pytest 公共配置和 Fixtures

提供测试所需的公共资源：
- 临时目录与文件
- SQLite 内存数据库与会话工厂
- 写入种子数据的数据库
- 协议的内存实现
"""

import os
import tempfile

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ycms.config import ConfigLoader
from ycms.orm import Base, Block, Category, MenuItem, Template

from tests.helpers import (
    ListRowSource,
    DictTemplateSource,
    category_rows,
    menu_rows,
    template_rows,
)


# ==================== 基础 Fixtures ====================

@pytest.fixture(scope="session")
def temp_dir():
    """创建临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def temp_file(temp_dir):
    """创建临时文件的工厂函数"""
    created_files = []

    def _create_file(filename: str, content: str = "") -> str:
        filepath = os.path.join(temp_dir, filename)
        if os.path.dirname(filepath):
            os.makedirs(os.path.dirname(filepath), exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(content)
        created_files.append(filepath)
        return filepath

    yield _create_file

    for f in created_files:
        if os.path.exists(f):
            os.remove(f)


@pytest.fixture(autouse=True)
def clear_config_cache():
    """每个测试前后清空 YAML 配置缓存"""
    ConfigLoader.clear_cache()
    yield
    ConfigLoader.clear_cache()


# ==================== 数据库 Fixtures ====================

@pytest.fixture(scope="function")
def memory_engine():
    """创建内存数据库引擎

    使用 StaticPool 和 check_same_thread=False 确保所有会话共用同一个连接。
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(memory_engine):
    """创建会话工厂（空表）"""
    return sessionmaker(autocommit=False, autoflush=True, bind=memory_engine)


@pytest.fixture
def seeded_session_factory(session_factory):
    """写入菜单、分类、模板、区块种子数据的会话工厂"""
    with session_factory() as session:
        session.add_all(MenuItem(**row) for row in menu_rows())
        session.add_all(Category(**row) for row in category_rows())
        session.add_all(Template(**row) for row in template_rows())
        session.add_all([
            Block(id=1, title="Navigation", content="<ul>nav</ul>", show_title=0, state=1),
            Block(id=2, title="Latest", content="<p>latest</p>", show_title=1, state=1),
            Block(id=3, title="Copyright", content="<p>(c)</p>", show_title=0, state=1),
            Block(id=4, title="Hidden", content="<p>hidden</p>", show_title=0, state=0),
        ])
        session.commit()
    return session_factory


# ==================== 内存实现 Fixtures ====================

@pytest.fixture
def menu_source():
    return ListRowSource(menu_rows())


@pytest.fixture
def category_source():
    return ListRowSource(category_rows())


@pytest.fixture
def template_source():
    return DictTemplateSource(template_rows())
