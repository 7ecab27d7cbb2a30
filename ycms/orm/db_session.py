"""
数据库会话管理模块

提供数据库引擎创建、会话工厂和事务上下文。

公开 API:
- db_manager: 数据库管理器单例
- init_database(): 初始化数据库连接
- get_engine(): 获取数据库引擎
- get_session_factory(): 获取会话工厂，交给行数据源和模板数据源使用
- db_session_scope(): 自动提交/回滚的会话上下文管理器
- create_all(): 建表（测试与脚本使用，不做迁移）
"""

import logging
import os
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from ..log import get_logger
from .models import Base

_logger = get_logger("ycms.orm.session")

__all__ = [
    'db_manager',
    'init_database',
    'get_engine',
    'get_session_factory',
    'db_session_scope',
    'create_all',
]


class DatabaseManager:
    """数据库管理器（单例）

    封装引擎和会话工厂，外部只能通过方法和只读属性访问。

    使用示例:
        from ycms.orm import db_manager

        db_manager.init(database_url="sqlite:///./cms.db")
        factory = db_manager.session_factory
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._engine = None
        self._session_maker = None
        self._initialized = True

    @property
    def engine(self):
        """获取数据库引擎（只读）

        Raises:
            RuntimeError: 数据库未初始化时
        """
        if self._engine is None:
            raise RuntimeError("数据库未初始化，请先调用 init_database()")
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        """获取会话工厂（只读）"""
        if self._session_maker is None:
            raise RuntimeError("数据库未初始化，请先调用 init_database()")
        return self._session_maker

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None and self._session_maker is not None

    def init(
        self,
        database_url: str = None,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True,
        logger: logging.Logger = None,
        config: Any = None,
    ):
        """初始化数据库连接

        Args:
            database_url: 数据库连接URL（如果提供 config 则忽略）
            echo: 是否输出SQL语句（如果提供 config 则忽略）
            pool_size: 连接池大小（如果提供 config 则忽略）
            max_overflow: 最大溢出连接数（如果提供 config 则忽略）
            pool_timeout: 连接超时时间（如果提供 config 则忽略）
            pool_recycle: 连接回收时间（如果提供 config 则忽略）
            pool_pre_ping: 连接前是否ping（如果提供 config 则忽略）
            logger: 日志记录器
            config: 数据库配置对象（DatabaseSettings），提供后自动提取配置

        Returns:
            tuple: (engine, session_factory)

        使用示例:
            from ycms.orm import init_database, db_session_scope

            engine, factory = init_database(config=settings.database)

            with db_session_scope() as session:
                session.add(MenuItem(...))
        """
        if config is not None:
            database_url = getattr(config, "url", database_url)
            echo = getattr(config, "echo", echo)
            pool_size = getattr(config, "pool_size", pool_size)
            max_overflow = getattr(config, "max_overflow", max_overflow)
            pool_timeout = getattr(config, "pool_timeout", pool_timeout)
            pool_recycle = getattr(config, "pool_recycle", pool_recycle)
            pool_pre_ping = getattr(config, "pool_pre_ping", pool_pre_ping)

        if not database_url:
            raise ValueError("database_url 是必需的，请通过参数或 config 提供")

        if logger is None:
            logger = _logger

        logger.info(f"数据库配置URL: {database_url}")

        if database_url.startswith("sqlite:///"):
            db_path = database_url[len("sqlite:///"):]
            is_memory_db = db_path == ":memory:" or db_path == ""

            if is_memory_db:
                # 内存数据库：使用 StaticPool（单连接）
                self._engine = create_engine(
                    database_url,
                    echo=echo,
                    connect_args={"check_same_thread": False},
                    poolclass=StaticPool,
                )
                logger.info("SQLite内存数据库引擎创建成功（StaticPool）")
            else:
                logger.info(f"SQLite文件数据库路径: {os.path.abspath(db_path)}")
                self._engine = create_engine(
                    database_url,
                    echo=echo,
                    connect_args={
                        "check_same_thread": False,
                        "timeout": pool_timeout,
                    },
                    poolclass=QueuePool,
                    pool_size=pool_size,
                    max_overflow=max_overflow,
                    pool_timeout=pool_timeout,
                    pool_pre_ping=pool_pre_ping,
                    pool_recycle=pool_recycle,
                )
                logger.info(f"SQLite文件数据库引擎创建成功（QueuePool, pool_size={pool_size}）")
        else:
            self._engine = create_engine(
                database_url,
                echo=echo,
                pool_pre_ping=pool_pre_ping,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
            )
            logger.info("数据库引擎创建成功")

        self._session_maker = sessionmaker(
            autocommit=False,
            autoflush=True,
            bind=self._engine,
        )
        return self._engine, self._session_maker

    def dispose(self):
        """释放连接池并清空状态（幂等）"""
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_maker = None


db_manager = DatabaseManager()


def init_database(
    database_url: str = None,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
    pool_timeout: int = 30,
    pool_recycle: int = 3600,
    pool_pre_ping: bool = True,
    logger: logging.Logger = None,
    config: Any = None,
):
    """初始化数据库连接

    这是 db_manager.init() 的便捷包装函数。

    Returns:
        tuple: (engine, session_factory)
    """
    return db_manager.init(
        database_url=database_url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=pool_timeout,
        pool_recycle=pool_recycle,
        pool_pre_ping=pool_pre_ping,
        logger=logger,
        config=config,
    )


def get_engine():
    """获取数据库引擎

    Raises:
        RuntimeError: 数据库未初始化时
    """
    return db_manager.engine


def get_session_factory() -> sessionmaker:
    return db_manager.session_factory


@contextmanager
def db_session_scope(auto_commit: bool = True) -> Generator[Session, None, None]:
    """会话上下文管理器

    Args:
        auto_commit: 是否在正常退出时自动提交，默认 True

    使用示例:
        with db_session_scope() as session:
            session.add(Template(title="Two columns"))
        # 自动提交并关闭
    """
    session = db_manager.session_factory()
    try:
        yield session
        if auto_commit:
            session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_all(engine=None):
    """按模型定义建表，未传 engine 时使用已初始化的引擎"""
    Base.metadata.create_all(engine or db_manager.engine)
