"""分区配置管理器

配置以 (名称, 分区) 为键保存在配置表中，每个分区对应一个 ConfigSection。
分区可以注册规则，锁定的配置项不能删除，并可禁止修改。

使用示例:
    from ycms.managers import ConfigManager, SqlConfigSource

    config = ConfigManager(SqlConfigSource(session_factory))
    config.configure_section("cms", {"locked_fields": ["system_email"]})

    config.set("system_email", "noreply@example.com", "cms")
    email = config.get("cms.system_email", "noreply@localhost")

    cms = config.get_items("cms")
    cms.get("app_name", "ycms")
"""

import threading
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Protocol, Union, runtime_checkable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import Err, ErrorCode
from ..log import get_logger
from ..orm.models import ConfigEntry

logger = get_logger()


# ==================== 分区规则 ====================

@runtime_checkable
class ConfigRule(Protocol):
    """分区规则协议，拒绝时抛出 ValidationException"""

    def check_save(self, name: str, is_new: bool):
        ...

    def check_delete(self, name: str):
        ...


class SectionRule:
    """默认分区规则

    Args:
        locked_fields: 锁定的配置名，不能删除
        change_locked_fields: 是否允许修改已存在的锁定配置
    """

    def __init__(self, locked_fields: Iterable[str] = (), change_locked_fields: bool = True):
        self.locked_fields = set(locked_fields)
        self.change_locked_fields = change_locked_fields

    def check_save(self, name: str, is_new: bool):
        if not is_new and name in self.locked_fields and not self.change_locked_fields:
            raise Err.invalid(
                f'配置 "{name}" 已锁定，不能修改',
                code=ErrorCode.CONFIG_LOCKED,
                name=name,
            )

    def check_delete(self, name: str):
        if name in self.locked_fields:
            raise Err.invalid(
                f'配置 "{name}" 已锁定，不能删除',
                code=ErrorCode.CONFIG_LOCKED,
                name=name,
            )


# ==================== 数据源 ====================

class ConfigSource(Protocol):
    """配置读写协议"""

    def fetch_section(self, section: str) -> Dict[str, str]:
        ...

    def fetch_value(self, name: str, section: str) -> Optional[str]:
        ...

    def save(self, name: str, value: str, section: str):
        ...

    def delete(self, name: str, section: str) -> bool:
        ...


class SqlConfigSource:
    """基于 SQLAlchemy 的配置数据源"""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def fetch_section(self, section: str) -> Dict[str, str]:
        stmt = select(ConfigEntry).where(ConfigEntry.section == section).order_by(ConfigEntry.id)
        with self.session_factory() as session:
            return {entry.id: entry.value for entry in session.scalars(stmt)}

    def fetch_value(self, name: str, section: str) -> Optional[str]:
        with self.session_factory() as session:
            entry = session.get(ConfigEntry, (name, section))
            return None if entry is None else entry.value

    def save(self, name: str, value: str, section: str):
        """新建或更新一条配置"""
        try:
            with self.session_factory() as session:
                entry = session.get(ConfigEntry, (name, section))
                if entry is None:
                    entry = ConfigEntry(id=name, section=section)
                    session.add(entry)
                entry.value = value
                session.commit()
        except SQLAlchemyError as e:
            logger.error(f"保存配置失败: {section}.{name}: {e}")
            raise Err.unavailable("配置保存失败", section=section, name=name) from e

    def delete(self, name: str, section: str) -> bool:
        try:
            with self.session_factory() as session:
                entry = session.get(ConfigEntry, (name, section))
                if entry is None:
                    return False
                session.delete(entry)
                session.commit()
                return True
        except SQLAlchemyError as e:
            logger.error(f"删除配置失败: {section}.{name}: {e}")
            raise Err.unavailable("配置删除失败", section=section, name=name) from e


# ==================== 分区与管理器 ====================

class ConfigSection:
    """一个分区的配置

    set / remove 经由管理器写入数据库；set_value / remove_value 只改本对象。
    """

    def __init__(self, section: str, data: Mapping[str, str], manager: "ConfigManager"):
        self.section = section
        self._data = dict(data)
        self._manager = manager

    def get(self, name: str, default: Any = None) -> Any:
        return self._data.get(name, default)

    def set(self, name: str, value: Any):
        self._manager.set(name, value, self.section)

    def remove(self, name: str) -> bool:
        return self._manager.remove(name, self.section)

    def set_value(self, name: str, value: str):
        self._data[name] = value

    def remove_value(self, name: str):
        self._data.pop(name, None)

    def as_list(self) -> List[Dict[str, str]]:
        """[{id, value, section}, ...]，供后台列表使用"""
        return [
            {"id": name, "value": value, "section": self.section}
            for name, value in self._data.items()
        ]

    def to_dict(self) -> Dict[str, str]:
        return dict(self._data)

    def __getitem__(self, name: str) -> str:
        return self._data[name]

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __len__(self) -> int:
        return len(self._data)


class ConfigManager:
    """分区配置管理器

    Args:
        source: 配置数据源
        rules: {分区: 规则对象或 SectionRule 参数字典}
    """

    def __init__(self, source: ConfigSource, rules: Optional[Mapping[str, Any]] = None):
        self.source = source
        self._rules: Dict[str, Union[ConfigRule, Dict[str, Any]]] = {}
        self._sections: Dict[str, ConfigSection] = {}
        self._lock = threading.RLock()
        if rules:
            self.set_rules(rules)

    @classmethod
    def from_settings(cls, source: ConfigSource, settings) -> "ConfigManager":
        return cls(source, rules=settings.config_rules)

    def reset(self):
        with self._lock:
            self._sections = {}

    # ==================== 读取 ====================

    def get(self, name: str, default: Any = None) -> Any:
        """按 "分区.名称" 读取配置

        只按第一个点号拆分，"cms.production.email" 读取 cms 分区的
        "production.email"。不含点号时返回默认值。
        """
        if "." not in name:
            return default
        section, prop = name.split(".", 1)
        return self.get_items(section).get(prop, default)

    def get_items(self, section: str) -> ConfigSection:
        """获取分区配置，首次访问时从数据源加载"""
        if not section:
            raise Err.invalid_argument("配置分区不能为空")
        with self._lock:
            if section not in self._sections:
                data = self.source.fetch_section(section)
                logger.debug(f"加载配置分区 {section}: {len(data)} 项")
                self._sections[section] = ConfigSection(section, data, self)
            return self._sections[section]

    get_item = get_items

    # ==================== 写入 ====================

    @staticmethod
    def _validate(name: str, section: str):
        if not name or not section:
            raise Err.invalid("配置名和分区不能为空", name=name, section=section)

    def set(self, name: str, value: Any, section: str):
        """保存配置并更新已加载的分区

        Raises:
            ValidationException: 名称或分区为空、值为 None、或配置已锁定
        """
        self._validate(name, section)
        if value is None:
            raise Err.invalid("配置值不能为 None", name=name, section=section)
        value = str(value)
        with self._lock:
            is_new = self.source.fetch_value(name, section) is None
            self.get_rule(section).check_save(name, is_new)
            self.source.save(name, value, section)
            if section in self._sections:
                self._sections[section].set_value(name, value)
        logger.info(f"配置已保存: {section}.{name}")

    def remove(self, name: str, section: str) -> bool:
        """删除配置

        Returns:
            配置存在并已删除时返回 True

        Raises:
            ValidationException: 名称或分区为空、或配置已锁定
        """
        self._validate(name, section)
        with self._lock:
            if self.source.fetch_value(name, section) is None:
                return False
            self.get_rule(section).check_delete(name)
            removed = self.source.delete(name, section)
            if removed and section in self._sections:
                self._sections[section].remove_value(name)
        if removed:
            logger.info(f"配置已删除: {section}.{name}")
        return removed

    def configure_object(self, target: Any, section: str) -> Any:
        """把分区中的每项配置设置为 target 的同名属性"""
        items = self.get_items(section)
        for name in items:
            setattr(target, name, items[name])
        return target

    # ==================== 规则 ====================

    def configure_section(self, section: str, rule: Union[ConfigRule, Mapping[str, Any]]):
        self.set_rules({section: rule})

    def set_rules(self, rules: Mapping[str, Any]):
        """注册分区规则，已有规则会被覆盖"""
        with self._lock:
            for section, rule in rules.items():
                self._rules[section] = dict(rule) if isinstance(rule, Mapping) else rule

    def get_rules(self) -> Dict[str, Any]:
        return dict(self._rules)

    def get_rule(self, section: str) -> ConfigRule:
        """获取分区规则，参数字典在首次使用时创建为 SectionRule

        Raises:
            InvalidArgumentException: 规则参数不合法或对象未实现 check_save/check_delete
        """
        with self._lock:
            rule = self._rules.get(section, {})
            if isinstance(rule, dict):
                try:
                    rule = SectionRule(**rule)
                except TypeError as e:
                    raise Err.invalid_argument(f"配置分区 {section} 的规则参数不合法: {e}") from e
            if not isinstance(rule, ConfigRule):
                raise Err.invalid_argument(
                    f"配置分区 {section} 的规则 {type(rule).__name__} 必须实现 check_save 和 check_delete"
                )
            self._rules[section] = rule
            return rule
