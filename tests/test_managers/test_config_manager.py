"""分区配置管理器测试"""

import pytest
from sqlalchemy import select

from ycms.config import CmsSettings
from ycms.exceptions import (
    ErrorCode,
    InvalidArgumentException,
    ServiceUnavailableException,
    ValidationException,
)
from ycms.managers import ConfigManager, ConfigSection, SectionRule, SqlConfigSource
from ycms.orm import ConfigEntry


@pytest.fixture
def config_factory(session_factory):
    """写入两个分区配置的会话工厂"""
    with session_factory() as session:
        session.add_all([
            ConfigEntry(id="app_name", section="cms", value="ycms"),
            ConfigEntry(id="system_email", section="cms", value="noreply@example.com"),
            ConfigEntry(id="production.email", section="cms", value="ops@example.com"),
            ConfigEntry(id="per_page", section="shop", value="20"),
        ])
        session.commit()
    return session_factory


@pytest.fixture
def config(config_factory):
    return ConfigManager(SqlConfigSource(config_factory))


class TestGet:
    """读取测试"""

    def test_get_by_dotted_name(self, config):
        assert config.get("cms.app_name") == "ycms"
        assert config.get("shop.per_page") == "20"

    def test_split_on_first_dot(self, config):
        assert config.get("cms.production.email") == "ops@example.com"

    def test_default_value(self, config):
        assert config.get("cms.missing", "fallback") == "fallback"
        assert config.get("unknown.name", "fallback") == "fallback"
        assert config.get("app_name", "no section") == "no section"

    def test_get_items(self, config):
        items = config.get_items("cms")

        assert isinstance(items, ConfigSection)
        assert list(items) == ["app_name", "production.email", "system_email"]
        assert items["app_name"] == "ycms"
        assert "per_page" not in items
        assert config.get_item("cms") is items

    def test_section_loaded_once(self, config, monkeypatch):
        config.get_items("cms")
        monkeypatch.setattr(config.source, "fetch_section", lambda section: pytest.fail("重复加载"))

        assert config.get("cms.app_name") == "ycms"

    def test_empty_section(self, config):
        with pytest.raises(InvalidArgumentException):
            config.get_items("")

    def test_as_list(self, config):
        assert config.get_items("shop").as_list() == [
            {"id": "per_page", "value": "20", "section": "shop"},
        ]


class TestSetAndRemove:
    """写入与删除测试"""

    def test_set_new_value(self, config, config_factory):
        config.get_items("cms")

        config.set("theme", "dark", "cms")

        assert config.get("cms.theme") == "dark"
        with config_factory() as session:
            entry = session.get(ConfigEntry, ("theme", "cms"))
            assert entry.value == "dark"

    def test_update_existing_value(self, config):
        config.get_items("shop").set("per_page", 50)

        config.reset()
        assert config.get("shop.per_page") == "50"

    def test_set_new_section(self, config):
        config.set("enabled", "1", "blog")

        assert config.get_items("blog").to_dict() == {"enabled": "1"}

    @pytest.mark.parametrize("name,value,section", [
        ("", "x", "cms"),
        ("name", "x", ""),
        ("name", None, "cms"),
    ])
    def test_invalid_data(self, config, name, value, section):
        with pytest.raises(ValidationException):
            config.set(name, value, section)

    def test_remove(self, config, config_factory):
        items = config.get_items("cms")

        assert items.remove("app_name") is True
        assert "app_name" not in items
        with config_factory() as session:
            assert session.get(ConfigEntry, ("app_name", "cms")) is None

    def test_remove_missing(self, config):
        assert config.remove("missing", "cms") is False


class TestSectionRules:
    """分区规则测试"""

    def test_locked_field_cannot_be_deleted(self, config):
        config.configure_section("cms", {"locked_fields": ["system_email"]})

        with pytest.raises(ValidationException) as exc_info:
            config.remove("system_email", "cms")

        assert exc_info.value.code == ErrorCode.CONFIG_LOCKED
        assert config.get("cms.system_email") == "noreply@example.com"

    def test_locked_field_change_allowed_by_default(self, config):
        config.configure_section("cms", {"locked_fields": ["system_email"]})

        config.set("system_email", "admin@example.com", "cms")

        assert config.get("cms.system_email") == "admin@example.com"

    def test_locked_field_change_refused(self, config, config_factory):
        config.configure_section("cms", {
            "locked_fields": ["system_email"],
            "change_locked_fields": False,
        })

        with pytest.raises(ValidationException):
            config.set("system_email", "admin@example.com", "cms")

        with config_factory() as session:
            assert session.get(ConfigEntry, ("system_email", "cms")).value == "noreply@example.com"

    def test_locked_field_can_be_created(self, config):
        config.configure_section("blog", SectionRule(["title"], change_locked_fields=False))

        config.set("title", "News", "blog")

        assert config.get("blog.title") == "News"

    def test_rules_are_per_section(self, config):
        config.configure_section("cms", {"locked_fields": ["per_page"]})

        assert config.remove("per_page", "shop") is True

    def test_custom_rule_object(self, config):
        class ReadOnlyRule:
            def check_save(self, name, is_new):
                raise ValidationException("只读分区")

            def check_delete(self, name):
                raise ValidationException("只读分区")

        config.configure_section("shop", ReadOnlyRule())

        with pytest.raises(ValidationException):
            config.set("per_page", "10", "shop")

    def test_invalid_rule_object(self, config):
        config.configure_section("shop", object())

        with pytest.raises(InvalidArgumentException):
            config.get_rule("shop")

    def test_invalid_rule_options(self, config):
        config.configure_section("shop", {"locked": ["per_page"]})

        with pytest.raises(InvalidArgumentException):
            config.get_rule("shop")

    def test_rules_from_settings(self, config_factory):
        settings = CmsSettings(config_rules={"cms": {"locked_fields": ["app_name"]}})
        config = ConfigManager.from_settings(SqlConfigSource(config_factory), settings)

        with pytest.raises(ValidationException):
            config.remove("app_name", "cms")
        assert isinstance(config.get_rule("cms"), SectionRule)


class TestConfigureObject:
    """configure_object 测试"""

    def test_sets_attributes(self, config):
        class Module:
            per_page = "10"

        module = config.configure_object(Module(), "shop")

        assert module.per_page == "20"


class TestSqlConfigSource:
    """SqlConfigSource 测试"""

    def test_fetch_section_ordered(self, config_factory):
        source = SqlConfigSource(config_factory)

        assert list(source.fetch_section("cms")) == ["app_name", "production.email", "system_email"]
        assert source.fetch_section("missing") == {}

    def test_fetch_value(self, config_factory):
        source = SqlConfigSource(config_factory)

        assert source.fetch_value("per_page", "shop") == "20"
        assert source.fetch_value("per_page", "cms") is None

    def test_same_name_in_two_sections(self, config_factory):
        source = SqlConfigSource(config_factory)

        source.save("per_page", "5", "cms")

        with config_factory() as session:
            rows = session.scalars(select(ConfigEntry).where(ConfigEntry.id == "per_page")).all()
        assert sorted((row.section, row.value) for row in rows) == [("cms", "5"), ("shop", "20")]

    def test_database_error(self, memory_engine, config_factory):
        source = SqlConfigSource(config_factory)
        ConfigEntry.__table__.drop(memory_engine)

        with pytest.raises(ServiceUnavailableException):
            source.save("name", "value", "cms")
