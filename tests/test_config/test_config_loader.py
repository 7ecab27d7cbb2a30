"""配置加载器测试

测试 YAML 配置加载和缓存
"""

import os

import pytest

from ycms.config import ConfigLoader


class TestConfigLoader:
    """ConfigLoader 测试"""

    def test_config_caching(self, temp_file):
        """测试配置缓存"""
        path = temp_file("settings.yaml", "cms:\n  home_url: /\n")

        config1 = ConfigLoader.load(path)
        config2 = ConfigLoader.load(path)

        assert config1 is config2
        assert ConfigLoader.get_cached_paths() == [os.path.abspath(path)]

    def test_cache_does_not_auto_refresh_until_reload(self, temp_file):
        """测试缓存不会自动刷新，需显式 reload"""
        path = temp_file("settings.yaml", "app_name: v1")

        assert ConfigLoader.load(path)["app_name"] == "v1"

        with open(path, "w", encoding="utf-8") as f:
            f.write("app_name: v2\n")
        assert ConfigLoader.load(path)["app_name"] == "v1"

        assert ConfigLoader.reload(path)["app_name"] == "v2"

    def test_empty_file(self, temp_file):
        path = temp_file("empty.yaml", "")

        assert ConfigLoader.load(path, use_cache=False) == {}

    def test_load_nonexistent_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            ConfigLoader.load(os.path.join(temp_dir, "nonexistent.yaml"), use_cache=False)

    def test_load_with_base_dir(self, temp_file, temp_dir):
        temp_file("subdir/config.yaml", "app_name: Base Dir Test")

        config = ConfigLoader.load("subdir/config.yaml", base_dir=temp_dir, use_cache=False)

        assert config["app_name"] == "Base Dir Test"
