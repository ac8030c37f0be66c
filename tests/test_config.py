import pytest
import yaml

from chatadapter import config


def test_load_config_parses_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("server:\n  port: 8080\nproxies: ''\n", encoding="utf-8")
    assert config.load_config(path) == {"server": {"port": 8080}, "proxies": ""}


def test_load_config_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert config.load_config(path) == {}


def test_load_config_default_path(tmp_path, monkeypatch):
    (tmp_path / "config.yaml").write_text("a: 1\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    assert config.load_config() == {"a": 1}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        config.load_config(tmp_path / "absent.yaml")


def test_load_config_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("a: [1, 2\n", encoding="utf-8")
    with pytest.raises(yaml.YAMLError):
        config.load_config(path)


def test_load_config_rejects_non_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        config.load_config(path)


def test_init_and_get_config(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "_config", None)
    path = tmp_path / "config.yaml"
    path.write_text("model: x\n", encoding="utf-8")
    loaded = config.init_config(path)
    assert config.get_config() is loaded
    assert loaded == {"model": "x"}


def test_get_config_before_init(monkeypatch):
    monkeypatch.setattr(config, "_config", None)
    with pytest.raises(RuntimeError):
        config.get_config()


def test_init_config_failure_propagates(tmp_path):
    with pytest.raises(FileNotFoundError):
        config.init_config(tmp_path / "absent.yaml")