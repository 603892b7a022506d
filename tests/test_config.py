"""Tests for configuration loading."""

import pytest

from pressroom.config import Config, ConfigModel, load_config, save_config


def write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return path


def test_defaults_when_file_is_empty(tmp_path):
    config = load_config(write(tmp_path, ""))
    assert config.site.domain == "geteducated.com"
    assert config.workflow.sla_hours == 120
    assert config.workflow.link_inventory_limit == 20
    assert config.llm.timeout_seconds == 120


def test_values_are_read(tmp_path):
    path = write(
        tmp_path,
        "llm:\n  provider: mock\n  timeout_seconds: 30\nworkflow:\n  humanize: false\n",
    )
    config = load_config(path)
    assert config.llm.provider == "mock"
    assert config.llm.timeout_seconds == 30
    assert config.workflow.humanize is False


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_config(write(tmp_path, "llm: [unclosed\n"))


@pytest.mark.parametrize(
    "text",
    ["workflow:\n  link_inventory_limit: 25\n", "llm:\n  timeout_seconds: 0\n", "site:\n  domain: '  '\n"],
)
def test_invalid_values(tmp_path, text):
    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(write(tmp_path, text))


def test_site_domain_is_normalized(tmp_path):
    config = load_config(write(tmp_path, "site:\n  domain: https://www.GetEducated.com/\n"))
    assert config.site.domain == "geteducated.com"


def test_secrets_come_from_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("PRESSROOM_DB_PASSWORD", "secret")
    monkeypatch.setenv("WORDPRESS_APP_PASSWORD", "wp-secret")
    config = Config.from_model(ConfigModel(postgres={"password_env": "PRESSROOM_DB_PASSWORD"}))

    assert config.get_llm_config()["api_key"] == "sk-test"
    assert config.get_db_config()["password"] == "secret"
    assert config.get_wordpress_config()["app_password"] == "wp-secret"


def test_config_path_from_environment(monkeypatch, tmp_path):
    path = write(tmp_path, "site:\n  name: Example\n")
    monkeypatch.setenv("PRESSROOM_CONFIG", str(path))
    assert Config().config.site.name == "Example"


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "config.yaml"
    save_config(ConfigModel(site={"name": "Example", "domain": "example.com"}), path)
    assert load_config(path).site.domain == "example.com"
