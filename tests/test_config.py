"""
Tests for layered settings.
"""

import pytest

from docs_link_checker import config
from docs_link_checker.config import Settings, load_settings
from docs_link_checker.errors import ConfigError


@pytest.fixture(autouse=True)
def no_home_config(tmp_path, monkeypatch):
    """Point the default config location at a file that does not exist"""
    monkeypatch.setattr(config, "default_config_path", lambda: tmp_path / "absent.yaml")


def test_defaults():
    settings = load_settings(environ={})

    assert settings == Settings()
    assert settings.timeout == 5.0
    assert settings.max_concurrency == 50
    assert settings.deadline == 10.0
    assert settings.extensions == (".rst", ".txt")
    assert settings.github_token is None


def test_yaml_file(tmp_path):
    path = tmp_path / "checker.yaml"
    path.write_text(
        "GIT_REPO_TOKEN: from-file\n"
        "timeout: 3\n"
        "max_concurrency: 8\n"
        "extensions: [rst, .md]\n"
    )

    settings = load_settings(config_file=str(path), environ={})

    assert settings.github_token == "from-file"
    assert settings.timeout == 3.0
    assert settings.max_concurrency == 8
    assert settings.extensions == (".rst", ".md")


def test_default_config_file_is_read_when_present(tmp_path, monkeypatch):
    path = tmp_path / ".docs-link-checker.yaml"
    path.write_text("deadline: 30\n")
    monkeypatch.setattr(config, "default_config_path", lambda: path)

    assert load_settings(environ={}).deadline == 30.0


def test_environment_overrides_file(tmp_path):
    path = tmp_path / "checker.yaml"
    path.write_text("github_token: from-file\n")

    settings = load_settings(config_file=str(path), environ={"GIT_REPO_TOKEN": "from-env"})

    assert settings.github_token == "from-env"


def test_github_token_fallback():
    assert load_settings(environ={"GITHUB_TOKEN": "gh"}).github_token == "gh"


def test_command_line_overrides_everything(tmp_path):
    path = tmp_path / "checker.yaml"
    path.write_text("timeout: 3\n")

    settings = load_settings(config_file=str(path), environ={}, timeout=1.5, max_concurrency=None)

    assert settings.timeout == 1.5
    assert settings.max_concurrency == 50


def test_unknown_keys_are_ignored(tmp_path, caplog):
    path = tmp_path / "checker.yaml"
    path.write_text("colour: blue\n")

    assert load_settings(config_file=str(path), environ={}) == Settings()
    assert "colour" in caplog.text


def test_missing_explicit_config_file(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(config_file=str(tmp_path / "nope.yaml"), environ={})


@pytest.mark.parametrize("content", [
    "- a list\n- not a mapping\n",
    "timeout: [unclosed\n",
    "timeout: soon\n",
    "timeout: 0\n",
    "max_concurrency: 2.7\n",
    "max_concurrency: true\n",
    "max_concurrency: many\n",
])
def test_invalid_config(tmp_path, content):
    path = tmp_path / "checker.yaml"
    path.write_text(content)

    with pytest.raises(ConfigError):
        load_settings(config_file=str(path), environ={})
