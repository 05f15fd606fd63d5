"""Unit tests for the config module"""

import json
import os

import pytest

from release_bot.config import Config

ENV_VARS = (
    "TG_KEY", "GITHUB_TOKEN", "GITHUB_OWNER", "GITHUB_REPO",
    "ALLOWED_USER_IDS", "ALLOWED_CHAT_IDS", "GITHUB_WORKFLOW_FILE", "GITHUB_WORKFLOW_REF",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep load_dotenv away from any .env in the real working directory
    monkeypatch.chdir(tmp_path)
    yield
    for name in ENV_VARS:
        os.environ.pop(name, None)


@pytest.fixture
def config_file(tmp_path):
    def write(data):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(data))
        return str(path)
    return write


VALID = {
    "telegram": {
        "bot_token": "123:abc",
        "allowed_user_ids": [1, 2],
        "allowed_chat_ids": [-100, "3"]
    },
    "github": {
        "token": "ghp_test",
        "owner": "octo",
        "repo": "app"
    }
}


class TestConfigFile:
    """Loading from a JSON file"""

    def test_config_loading(self, config_file):
        config = Config(config_file(VALID))

        assert config.telegram_bot_token == "123:abc"
        assert config.github_token == "ghp_test"
        assert config.github_owner == "octo"
        assert config.github_repo == "app"
        assert config.allowed_user_ids == frozenset({1, 2})
        assert config.allowed_chat_ids == frozenset({-100, 3})

    def test_workflow_defaults(self, config_file):
        config = Config(config_file(VALID))

        assert config.workflow_file == "merge.yml"
        assert config.workflow_ref == "develop"

    def test_workflow_overrides(self, config_file):
        data = json.loads(json.dumps(VALID))
        data["github"]["workflow_file"] = "release.yml"
        data["github"]["workflow_ref"] = "main"

        config = Config(config_file(data))

        assert config.workflow_file == "release.yml"
        assert config.workflow_ref == "main"

    def test_missing_section(self, config_file):
        with pytest.raises(ValueError, match="Missing required config field: github"):
            Config(config_file({"telegram": VALID["telegram"]}))

    def test_missing_key(self, config_file):
        data = json.loads(json.dumps(VALID))
        del data["github"]["owner"]

        with pytest.raises(ValueError, match="github.owner"):
            Config(config_file(data))

    def test_invalid_id(self, config_file):
        data = json.loads(json.dumps(VALID))
        data["telegram"]["allowed_user_ids"] = ["abc"]

        with pytest.raises(ValueError, match="Invalid ID"):
            Config(config_file(data))

    def test_allow_lists_default_to_empty(self, config_file):
        data = json.loads(json.dumps(VALID))
        del data["telegram"]["allowed_user_ids"]
        del data["telegram"]["allowed_chat_ids"]

        config = Config(config_file(data))

        assert config.allowed_user_ids == frozenset()
        assert config.allowed_chat_ids == frozenset()


class TestConfigEnvironment:
    """Falling back to environment variables"""

    def test_config_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            Config("nonexistent.json")

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("TG_KEY", "123:env")
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
        monkeypatch.setenv("GITHUB_OWNER", "octo")
        monkeypatch.setenv("GITHUB_REPO", "app")
        monkeypatch.setenv("ALLOWED_USER_IDS", "1, 2,")
        monkeypatch.setenv("ALLOWED_CHAT_IDS", "-100")

        config = Config("nonexistent.json")

        assert config.telegram_bot_token == "123:env"
        assert config.github_token == "ghp_env"
        assert config.allowed_user_ids == frozenset({1, 2})
        assert config.allowed_chat_ids == frozenset({-100})
        assert config.workflow_file == "merge.yml"

    def test_incomplete_env_is_fatal(self, monkeypatch):
        monkeypatch.setenv("TG_KEY", "123:env")
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")

        with pytest.raises(FileNotFoundError, match="GITHUB_OWNER"):
            Config("nonexistent.json")

    def test_dotenv_file_is_read(self, tmp_path):
        (tmp_path / ".env").write_text(
            "TG_KEY=123:dotenv\n"
            "GITHUB_TOKEN=ghp_dotenv\n"
            "GITHUB_OWNER=octo\n"
            "GITHUB_REPO=app\n"
            "ALLOWED_USER_IDS=7\n"
        )

        config = Config("nonexistent.json")

        assert config.telegram_bot_token == "123:dotenv"
        assert config.allowed_user_ids == frozenset({7})

    def test_file_wins_over_env(self, monkeypatch, config_file):
        monkeypatch.setenv("TG_KEY", "123:env")
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
        monkeypatch.setenv("GITHUB_OWNER", "env-owner")
        monkeypatch.setenv("GITHUB_REPO", "env-repo")

        config = Config(config_file(VALID))

        assert config.github_owner == "octo"
