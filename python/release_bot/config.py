#!/usr/bin/env python3
"""
Configuration management for the release control bot.

This module loads credentials, the target repository and the access
allow-lists from a JSON file, falling back to environment variables
(optionally read from a .env file) when the file is absent.
"""

import json
import os
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Optional

from dotenv import find_dotenv, load_dotenv

DEFAULT_WORKFLOW_FILE = "merge.yml"
DEFAULT_WORKFLOW_REF = "develop"

REQUIRED_ENV = ("TG_KEY", "GITHUB_TOKEN", "GITHUB_OWNER", "GITHUB_REPO")


def _parse_ids(values: Iterable, source: str) -> FrozenSet[int]:
    ids = set()
    for value in values:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                continue
        try:
            ids.add(int(value))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid ID in {source}: {value!r}") from None
    return frozenset(ids)


class Config:
    """Configuration management"""

    def __init__(self, config_path: str = "config.json"):
        self.config_path = Path(config_path)
        self._config = self._load_config()
        self._allowed_user_ids = _parse_ids(
            self._config["telegram"].get("allowed_user_ids", []),
            "telegram.allowed_user_ids"
        )
        self._allowed_chat_ids = _parse_ids(
            self._config["telegram"].get("allowed_chat_ids", []),
            "telegram.allowed_chat_ids"
        )

    def _load_config(self) -> Dict:
        """Load configuration from the JSON file or the environment"""
        if not self.config_path.exists():
            config = self._load_from_env()
            if config is None:
                raise FileNotFoundError(
                    f"Configuration file not found: {self.config_path}\n"
                    "Create it from config.example.json or set "
                    + ", ".join(REQUIRED_ENV)
                )
            return config

        with open(self.config_path) as f:
            config = json.load(f)

        for section in ("telegram", "github"):
            if section not in config:
                raise ValueError(f"Missing required config field: {section}")
        required = {
            "telegram": ["bot_token"],
            "github": ["token", "owner", "repo"],
        }
        for section, keys in required.items():
            for key in keys:
                if not config[section].get(key):
                    raise ValueError(f"Missing required config field: {section}.{key}")

        return config

    @staticmethod
    def _load_from_env() -> Optional[Dict]:
        load_dotenv(find_dotenv(usecwd=True))
        if not all(os.getenv(name) for name in REQUIRED_ENV):
            return None
        return {
            "telegram": {
                "bot_token": os.environ["TG_KEY"],
                "allowed_user_ids": os.getenv("ALLOWED_USER_IDS", "").split(","),
                "allowed_chat_ids": os.getenv("ALLOWED_CHAT_IDS", "").split(","),
            },
            "github": {
                "token": os.environ["GITHUB_TOKEN"],
                "owner": os.environ["GITHUB_OWNER"],
                "repo": os.environ["GITHUB_REPO"],
                "workflow_file": os.getenv("GITHUB_WORKFLOW_FILE", DEFAULT_WORKFLOW_FILE),
                "workflow_ref": os.getenv("GITHUB_WORKFLOW_REF", DEFAULT_WORKFLOW_REF),
            },
        }

    @property
    def telegram_bot_token(self) -> str:
        return self._config["telegram"]["bot_token"]

    @property
    def allowed_user_ids(self) -> FrozenSet[int]:
        return self._allowed_user_ids

    @property
    def allowed_chat_ids(self) -> FrozenSet[int]:
        return self._allowed_chat_ids

    @property
    def github_token(self) -> str:
        return self._config["github"]["token"]

    @property
    def github_owner(self) -> str:
        return self._config["github"]["owner"]

    @property
    def github_repo(self) -> str:
        return self._config["github"]["repo"]

    @property
    def workflow_file(self) -> str:
        return self._config["github"].get("workflow_file") or DEFAULT_WORKFLOW_FILE

    @property
    def workflow_ref(self) -> str:
        return self._config["github"].get("workflow_ref") or DEFAULT_WORKFLOW_REF
