"""
Configuration management for the pages CLI.

Multi-environment support:
  Tokens are stored per API URL, so production and local dev can be used
  side by side.

  Config structure (~/.pages/config.json):
  {
    "environments": {
      "https://shop.example.com": {"token": "..."},
      "http://localhost:8000": {"token": "..."}
    },
    "default_url": "https://shop.example.com"
  }

API URL resolution order:
  1. PAGES_API_URL environment variable
  2. --api-url command line flag
  3. default_url from config file
  4. Fallback: https://shop.example.com

Token resolution order:
  1. PAGES_API_TOKEN environment variable
  2. token stored for the current API URL
"""

from __future__ import annotations

import json
import os
from pathlib import Path

DEFAULT_API_URL = "https://shop.example.com"


class Config:
    """Config manager for the pages CLI."""

    def __init__(self, api_url_override: str | None = None):
        self.config_dir = Path.home() / ".pages"
        self.config_file = self.config_dir / "config.json"
        self._data: dict = {}
        self._api_url_override = api_url_override
        self._load()

    def _load(self):
        """Load config from disk. A corrupt file is treated as empty."""
        if self.config_file.exists():
            try:
                with open(self.config_file) as f:
                    self._data = json.load(f)
            except (OSError, ValueError):
                self._data = {}

        if "environments" not in self._data:
            self._data["environments"] = {}

    def _save(self):
        """Save config to disk, owner-only."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self._data, f, indent=2)
        self.config_file.chmod(0o600)

    @property
    def api_url(self) -> str:
        env_url = os.environ.get("PAGES_API_URL")
        if env_url:
            return env_url.rstrip("/")
        if self._api_url_override:
            return self._api_url_override.rstrip("/")
        return self._data.get("default_url", DEFAULT_API_URL).rstrip("/")

    @property
    def token(self) -> str | None:
        env_token = os.environ.get("PAGES_API_TOKEN")
        if env_token:
            return env_token
        return self._data["environments"].get(self.api_url, {}).get("token")

    @token.setter
    def token(self, value: str):
        self._data["environments"].setdefault(self.api_url, {})["token"] = value
        self._save()

    def clear_environment(self):
        """Forget the token for the current API URL."""
        if self.api_url in self._data["environments"]:
            del self._data["environments"][self.api_url]
            self._save()
