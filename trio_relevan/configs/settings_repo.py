from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

# (settings path, environment variable, converter)
ENV_BINDINGS = (
    (("search", "backend"), "SEARCH_BACKEND", str),
    (("search", "base_url"), "SEARCH_API_BASE_URL", str),
    (("search", "timeout"), "SEARCH_API_TIMEOUT", float),
    (("search", "default_k"), "SEARCH_DEFAULT_K", int),
    (("logging", "level"), "LOG_LEVEL", str),
)


class SettingsRepo:
    """Central repository for front-end settings.

    Values are resolved in this order, later sources winning:
    ``settings.json``, ``env.<APP_ENV>.json`` overrides, environment
    variables, then the ``overrides`` mapping passed in by the caller.
    """

    def __init__(self, env: Optional[str] = None, overrides: Optional[Mapping[str, Any]] = None) -> None:
        self._root = Path(__file__).resolve().parent
        self.env = env or os.getenv("APP_ENV", "dev")
        env_overrides = self._load_json(f"env.{self.env}.json").get("overrides", {})
        settings = self._merge_dicts(self._load_json("settings.json"), env_overrides)
        settings = self._merge_dicts(settings, self._environment_overrides(settings))
        self._settings = self._merge_dicts(settings, dict(overrides or {}))

    def get(self, *keys: str, default: Any = None) -> Any:
        node: Any = self._settings
        for key in keys:
            if not isinstance(node, dict):
                return default
            node = node.get(key)
        return node if node is not None else default

    def get_search_settings(self) -> Dict[str, Any]:
        return dict(self._settings.get("search", {}))

    def as_dict(self) -> Dict[str, Any]:
        return json.loads(json.dumps(self._settings))

    @classmethod
    def _environment_overrides(cls, settings: Dict[str, Any]) -> Dict[str, Any]:
        overrides: Dict[str, Any] = {}
        for path, env_key, convert in ENV_BINDINGS:
            raw = os.getenv(env_key)
            if raw is None or raw.strip() == "":
                continue
            value = cls._convert(env_key, raw.strip(), convert)
            if value is None:
                continue
            section, key = path
            overrides.setdefault(section, {})[key] = value
        return overrides

    @staticmethod
    def _convert(env_key: str, raw: str, convert: Callable[[str], Any]) -> Any:
        try:
            return convert(raw)
        except ValueError:
            logger.warning("Ignoring invalid value for %s: %r", env_key, raw)
            return None

    @lru_cache(maxsize=None)
    def _load_json(self, relative_path: str) -> Dict[str, Any]:
        path = self._root / relative_path
        try:
            with open(path, "r", encoding="utf-8") as handle:
                return json.load(handle)
        except FileNotFoundError:
            logger.debug("Config file missing: %s", path)
        except json.JSONDecodeError as exc:
            logger.warning("Invalid JSON in %s: %s", path, exc)
        return {}

    @staticmethod
    def _merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        if not override:
            return dict(base)
        merged = dict(base)
        for key, value in override.items():
            if (
                key in merged
                and isinstance(merged[key], dict)
                and isinstance(value, dict)
            ):
                merged[key] = SettingsRepo._merge_dicts(merged[key], value)
            else:
                merged[key] = value
        return merged
