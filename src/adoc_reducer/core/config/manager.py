"""
adoc-reducer configuration management (YAML layers plus environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from adoc_reducer.core.exceptions import ConfigError
from adoc_reducer.core.schemas.validation import SchemaValidationError, validate_payload
from adoc_reducer.core.utils.io import iter_yaml_files, read_yaml
from adoc_reducer.core.utils.merge import deep_merge
from adoc_reducer.data import get_data_path

from .cache import get_cached_config

logger = logging.getLogger(__name__)

ENV_PREFIX = "ADOC_REDUCER_"
PROJECT_CONFIG_DIRNAME = ".adoc-reducer"
CONFIG_SCHEMA = "config/config.schema.yaml"
DEFAULT_LAYER = "default"


def get_project_config_dir(repo_root: Path) -> Path:
    return repo_root / PROJECT_CONFIG_DIRNAME


class ConfigManager:
    """Load, merge, and validate adoc-reducer configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: ADOC_REDUCER_<SECTION>__<KEY>
    2. Project-local config: <repo-root>/.adoc-reducer/config.local/*.yaml (alphabetical order, uncommitted)
    3. Project config: <repo-root>/.adoc-reducer/config/*.yaml (alphabetical order)
    4. Bundled defaults: adoc_reducer.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root).expanduser().resolve() if repo_root else Path.cwd().resolve()

        # Bundled defaults from adoc_reducer.data package (always available)
        self.core_config_dir = get_data_path("config")

        project_root_dir = get_project_config_dir(self.repo_root)
        self.project_config_dir = project_root_dir / "config"
        # Project-local config overrides (uncommitted; per-user per-project)
        self.project_local_config_dir = project_root_dir / "config.local"

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Configuration must never silently ignore invalid YAML.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except Exception as exc:
            raise ConfigError(f"Invalid configuration file {path}: {exc}", context={"path": str(path)}) from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file {path} must contain a mapping", context={"path": str(path)})
        return data

    def validate_schema(self, config: Dict[str, Any], schema_name: str = CONFIG_SCHEMA) -> None:
        try:
            validate_payload(config, schema_name)
        except SchemaValidationError as exc:
            raise ConfigError(str(exc), context={"schema": schema_name}) from exc

    # ========== Environment overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str, *, strict: bool) -> List[str]:
        if not raw:
            return []
        segs = raw.split("__")
        processed: List[str] = []
        for seg in segs:
            if seg == "":
                if strict:
                    raise ConfigError(f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.")
                return []
            processed.append(seg.lower())
        return processed

    def _iter_env_overrides(self, *, strict: bool) -> Iterator[Tuple[List[str], Any, str]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            path = self._parse_env_key(raw, strict=strict)
            if not path:
                continue
            yield path, self._coerce_type(os.environ[key]), raw

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> List[str]:
        """Assign ``value`` at ``path``, matching existing keys case-insensitively.

        ``include_map`` matches an existing ``includeMap`` key, so environment
        variables can address camelCase settings.

        Returns:
            The keys actually used, e.g. ``["reducer", "includeMap"]``.
        """
        cur: Any = root
        resolved: List[str] = []
        for i, part in enumerate(path):
            if not isinstance(cur, dict):
                raise ConfigError(f"Cannot override {'.'.join(path)}: path traverses a non-mapping value")
            candidates = {self._canonical(k): k for k in cur.keys() if isinstance(k, str)}
            key = candidates.get(self._canonical(part), part)
            resolved.append(key)
            if i == len(path) - 1:
                cur[key] = value
                break
            if key not in cur:
                cur[key] = {}
            cur = cur[key]
        return resolved

    @staticmethod
    def _canonical(key: str) -> str:
        return key.replace("_", "").replace("-", "").lower()

    def apply_env_overrides(self, cfg: Dict[str, Any], *, strict: bool) -> None:
        for path, typed_value, raw in self._iter_env_overrides(strict=strict):
            logger.debug("Config override from %s%s", ENV_PREFIX, raw)
            self._set_nested(cfg, path, typed_value)

    # ========== Loading ==========

    def _layers(self) -> Iterator[Tuple[str, Dict[str, Any]]]:
        """Yield ``(label, data)`` for every YAML file, lowest priority first."""
        for label, directory in (
            (DEFAULT_LAYER, self.core_config_dir),
            ("project", self.project_config_dir),
            ("local", self.project_local_config_dir),
        ):
            for path in iter_yaml_files(directory):
                name = label if label == DEFAULT_LAYER else f"{label}:{path.name}"
                yield name, self.load_yaml(path)

    def _load_config_uncached(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge configuration from all sources (UNCACHED)."""
        cfg: Dict[str, Any] = {}
        for _, data in self._layers():
            cfg = deep_merge(cfg, data)
        self.apply_env_overrides(cfg, strict=validate)
        if validate:
            self.validate_schema(cfg)
        return cfg

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load configuration using centralized cache.

        Notes:
        - `validate=True` will validate the (cached) config before returning.
        - Returned dict should be treated as immutable.
        """
        cfg = get_cached_config(repo_root=self.repo_root, validate=False)
        if validate:
            # Strict parsing of env override keys even when the config came from cache.
            _ = list(self._iter_env_overrides(strict=True))
            self.validate_schema(cfg)
        return cfg

    # ========== Accessor Methods ==========

    def sources(self) -> Dict[str, str]:
        """Map every dot-notation leaf key to the layer that set its value.

        Labels are ``default`` for bundled files, ``project:<file>`` and
        ``local:<file>`` for project files, and ``env:<VARIABLE>`` for
        environment overrides. Empty mappings count as leaves.
        """
        origins: Dict[str, str] = {}
        cfg: Dict[str, Any] = {}
        for label, data in self._layers():
            for key, empty in _leaf_keys(data):
                # Merging an empty mapping keeps what lower layers set below it.
                if empty and any(k.startswith(key + ".") for k in origins):
                    continue
                _record(origins, key, label)
            cfg = deep_merge(cfg, data)

        for path, value, raw in self._iter_env_overrides(strict=False):
            resolved = ".".join(self._set_nested(cfg, path, value))
            label = f"env:{ENV_PREFIX}{raw}"
            _record(origins, resolved, label)
            if isinstance(value, dict) and value:
                for key, _ in _leaf_keys(value, resolved + "."):
                    _record(origins, key, label)
        return origins

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-notation key.

        Example:
            >>> manager.get('reducer.safe')
            'unsafe'
            >>> manager.get('nonexistent.key', 'fallback')
            'fallback'
        """
        current: Union[Dict[str, Any], Any] = self.load_config(validate=False)
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


def _leaf_keys(data: Dict[str, Any], prefix: str = "") -> Iterator[Tuple[str, bool]]:
    """Yield ``(dotted_key, is_empty_mapping)`` for each leaf of ``data``."""
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict) and value:
            yield from _leaf_keys(value, dotted + ".")
        else:
            yield dotted, isinstance(value, dict)


def _record(origins: Dict[str, str], key: str, label: str) -> None:
    # A value replaces whatever lower layers set below or above it.
    for existing in [k for k in origins if k.startswith(key + ".") or key.startswith(k + ".")]:
        del origins[existing]
    origins[key] = label


__all__ = ["ConfigManager", "DEFAULT_LAYER", "ENV_PREFIX", "PROJECT_CONFIG_DIRNAME", "get_project_config_dir"]
