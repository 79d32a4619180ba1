from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

import json5
import yaml

from .config import BeepConfig, default_config, merge_config, normalize_config
from .errors import ConfigParseError

logger = logging.getLogger(__name__)


CONFIG_DIR_ENV = "OPENCODE_CONFIG_DIR"
PROJECT_DIR_NAME = ".opencode"
CONFIG_FILE_NAMES = ("beep.jsonc", "beep.json", "beep.yaml", "beep.yml")


# ============================================================
# Parser strategies
# ============================================================

class ConfigParser(Protocol):
    name: str

    def parse(self, raw: str) -> Dict[str, Any]: ...


class Json5ConfigParser:
    """Comment-tolerant JSON: `//` and `/* */` comments, trailing commas."""

    name = "json5"

    def parse(self, raw: str) -> Dict[str, Any]:
        try:
            data = json5.loads(raw)
        except ValueError as e:
            raise ConfigParseError(f"json5: {e}") from e
        if not isinstance(data, dict):
            raise ConfigParseError("json5: top-level value is not a mapping")
        return data


class YamlConfigParser:
    """For beep.yaml / beep.yml only; YAML 1.1 reads some JSON numbers as strings."""

    name = "yaml"

    def parse(self, raw: str) -> Dict[str, Any]:
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigParseError(f"yaml: {e}") from e
        if not isinstance(data, dict):
            raise ConfigParseError("yaml: top-level value is not a mapping")
        return data


class JsonConfigParser:
    name = "json"

    def parse(self, raw: str) -> Dict[str, Any]:
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise ConfigParseError(f"json: {e}") from e
        if not isinstance(data, dict):
            raise ConfigParseError("json: top-level value is not a mapping")
        return data


YAML_SUFFIXES = (".yaml", ".yml")


def select_parsers(path: Optional[Path] = None) -> List[ConfigParser]:
    """
    Parser chain for one config file.

    JSON files: comment-tolerant json5 first, strict JSON as the last resort.
    YAML files: PyYAML, then strict JSON.
    """
    if path is not None and path.suffix.lower() in YAML_SUFFIXES:
        return [YamlConfigParser(), JsonConfigParser()]
    return [Json5ConfigParser(), JsonConfigParser()]


def parse_config(raw: str, parsers: Optional[Sequence[ConfigParser]] = None) -> Dict[str, Any]:
    errors: List[str] = []
    for parser in parsers or select_parsers():
        try:
            return parser.parse(raw)
        except ConfigParseError as e:
            errors.append(str(e))
    raise ConfigParseError("; ".join(errors) or "no parser available")


# ============================================================
# Discovery
# ============================================================

def config_path_in_dir(directory: Optional[Path]) -> Optional[Path]:
    if directory is None:
        return None
    for name in CONFIG_FILE_NAMES:
        candidate = directory / name
        if candidate.exists():
            return candidate
    return None


def global_config_dir(env: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if env is None else env
    configured = env.get(CONFIG_DIR_ENV)
    if configured:
        return Path(configured)
    return Path.home() / ".config" / "opencode"


def global_config_path(env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    return config_path_in_dir(global_config_dir(env))


def find_project_dir(start: Path) -> Optional[Path]:
    """Nearest `.opencode` directory at or above `start`."""
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / PROJECT_DIR_NAME
        if candidate.is_dir():
            return candidate
    return None


def project_config_path(directory: Optional[str | Path]) -> Optional[Path]:
    if not directory:
        return None
    start = Path(directory)
    opencode_dir = find_project_dir(start)
    if opencode_dir is not None:
        found = config_path_in_dir(opencode_dir) or config_path_in_dir(opencode_dir.parent)
        if found is not None:
            return found
    return config_path_in_dir(start)


# ============================================================
# Loading
# ============================================================

def load_config_file(path: Optional[Path], parsers: Optional[Sequence[ConfigParser]] = None) -> Optional[Dict[str, Any]]:
    """
    Read and parse one scope's config blob.

    Missing file -> None, silently. Unreadable or unparsable file -> None with
    a warning, so that scope falls back to defaults.
    """
    if path is None:
        return None
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning(f"beep config read failed, using defaults: {path}: {e}")
        return None

    try:
        return parse_config(raw, parsers or select_parsers(path))
    except ConfigParseError as e:
        logger.warning(f"beep config parse failed, using defaults: {path}: {e}")
        return None


@dataclass(frozen=True)
class ConfigPaths:
    global_path: Optional[Path] = None
    project_path: Optional[Path] = None


@dataclass(frozen=True)
class LoadedConfig:
    config: BeepConfig
    paths: ConfigPaths


def read_config(
    directory: Optional[str | Path],
    *,
    env: Optional[Mapping[str, str]] = None,
    parsers: Optional[Sequence[ConfigParser]] = None,
) -> LoadedConfig:
    paths = ConfigPaths(
        global_path=global_config_path(env),
        project_path=project_config_path(directory),
    )

    config = default_config()
    global_blob = load_config_file(paths.global_path, parsers)
    if global_blob:
        config = merge_config(config, global_blob)
    project_blob = load_config_file(paths.project_path, parsers)
    if project_blob:
        config = merge_config(config, project_blob)

    logger.debug(f"beep config loaded (global={paths.global_path}, project={paths.project_path})")
    return LoadedConfig(config=normalize_config(config), paths=paths)
