"""Config loading, saving, and reload handling for the YAML config file."""

from __future__ import annotations

import json
import logging
import os
import re
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from switchyard.core.errors import ConfigLoadError, ConfigSaveError, ConfigValidationError
from switchyard.core.model import Condition, ConditionType, Config, Rule, RuleLogic

LOGGER = logging.getLogger(__name__)

SAVE_GRACE_S = 0.1

_BOOL_TAG = "tag:yaml.org,2002:bool"
_STRICT_BOOL_RE = re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$")


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys and only reads true/false as booleans."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != _BOOL_TAG
    ]

UniqueKeyLoader.add_implicit_resolver(_BOOL_TAG, _STRICT_BOOL_RE, list("tTfF"))


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedConfig:
    config: Config
    warnings: tuple[str, ...]


def config_dir() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
    return xdg_config / "switchyard"


def config_path() -> Path:
    return config_dir() / "config.yaml"


def _load_schema_validator() -> Any:
    schema_text = resources.files("switchyard.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"Invalid YAML in {path}: {exc}") from exc

    # An empty file is an empty config.
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def config_from_document(doc: dict[str, Any], source: Path | str = "<config>") -> Config:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    rules = tuple(
        Rule(
            name=rule_doc.get("name", ""),
            conditions=tuple(
                Condition(type=ConditionType(cond["type"]), pattern=cond["pattern"])
                for cond in rule_doc["conditions"]
            ),
            logic=RuleLogic(rule_doc.get("logic") or RuleLogic.ALL.value),
            browser=rule_doc.get("browser", ""),
            always_ask=rule_doc.get("always_ask", False),
        )
        for rule_doc in doc.get("rules", [])
    )

    return Config(
        prompt_on_click=doc.get("prompt_on_click", True),
        fallback_browser=doc.get("fallback_browser") or None,
        check_default_browser=doc.get("check_default_browser", True),
        force_dark_mode=doc.get("force_dark_mode", False),
        hidden_browsers=tuple(doc.get("hidden_browsers", [])),
        rules=rules,
    )


def config_to_document(config: Config) -> dict[str, Any]:
    doc: dict[str, Any] = {
        "prompt_on_click": config.prompt_on_click,
        "fallback_browser": config.fallback_browser,
        "check_default_browser": config.check_default_browser,
        "force_dark_mode": config.force_dark_mode,
        "hidden_browsers": list(config.hidden_browsers),
        "rules": [],
    }
    for rule in config.rules:
        doc["rules"].append(
            {
                "name": rule.name,
                "conditions": [
                    {"type": cond.type.value, "pattern": cond.pattern}
                    for cond in rule.conditions
                ],
                "logic": rule.logic.value,
                "browser": rule.browser,
                "always_ask": rule.always_ask,
            }
        )
    return doc


def load_config(path: Path | None = None) -> LoadedConfig:
    """Load the config file, falling back to defaults on any failure.

    A missing file is not a problem and yields the defaults silently. Read,
    parse, and schema errors are logged and reported through ``warnings``.
    """
    path = path or config_path()
    if not path.exists():
        return LoadedConfig(config=Config(), warnings=())

    try:
        config = config_from_document(_read_yaml(path), path)
    except (ConfigLoadError, ConfigValidationError) as exc:
        warning = f"{exc}. Using default configuration"
        LOGGER.warning(warning)
        return LoadedConfig(config=Config(), warnings=(warning,))
    return LoadedConfig(config=config, warnings=())


def save_config(config: Config, path: Path | None = None) -> None:
    path = path or config_path()
    content = yaml.safe_dump(config_to_document(config), sort_keys=False, allow_unicode=True)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise ConfigSaveError(f"Could not write config file {path}: {exc}") from exc


class WriteGuard:
    """Marks a save in flight until a grace window after it finishes.

    File-change notifications caused by our own writes arrive shortly after
    the write returns; the grace window covers them. Every write takes a new
    generation so a timer left over from an earlier write never releases a
    later one.
    """

    def __init__(
        self,
        grace_s: float = SAVE_GRACE_S,
        *,
        timer_factory: Callable[[float, Callable[[], None]], Any] = threading.Timer,
    ) -> None:
        self._grace_s = grace_s
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._generation = 0
        self._active = False

    @property
    def active(self) -> bool:
        with self._lock:
            return self._active

    @contextmanager
    def writing(self) -> Iterator[None]:
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._active = True
        try:
            yield
        finally:
            timer = self._timer_factory(self._grace_s, lambda: self._release(generation))
            timer.daemon = True
            timer.start()

    def _release(self, generation: int) -> None:
        with self._lock:
            if generation == self._generation:
                self._active = False


class ConfigStore:
    """Owns the current config snapshot and its backing file."""

    def __init__(
        self,
        path: Path | None = None,
        *,
        guard: WriteGuard | None = None,
    ) -> None:
        self.path = path or config_path()
        self._guard = guard or WriteGuard()
        self._subscribers: list[Callable[[Config], None]] = []
        loaded = load_config(self.path)
        self._config = loaded.config
        self.load_warnings = loaded.warnings

    @property
    def config(self) -> Config:
        return self._config

    @property
    def saving(self) -> bool:
        return self._guard.active

    def subscribe(self, callback: Callable[[Config], None]) -> Callable[[], None]:
        """Register for "config replaced" events; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def save(self, config: Config) -> None:
        # The snapshot is replaced before writing and stays replaced if the
        # write fails.
        self._replace(config)
        with self._guard.writing():
            save_config(config, self.path)

    def reload(self) -> Config:
        loaded = load_config(self.path)
        self.load_warnings = loaded.warnings
        self._replace(loaded.config)
        return loaded.config

    def handle_file_changed(self) -> bool:
        """React to an external change notification for the config file.

        Returns whether a reload happened.
        """
        if self._guard.active:
            LOGGER.debug("Ignoring change notification for %s during save", self.path)
            return False
        LOGGER.info("Config file %s changed on disk, reloading", self.path)
        self.reload()
        return True

    def _replace(self, config: Config) -> None:
        self._config = config
        for callback in list(self._subscribers):
            callback(config)
