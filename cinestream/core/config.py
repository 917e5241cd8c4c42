"""
Layered configuration for Cinestream.

A ``Config`` is a plain dict of sections (``{"CINESTREAM": {...}}``) built from
defaults, ``SECTION__KEY`` environment variables and runtime overrides, with
attribute access on top and ``SecretStr`` values masked in its repr.
"""

import os
from copy import deepcopy
from typing import Any, Dict, Iterable, List, Union

from pydantic import BaseModel, SecretStr
from pydantic_settings import BaseSettings

SettingsLike = Union[Dict[str, Any], BaseSettings, BaseModel, List[Any], None]

ENV_DELIMITER = "__"
MASK = "********"


def _hide_secrets(data: Any) -> Any:
    if isinstance(data, SecretStr):
        return MASK
    if isinstance(data, dict):
        return {key: _hide_secrets(item) for key, item in data.items()}
    if isinstance(data, list):
        return [_hide_secrets(item) for item in data]
    return data


def _parse_env(raw: str) -> Any:
    """Turn ``"true"``, ``"42"`` or ``"2.5"`` into bool/int/float; keep anything else as text.

    Only used for keys whose current value is not a string.
    """
    if raw.lower() in ("true", "false"):
        return raw.lower() == "true"
    for cast in (int, float):
        try:
            return cast(raw)
        except ValueError:
            pass
    return raw


class Section:
    """Read-only attribute view over one nested section of a :class:`Config`."""

    def __init__(self, values: Dict[str, Any]):
        self._values = values

    def __getattr__(self, key: str) -> Any:
        if key.startswith("_") or key not in self._values:
            raise AttributeError(f"Config section has no key '{key}'")
        value = self._values[key]
        return Section(value) if isinstance(value, dict) else value

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def to_dict(self) -> Dict[str, Any]:
        return deepcopy(self._values)

    def __repr__(self) -> str:
        return f"Section({_hide_secrets(self._values)!r})"


class Config(dict):
    """
    Cinestream configuration: sections of settings merged in precedence order.

    ``Config.load`` applies defaults, then environment variables, then overrides.
    An environment variable only lands in a section that already exists, so
    ``CINESTREAM__MONGO_URI=mongodb://mongo:27017`` sets
    ``config.CINESTREAM.MONGO_URI`` while unrelated ``A__B`` variables are ignored.

    Example:
        >>> config = Config.load(defaults={"CINESTREAM": {"PORT": 8080}})
        >>> config.CINESTREAM.PORT
        8080
    """

    def __init__(self, *layers: SettingsLike):
        merged: Dict[str, Any] = {}
        for layer in _flatten(layers):
            _merge_into(merged, layer)
        super().__init__(merged)

    def __getattr__(self, key: str) -> Any:
        if key not in self:
            raise AttributeError(f"Config has no section '{key}'")
        value = self[key]
        return Section(value) if isinstance(value, dict) else value

    def __repr__(self) -> str:
        return f"Config({_hide_secrets(dict(self))!r})"

    @classmethod
    def load(cls, *, defaults: SettingsLike = None, overrides: SettingsLike = None) -> "Config":
        config = cls(defaults)
        config._apply_env()
        for layer in _flatten([overrides]):
            _merge_into(config, layer)
        return config

    def _apply_env(self) -> None:
        for name, raw in os.environ.items():
            parts = [part.upper() for part in name.split(ENV_DELIMITER) if part]
            if len(parts) < 2 or parts[0] not in self:
                continue
            node = self
            for key in parts[:-1]:
                if not isinstance(node.get(key), dict):
                    node[key] = {}
                node = node[key]
            leaf = parts[-1]
            current = node.get(leaf)
            if isinstance(current, SecretStr):
                node[leaf] = SecretStr(raw)
            elif isinstance(current, str):
                node[leaf] = raw
            else:
                node[leaf] = _parse_env(raw)


def _flatten(layers: Iterable[SettingsLike]) -> List[Dict[str, Any]]:
    flat: List[Dict[str, Any]] = []
    for layer in layers:
        if layer is None:
            continue
        if isinstance(layer, BaseModel):
            # python-mode dump keeps SecretStr wrapped
            flat.append(layer.model_dump())
        elif isinstance(layer, dict):
            flat.append(deepcopy(layer))
        elif isinstance(layer, list):
            flat.extend(_flatten(layer))
        else:
            raise TypeError(f"Cannot build a Config from {type(layer).__name__}")
    return flat


def _merge_into(target: dict, layer: Dict[str, Any]) -> None:
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            _merge_into(current, value)
        elif isinstance(current, SecretStr) and isinstance(value, str):
            target[key] = SecretStr(value)
        else:
            target[key] = value
