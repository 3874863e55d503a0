"""Cloud connection settings and their serialised form."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import IntFlag
from typing import Any, Mapping

SECRET_MARK = "(secret)"


class MonotoneError(Exception):
    """Raised when a storage operation or a configuration is invalid."""


class CloudField(IntFlag):
    """Bit mask that selects which cloud settings an alter applies."""

    NAME = 1 << 0
    TYPE = 1 << 1
    LOGIN = 1 << 2
    PASSWORD = 1 << 3
    URL = 1 << 4
    DEBUG = 1 << 5


_FIELD_ATTRS = {
    CloudField.NAME: "name",
    CloudField.TYPE: "type",
    CloudField.LOGIN: "login",
    CloudField.PASSWORD: "password",
    CloudField.URL: "url",
    CloudField.DEBUG: "debug",
}

_FIELD_TYPES = {
    "name": str,
    "type": str,
    "login": str,
    "password": str,
    "url": str,
    "debug": bool,
}


@dataclass
class CloudConfig:
    """Settings of one cloud: its name, kind, credentials and endpoint."""

    name: str = ""
    type: str = ""
    login: str = ""
    password: str = ""
    url: str = ""
    debug: bool = False

    def copy(self) -> CloudConfig:
        """Return an independent copy of these settings."""
        return dataclasses.replace(self)

    def alter(self, other: CloudConfig, mask: int) -> None:
        """Take the settings selected by ``mask`` from ``other``."""
        for flag, attr in _FIELD_ATTRS.items():
            if mask & flag:
                setattr(self, attr, getattr(other, attr))

    def to_dict(self, safe: bool = False) -> dict[str, Any]:
        """Serialise the settings; ``safe`` hides the password."""
        return {
            "name": self.name,
            "type": self.type,
            "login": self.login,
            "password": SECRET_MARK if safe else self.password,
            "url": self.url,
            "debug": self.debug,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CloudConfig:
        """Build settings from a serialised map; missing keys keep defaults."""
        config = cls()
        for key, value in data.items():
            expected = _FIELD_TYPES.get(key)
            if expected is None:
                continue
            if type(value) is not expected:
                raise MonotoneError(
                    f"cloud config: '{key}' must be of type {expected.__name__}"
                )
            setattr(config, key, value)
        return config