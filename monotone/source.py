"""Storage source settings and on-disk path layout."""

from __future__ import annotations

import dataclasses
import uuid as uuid_module
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Any, Mapping

from monotone.cloud_config import MonotoneError

FILTERED_MARK = "(filtered)"


class SourceField(IntFlag):
    """Bit mask that selects which source settings an alter applies."""

    UUID = 1 << 0
    NAME = 1 << 1
    PATH = 1 << 2
    CLOUD = 1 << 3
    CLOUD_DROP_LOCAL = 1 << 4
    SYNC = 1 << 5
    CRC = 1 << 6
    REFRESH_WM = 1 << 7
    REGION_SIZE = 1 << 8
    COMPRESSION = 1 << 9
    COMPRESSION_LEVEL = 1 << 10
    ENCRYPTION = 1 << 11
    ENCRYPTION_KEY = 1 << 12


_FIELD_ATTRS = {
    SourceField.UUID: "uuid",
    SourceField.NAME: "name",
    SourceField.PATH: "path_dir",
    SourceField.CLOUD: "cloud",
    SourceField.CLOUD_DROP_LOCAL: "cloud_drop_local",
    SourceField.SYNC: "sync",
    SourceField.CRC: "crc",
    SourceField.REFRESH_WM: "refresh_wm",
    SourceField.REGION_SIZE: "region_size",
    SourceField.COMPRESSION: "compression",
    SourceField.COMPRESSION_LEVEL: "compression_level",
    SourceField.ENCRYPTION: "encryption",
    SourceField.ENCRYPTION_KEY: "encryption_key",
}

_KEY_TYPES = {
    "name": str,
    "path": str,
    "cloud": str,
    "cloud_drop_local": bool,
    "sync": bool,
    "crc": bool,
    "refresh_wm": int,
    "region_size": int,
    "compression": str,
    "compression_level": int,
    "encryption": str,
    "encryption_key": str,
}


def _nil_uuid() -> uuid_module.UUID:
    return uuid_module.UUID(int=0)


@dataclass
class Source:
    """Settings of one storage: identity, location, and file options."""

    uuid: uuid_module.UUID = field(default_factory=_nil_uuid)
    name: str = ""
    path_dir: str = ""
    cloud: str = ""
    cloud_drop_local: bool = True
    sync: bool = True
    crc: bool = False
    refresh_wm: int = 40 * 1024 * 1024
    region_size: int = 128 * 1024
    compression: str = ""
    compression_level: int = 0
    encryption: str = ""
    encryption_key: str = ""

    def copy(self) -> Source:
        """Return an independent copy of these settings."""
        return dataclasses.replace(self)

    def alter(self, other: Source, mask: int) -> None:
        """Take the settings selected by ``mask`` from ``other``."""
        for flag, attr in _FIELD_ATTRS.items():
            if mask & flag:
                setattr(self, attr, getattr(other, attr))

    def to_dict(self, safe: bool = False, debug: bool = False) -> dict[str, Any]:
        """Serialise the settings.

        ``safe`` leaves out the encryption key, ``debug`` hides the uuid.
        """
        result: dict[str, Any] = {
            "uuid": FILTERED_MARK if debug else str(self.uuid),
            "name": self.name,
            "path": self.path_dir,
            "cloud": self.cloud,
            "cloud_drop_local": self.cloud_drop_local,
            "sync": self.sync,
            "crc": self.crc,
            "refresh_wm": self.refresh_wm,
            "region_size": self.region_size,
            "compression": self.compression,
            "compression_level": self.compression_level,
            "encryption": self.encryption,
        }
        if not safe:
            result["encryption_key"] = self.encryption_key
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Source:
        """Build settings from a serialised map; missing keys keep defaults."""
        source = cls()
        for key, value in data.items():
            if key == "uuid":
                source.uuid = _parse_uuid(value)
                continue
            expected = _KEY_TYPES.get(key)
            if expected is None:
                continue
            if type(value) is not expected:
                raise MonotoneError(
                    f"source: '{key}' must be of type {expected.__name__}"
                )
            setattr(source, "path_dir" if key == "path" else key, value)
        return source

    def path(self, base: str, relative: str = "") -> str:
        """Full path of ``relative`` inside this storage's directory.

        ``base`` is the repository directory, used unless the storage
        path is absolute.
        """
        if not self.path_dir:
            return f"{base}/{self.uuid}/{relative}"
        if self.path_dir.startswith("/"):
            return f"{self.path_dir}/{self.uuid}/{relative}"
        return f"{base}/{self.path_dir}/{self.uuid}/{relative}"


def _parse_uuid(value: Any) -> uuid_module.UUID:
    if isinstance(value, uuid_module.UUID):
        return value
    if not isinstance(value, str):
        raise MonotoneError("source: 'uuid' must be a string")
    try:
        return uuid_module.UUID(value)
    except ValueError as exc:
        raise MonotoneError(f"source: invalid uuid '{value}'") from exc