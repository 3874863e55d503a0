"""Cloud back-ends for partition files and the registry that manages them."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping

from monotone.cloud_config import CloudConfig, MonotoneError
from monotone.ids import Id, IdState
from monotone.source import Source


class Cloud(ABC):
    """A remote store that keeps copies of partition files."""

    def __init__(self, config: CloudConfig, base: str = ".") -> None:
        self.config = config.copy()
        self.base = base
        self.refs = 0

    def ref(self) -> None:
        """Record one more storage that depends on this cloud."""
        self.refs += 1

    def unref(self) -> None:
        """Record that a dependent storage has gone."""
        self.refs -= 1

    @abstractmethod
    def attach(self, source: Source) -> None:
        """Prepare the cloud to hold files of ``source``."""

    @abstractmethod
    def detach(self, source: Source) -> None:
        """Release whatever the cloud holds for ``source``."""

    @abstractmethod
    def download(self, source: Source, id: Id) -> None:
        """Fetch the partition file from the cloud into the storage."""

    @abstractmethod
    def upload(self, source: Source, id: Id) -> None:
        """Copy the local partition file to the cloud."""

    @abstractmethod
    def remove(self, source: Source, id: Id) -> None:
        """Delete the partition file from the cloud."""

    @abstractmethod
    def read(self, source: Source, id: Id, size: int, offset: int) -> bytes:
        """Read ``size`` bytes at ``offset`` of the cloud copy."""


def _read_file(path: str) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise MonotoneError(f"file '{path}' read error: {exc.strerror}") from exc


def _write_file(path: str, data: bytes) -> None:
    try:
        with open(path, "xb") as file:
            file.write(data)
    except OSError as exc:
        raise MonotoneError(f"file '{path}' create error: {exc.strerror}") from exc


class MockCloud(Cloud):
    """Cloud kept in a ``mock`` directory inside the storage directory."""

    def _mock_path(self, source: Source, id: Id) -> str:
        return source.path(self.base, f"mock/{id.min:020d}")

    def _mkdir(self, source: Source) -> None:
        path = source.path(self.base, "mock")
        if not os.path.exists(path):
            try:
                os.makedirs(path, mode=0o755, exist_ok=True)
            except OSError as exc:
                raise MonotoneError(
                    f"mock: directory '{path}' create error: {exc.strerror}"
                ) from exc

    def attach(self, source: Source) -> None:
        """Create the mock directory of ``source`` if it is missing."""
        self._mkdir(source)

    def detach(self, source: Source) -> None:
        """Remove the mock directory of ``source`` if it holds no files."""
        path = source.path(self.base, "mock")
        if os.path.isdir(path) and not os.listdir(path):
            os.rmdir(path)

    def download(self, source: Source, id: Id) -> None:
        self._mkdir(source)
        data = _read_file(self._mock_path(source, id))

        incomplete = id.path(source, IdState.INCOMPLETE, self.base)
        # a previous attempt may have failed without a crash
        if os.path.exists(incomplete):
            os.unlink(incomplete)
        _write_file(incomplete, data)

        complete = id.path(source, IdState.ID, self.base)
        try:
            os.replace(incomplete, complete)
        except OSError as exc:
            raise MonotoneError(
                f"file '{incomplete}' rename error: {exc.strerror}"
            ) from exc

    def upload(self, source: Source, id: Id) -> None:
        self._mkdir(source)
        data = _read_file(id.path(source, IdState.ID, self.base))
        _write_file(self._mock_path(source, id), data)

    def remove(self, source: Source, id: Id) -> None:
        path = self._mock_path(source, id)
        if os.path.exists(path):
            os.unlink(path)

    def read(self, source: Source, id: Id, size: int, offset: int) -> bytes:
        path = self._mock_path(source, id)
        try:
            with open(path, "rb") as file:
                file.seek(offset)
                return file.read(size)
        except OSError as exc:
            raise MonotoneError(f"file '{path}' read error: {exc.strerror}") from exc


class CloudMgr:
    """Registry of configured clouds, kept in creation order."""

    def __init__(
        self,
        base: str = ".",
        kinds: Mapping[str, type[Cloud]] | None = None,
    ) -> None:
        self.base = base
        self.kinds: dict[str, type[Cloud]] = (
            dict(kinds) if kinds is not None else {"mock": MockCloud}
        )
        self._clouds: list[Cloud] = []
        self.state: list[dict[str, Any]] | None = None

    def __len__(self) -> int:
        return len(self._clouds)

    def __iter__(self) -> Iterator[Cloud]:
        return iter(self._clouds)

    def _create_object(self, config: CloudConfig) -> Cloud:
        kind = self.kinds.get(config.type)
        if kind is None:
            raise MonotoneError(f"cloud '{config.name}': unknown cloud type")
        cloud = kind(config, self.base)
        self._clouds.append(cloud)
        return cloud

    def _save(self) -> None:
        self.state = self.dump()

    def dump(self) -> list[dict[str, Any]]:
        """Serialised settings of every cloud, passwords included."""
        return [cloud.config.to_dict(safe=False) for cloud in self._clouds]

    def open(self, state: Iterable[Mapping[str, Any]] | None) -> None:
        """Recreate clouds from a previously saved dump."""
        self.state = None if state is None else [dict(item) for item in state]
        if state is None:
            return
        for item in self.state:
            self._create_object(CloudConfig.from_dict(item))

    def create(self, config: CloudConfig, if_not_exists: bool = False) -> None:
        if self.find(config.name) is not None:
            if not if_not_exists:
                raise MonotoneError(f"cloud '{config.name}': already exists")
            return
        self._create_object(config)
        self._save()

    def drop(self, name: str, if_exists: bool = False) -> None:
        cloud = self.find(name)
        if cloud is None:
            if not if_exists:
                raise MonotoneError(f"cloud '{name}': not exists")
            return
        if cloud.refs > 0:
            raise MonotoneError(f"cloud '{name}': has dependencies")
        self._clouds.remove(cloud)
        self._save()

    def alter(self, config: CloudConfig, mask: int, if_exists: bool = False) -> None:
        cloud = self.find(config.name)
        if cloud is None:
            if not if_exists:
                raise MonotoneError(f"cloud '{config.name}': not exists")
            return
        cloud.config.alter(config, mask)
        self._save()

    def rename(self, name: str, new_name: str, if_exists: bool = False) -> None:
        cloud = self.find(name)
        if cloud is None:
            if not if_exists:
                raise MonotoneError(f"cloud '{name}': not exists")
            return
        if self.find(new_name) is not None:
            raise MonotoneError(f"cloud '{new_name}': already exists")
        cloud.config.name = new_name
        self._save()

    def show(self, name: str | None = None) -> dict[str, Any]:
        """Settings of one cloud, or of all clouds keyed by name; secrets hidden."""
        if name is None:
            return {
                cloud.config.name: cloud.config.to_dict(safe=True)
                for cloud in self._clouds
            }
        cloud = self.find(name)
        if cloud is None:
            raise MonotoneError(f"cloud '{name}': not exists")
        return cloud.config.to_dict(safe=True)

    def find(self, name: str) -> Cloud | None:
        return next((c for c in self._clouds if c.config.name == name), None)

    def close(self) -> None:
        """Forget every cloud."""
        self._clouds.clear()