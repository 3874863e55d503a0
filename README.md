# monotone

Building blocks of an embeddable storage engine for events and
time-series data, in plain Python with no third-party dependencies.

## Modules

- `monotone.cloud_config`
  - `CloudConfig` is a dataclass holding the settings of a cloud:
    `name`, `type`, `login`, `password`, `url` and `debug`.
  - `copy()` returns an independent copy.
  - `alter(other, mask)` takes the fields selected by a `CloudField` mask
    from `other`.
  - `to_dict(safe)` serialises the settings. With `safe=True` the
    password is replaced by `"(secret)"`.
  - `CloudConfig.from_dict(data)` builds settings back. Unknown keys are
    ignored. A value of the wrong type raises `MonotoneError`.
  - `MonotoneError` is the exception the package raises for invalid
    operations.
- `monotone.source`
  - `Source` is a dataclass holding the settings of a storage: `uuid`,
    `name`, `path_dir`, `cloud`, `cloud_drop_local`, `sync`, `crc`,
    `refresh_wm`, `region_size`, `compression`, `compression_level`,
    `encryption` and `encryption_key`.
  - Defaults: `refresh_wm` is 40 MiB and `region_size` is 128 KiB. Sync and
    cloud-drop-local are on.
  - `alter(other, mask)` works with a `SourceField` mask.
  - `to_dict(safe, debug)` leaves out the encryption key when `safe` is
    set, and shows the uuid as `"(filtered)"` when `debug` is set.
  - `from_dict(data)` builds settings back.
  - `path(base, relative)` resolves a file inside the storage directory:
    - `<base>/<uuid>/...` when no path is set.
    - `<path>/<uuid>/...` for an absolute path.
    - `<base>/<path>/<uuid>/...` for a relative path.
- `monotone.ids`
  - `Id` is a frozen inclusive range `min`..`max`.
  - `IdState` is a flag of the partition files that exist: `ID`,
    `INCOMPLETE`, `COMPLETE`, `CLOUD` and `CLOUD_INCOMPLETE`.
  - `Id.path(source, state, base)` names a file such as
    `00000000000000000042.cloud.incomplete`.
  - `parse_file_name(name)` reads such a name back into `(min, state)`.
    It raises `ValueError` for any other name.
- `monotone.cloud`
  - `Cloud` is the abstract interface: `attach`, `detach`, `download`,
    `upload`, `remove` and `read`, plus a reference count through
    `ref()` / `unref()`.
  - `MockCloud` keeps the cloud copies in a `mock/` directory inside the
    storage directory.
    - Downloads are written to an `.incomplete` file first, then renamed.
  - `CloudMgr` is a registry of clouds kept in creation order.
    - It has `create`, `drop`, `alter`, `rename`, `show`, `find`, `dump`,
      `open(state)` and `close`.
    - Cloud kinds are looked up by `type` in `kinds`, which defaults to
      `{"mock": MockCloud}`.
    - Every change stores a fresh dump in `CloudMgr.state`.
    - A cloud whose `refs` is above zero cannot be dropped.
- `monotone.lockage`
  - `Lockage` is a set of re-entrant, thread-owned locks, one per
    `LockType` (`SERVICE`, `ACCESS`). All of them wait on one condition,
    which may be shared.
  - Use `lock(type)` / `unlock(type)`, or the `held(type)` context manager.
- `monotone.service_req`
  - `ServiceReq` is a partition id with an ordered tuple of `ActionType`
    values and a `current` index.
  - `action` gives the next action.
  - `is_upload()` tells whether the next action is an upload.
- `monotone.recovery`
  - `scan_directory(path)` collects the partition file states of a storage
    directory, keyed by min id. Unknown files are logged and skipped.
  - `recover_action(min, state, other_state)` returns a `RecoveryAction`
    saying which file to delete or rename, whether to drop the partition,
    and the state it ends in.
  - An inconsistent state raises `MonotoneError`.
- `monotone.fill`
  - `fill_gaps(slices, min, max)` returns, as `Id` values in ascending
    order, the ranges inside `[min, max]` that the given partition ranges
    do not cover.
  - It raises `MonotoneError` when `min > max`.

## Examples

```python
from monotone.cloud import CloudMgr
from monotone.cloud_config import CloudConfig

password = "password"
mgr = CloudMgr()
mgr.create(CloudConfig(name="local", type="mock", password=password))
print(mgr.show("local")["password"])   # (secret)
print(mgr.dump()[0]["name"])           # local
```

```python
from monotone.fill import fill_gaps

print(fill_gaps([(10, 19)], 0, 29))
# [Id(min=0, max=9), Id(min=20, max=29)]
```

```python
from monotone.ids import IdState
from monotone.recovery import recover_action

action = recover_action(7, IdState.ID | IdState.COMPLETE)
print(action.delete, action.state)     # the .complete file goes, ID remains
```

## What this package does not do

This package provides the pieces listed above. It has no event store:

- There is no write or read path and no cursor.
- There is no write-ahead log.
- There is no partition data format, index or memtable.
- It runs no background workers.

The only cloud kind included is the file-system `MockCloud`, and there is
no S3 client. There is no command-line tool and no benchmark program.

## Installing and testing

```
pip install .
pip install .[test]
pytest
```