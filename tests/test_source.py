import uuid

import pytest

from monotone.cloud_config import MonotoneError
from monotone.source import Source, SourceField

UUID = uuid.UUID("12345678-1234-5678-1234-567812345678")


def _source():
    return Source(
        uuid=UUID,
        name="main",
        path_dir="data",
        cloud="s3",
        cloud_drop_local=False,
        sync=False,
        crc=True,
        refresh_wm=1000,
        region_size=2048,
        compression="zstd",
        compression_level=3,
        encryption="aes",
        encryption_key="secret",
    )


def test_copy_is_equal_and_independent():
    source = _source()
    copy = source.copy()
    assert copy == source
    copy.name = "other"
    assert source.name == "main"


def test_round_trip_unsafe():
    source = _source()
    assert Source.from_dict(source.to_dict(False, False)) == source


def test_safe_drops_encryption_key():
    data = _source().to_dict(True, False)
    assert "encryption_key" not in data
    assert len(data) == 12


def test_unsafe_has_thirteen_keys():
    data = _source().to_dict(False, False)
    assert len(data) == 13
    assert data["encryption_key"] == "secret"


def test_debug_filters_uuid():
    assert _source().to_dict(False, True)["uuid"] == "(filtered)"


def test_uuid_serialised_as_string():
    assert _source().to_dict(False, False)["uuid"] == str(UUID)


def test_from_empty_dict_equals_defaults():
    assert Source.from_dict({}) == Source()


def test_defaults_flags():
    source = Source()
    assert source.cloud_drop_local is True
    assert source.sync is True
    assert source.crc is False


def test_from_dict_wrong_type():
    with pytest.raises(MonotoneError):
        Source.from_dict({"refresh_wm": "big"})


def test_from_dict_bool_not_accepted_as_int():
    with pytest.raises(MonotoneError):
        Source.from_dict({"region_size": True})


def test_from_dict_bad_uuid():
    with pytest.raises(MonotoneError):
        Source.from_dict({"uuid": "not-a-uuid"})


def test_alter_masked_fields():
    source = _source()
    other = Source(name="cold", compression="lz4", region_size=1)
    source.alter(other, SourceField.NAME | SourceField.COMPRESSION)
    assert source.name == "cold"
    assert source.compression == "lz4"
    assert source.region_size == 2048


def test_alter_path_field():
    source = _source()
    source.alter(Source(path_dir="/abs"), SourceField.PATH)
    assert source.path_dir == "/abs"


def test_path_empty_uses_base():
    source = Source(uuid=UUID)
    assert source.path("/base", "x") == f"/base/{UUID}/x"


def test_path_absolute_ignores_base():
    source = Source(uuid=UUID, path_dir="/mnt/disk")
    assert source.path("/base", "x") == f"/mnt/disk/{UUID}/x"


def test_path_relative_joins_base():
    source = Source(uuid=UUID, path_dir="disk")
    assert source.path("/base", "x") == f"/base/disk/{UUID}/x"


def test_path_default_relative_is_directory():
    source = Source(uuid=UUID)
    assert source.path("/base").endswith(f"{UUID}/")