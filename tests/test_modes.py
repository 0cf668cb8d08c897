import pytest

from gridfs_stream.client.exceptions import ModeClassificationError
from gridfs_stream.client.types import AccessClass
from gridfs_stream.stream.modes import classify_mode

def test_read_mode():
    contract = classify_mode("r")
    assert contract.access is AccessClass.READ_ONLY
    assert contract.fail_if_missing
    assert not contract.create_if_missing
    assert not contract.truncate_existing
    assert not contract.append_on_write

def test_truncate_mode():
    contract = classify_mode("w")
    assert contract.access is AccessClass.WRITE_ONLY
    assert contract.create_if_missing
    assert contract.truncate_existing
    assert not contract.fail_if_missing

def test_append_mode():
    contract = classify_mode("a")
    assert contract.access is AccessClass.WRITE_ONLY
    assert contract.create_if_missing
    assert contract.append_on_write
    assert not contract.truncate_existing

def test_exclusive_mode():
    contract = classify_mode("x")
    assert contract.fail_if_exists
    assert not contract.create_if_missing
    assert not contract.fail_if_missing

def test_open_or_create_mode():
    contract = classify_mode("c")
    assert contract.create_if_missing
    assert not contract.truncate_existing
    assert not contract.append_on_write

@pytest.mark.parametrize("mode", ["r+", "w+", "a+", "x+", "c+", "rb+", "r+b", "w+t"])
def test_plus_requests_read_write(mode):
    assert classify_mode(mode).access is AccessClass.READ_WRITE

@pytest.mark.parametrize("mode,primary", [("rb", "r"), ("wt", "w"), ("ab", "a"), ("xb", "x"), ("cb", "c")])
def test_flavour_characters_are_ignored(mode, primary):
    contract = classify_mode(mode)
    assert contract.primary == primary
    assert contract.access is not AccessClass.READ_WRITE

@pytest.mark.parametrize("mode", ["", "+", "q", "rw", "wa", "rx", "b"])
def test_unknown_modes_fail(mode):
    with pytest.raises(ModeClassificationError):
        classify_mode(mode)

def test_classification_is_pure():
    assert classify_mode("a+") == classify_mode("a+")
