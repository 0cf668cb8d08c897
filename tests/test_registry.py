import importlib

import fsspec
import pytest
from fsspec import AbstractFileSystem
from fsspec.registry import register_implementation

from gridfs_stream.client.exceptions import StreamRegistrationError
from gridfs_stream.stream import registry
from gridfs_stream.stream.registry import GridFsFileSystem

fsspec_registry = importlib.import_module("fsspec.registry")

@pytest.fixture(autouse=True)
def clean_registry():
    yield
    registry.unregister()
    fsspec_registry._registry.pop("gridfs", None)

@pytest.fixture
def fs(wrapper):
    return GridFsFileSystem(wrapper=wrapper, skip_instance_cache=True)

def test_register_binds_scheme():
    registry.register()
    assert registry.is_registered()
    assert fsspec.get_filesystem_class("gridfs") is GridFsFileSystem

def test_register_twice_is_a_noop():
    registry.register()
    registry.register()
    assert fsspec.get_filesystem_class("gridfs") is GridFsFileSystem

def test_unregister_removes_scheme():
    registry.register()
    registry.unregister()
    assert not registry.is_registered()
    with pytest.raises(ValueError):
        fsspec.get_filesystem_class("gridfs")

def test_unregister_when_not_registered_is_a_noop():
    registry.unregister()
    assert not registry.is_registered()

def test_register_fails_when_scheme_is_taken():
    class OtherFileSystem(AbstractFileSystem):
        protocol = "gridfs"

    register_implementation("gridfs", OtherFileSystem)
    with pytest.raises(StreamRegistrationError):
        registry.register()
    assert not registry.is_registered()

def test_fsspec_open_round_trip(wrapper, base_url):
    registry.register()
    url = f"{base_url}/fs/tmp.txt"

    with fsspec.open(url, "wb", wrapper=wrapper, skip_instance_cache=True) as f:
        f.write(b"It works!")

    assert wrapper.exists(url)
    with wrapper.open(url, "rb") as f:
        assert f.read() == b"It works!"

def test_filesystem_operations(fs, base_url):
    url = f"{base_url}/fs/tmp.txt"
    fs.pipe_file(url, b"It works!")

    assert fs.exists(url)
    assert fs.cat_file(url) == b"It works!"
    info = fs.info(url)
    assert info["size"] == 9
    assert info["type"] == "file"

    new_url = f"{base_url}/fs/test/tmp.txt"
    fs.mv(url, new_url)
    assert not fs.exists(url)
    assert fs.cat_file(new_url) == b"It works!"

    fs.rm_file(new_url)
    assert not fs.exists(new_url)
    with pytest.raises(FileNotFoundError):
        fs.rm_file(new_url)

def test_filesystem_touch(fs, base_url):
    url = f"{base_url}/fs/tmp.txt"
    fs.touch(url, mtime=1, atime=2)
    info = fs.info(url)
    assert info["mtime"] == 1
    assert info["atime"] == 2
    assert fs.modified(url).timestamp() == 1

def test_filesystem_strip_protocol_keeps_url():
    assert GridFsFileSystem._strip_protocol("gridfs://localhost/db/fs/a.txt") == "gridfs://localhost/db/fs/a.txt"
    assert GridFsFileSystem._strip_protocol("localhost/db/fs/a.txt") == "gridfs://localhost/db/fs/a.txt"

def test_filesystem_has_no_directories(fs, base_url):
    with pytest.raises(NotImplementedError):
        fs.ls(f"{base_url}/fs")

def test_filesystem_cross_bucket_move_fails(fs, base_url):
    url = f"{base_url}/fs/tmp.txt"
    fs.pipe_file(url, b"data")
    with pytest.raises(OSError):
        fs.mv(url, f"{base_url}/other/tmp.txt")
