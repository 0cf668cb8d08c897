# Copyright 2026 gridfs-stream contributors. All Rights Reserved.
"""
Process-wide binding of the gridfs:// scheme.

``register()`` makes the scheme known to fsspec so that generic code can use
``fsspec.open("gridfs://host/db/bucket/file", "wb")``. Nothing else in this
package depends on the binding; ``GridFsStreamWrapper`` works without it.
"""

import importlib
from datetime import datetime, timezone

from fsspec import AbstractFileSystem
from fsspec.registry import register_implementation
from fsspec.utils import stringify_path

from ..client.exceptions import StreamRegistrationError
from ..client.types import SCHEME
from ..utils import logger
from .session import GridFsStreamWrapper

# ``fsspec.registry`` is a read-only mapping that shadows the submodule
fsspec_registry = importlib.import_module("fsspec.registry")

_registered = False

class GridFsFileSystem(AbstractFileSystem):
    """
    fsspec filesystem for gridfs:// URLs.

    Paths are kept as full URLs because the endpoint, database and bucket are
    part of every path.
    """

    protocol = SCHEME
    root_marker = ""

    def __init__(self, wrapper=None, **storage_options):
        super().__init__(**storage_options)
        self.wrapper = wrapper or GridFsStreamWrapper()

    @classmethod
    def _strip_protocol(cls, path):
        if isinstance(path, list):
            return [cls._strip_protocol(p) for p in path]
        path = stringify_path(path)
        if not path.startswith(f"{SCHEME}://"):
            path = f"{SCHEME}://{path.lstrip('/')}"
        return path.rstrip('/')

    def _open(self, path, mode="rb", block_size=None, autocommit=True, cache_options=None, **kwargs):
        return self.wrapper.open(path, mode)

    def info(self, path, **kwargs):
        path = self._strip_protocol(path)
        stat = self.wrapper.url_stat(path)
        if stat is None:
            raise FileNotFoundError(path)
        return {
            "name": path,
            "size": stat["st_size"],
            "type": "file",
            "mtime": stat["st_mtime"],
            "atime": stat["st_atime"],
            "created": stat["st_ctime"],
        }

    def modified(self, path):
        return datetime.fromtimestamp(self.info(path)["mtime"], tz=timezone.utc)

    def created(self, path):
        return datetime.fromtimestamp(self.info(path)["created"], tz=timezone.utc)

    def ls(self, path, detail=True, **kwargs):
        raise NotImplementedError("gridfs:// does not support directory listing")

    def rm_file(self, path):
        path = self._strip_protocol(path)
        if not self.wrapper.unlink(path):
            raise FileNotFoundError(path)

    def mv(self, path1, path2, recursive=False, maxdepth=None, **kwargs):
        path1 = self._strip_protocol(path1)
        path2 = self._strip_protocol(path2)
        if not self.wrapper.rename(path1, path2):
            raise OSError(f"Could not rename {path1} to {path2}")

    def touch(self, path, truncate=False, mtime=None, atime=None, **kwargs):
        path = self._strip_protocol(path)
        if truncate:
            with self.open(path, "wb"):
                pass
            return
        if not self.wrapper.touch(path, mtime, atime):
            raise OSError(f"Could not touch {path}")

def register() -> None:
    """
    Register GridFsFileSystem as the fsspec handler for gridfs://.

    Registering twice is a no-op.

    Raises:
        StreamRegistrationError: If another handler is registered for the scheme
    """
    global _registered
    if _registered:
        return

    try:
        register_implementation(SCHEME, GridFsFileSystem, clobber=False)
    except ValueError as e:
        raise StreamRegistrationError(f"A handler has already been registered for the {SCHEME} protocol.") from e

    _registered = True
    logger.debug(f"Registered {SCHEME}:// handler")

def unregister() -> None:
    """
    Remove the gridfs:// handler registered by ``register``.

    Returns silently if the handler is not registered.

    Raises:
        StreamRegistrationError: If the scheme is now bound to another handler
    """
    global _registered
    if not _registered:
        return

    # fsspec has no public API for removing an implementation
    if fsspec_registry._registry.get(SCHEME) is not GridFsFileSystem:
        raise StreamRegistrationError(f"The URL wrapper for the protocol {SCHEME} could not be unregistered.")

    del fsspec_registry._registry[SCHEME]
    GridFsFileSystem.clear_instance_cache()
    _registered = False
    logger.debug(f"Unregistered {SCHEME}:// handler")

def is_registered() -> bool:
    return _registered
