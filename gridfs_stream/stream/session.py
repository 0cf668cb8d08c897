# Copyright 2026 gridfs-stream contributors. All Rights Reserved.
"""
Stream surface for files stored in GridFS.

Usage:
    wrapper = GridFsStreamWrapper()

    with wrapper.open("gridfs://localhost/mydb/fs/hello.txt", "w") as f:
        f.write(b"Hello, World!")

    with wrapper.open("gridfs://localhost/mydb/fs/hello.txt", "r") as f:
        print(f.read())

    wrapper.rename("gridfs://localhost/mydb/fs/hello.txt",
                   "gridfs://localhost/mydb/fs/greetings/hello.txt")
    wrapper.unlink("gridfs://localhost/mydb/fs/greetings/hello.txt")

A ``FileSession`` loads the current version of a file into a local buffer
when it is opened and stores the whole buffer as a new version when it is
flushed or closed. Path operations (unlink, rename, touch, stat) go straight
to the store and do not need an open session.
"""

import os
import stat as stat_module
import threading
import time
from typing import Callable, Dict, Optional, Tuple

import gridfs

from ..client.config import ClientPool
from ..client.exceptions import CrossBucketRenameRejected, GridFsError
from ..client.store import GridFsStore, to_epoch
from ..client.types import FileObject, PathInfo
from ..utils import logger, time_function, trace_op
from .buffer import BufferedFileHandle
from .modes import classify_mode
from .paths import parse_path

# Options accepted by GridFsStreamWrapper.metadata
META_TOUCH = 1
META_OWNER_NAME = 2
META_OWNER = 3
META_GROUP_NAME = 4
META_GROUP = 5
META_ACCESS = 6

BLOCK_SIZE = 4096

def build_stat(size: int, file: Optional[FileObject] = None) -> dict:
    """
    Build POSIX-like stat fields for a file.

    ``st_mtime`` and ``st_atime`` come from the file's metadata when present.
    """
    now = int(time.time())
    result = {
        'st_mode': stat_module.S_IFREG | 0o644,
        'st_ino': 0,
        'st_dev': 0,
        'st_nlink': 1,
        'st_uid': os.getuid(),
        'st_gid': os.getgid(),
        'st_size': size,
        'st_atime': now,
        'st_mtime': now,
        'st_ctime': now,
        'st_blksize': BLOCK_SIZE,
        'st_blocks': (size + 511) // 512,
    }
    if file is None:
        return result

    ctime = to_epoch(file.ctime or file.upload_date)
    if ctime is not None:
        result['st_ctime'] = ctime
    if file.atime is not None:
        result['st_atime'] = to_epoch(file.atime)
    if file.mtime is not None:
        result['st_mtime'] = to_epoch(file.mtime)
    return result

class FileSession:
    """
    One open gridfs stream.

    Attributes:
        path_info (PathInfo): Location of the file
        store (GridFsStore): Store the file is read from and flushed to
        handle (BufferedFileHandle): The local scratch buffer
        opened_file (Optional[FileObject]): Version the session was loaded
            from, replaced by the new version after each flush
    """

    def __init__(self, path_info: PathInfo, store: GridFsStore, handle: BufferedFileHandle,
                 opened_file: Optional[FileObject] = None):
        self.path_info = path_info
        self.store = store
        self.handle = handle
        self.opened_file = opened_file
        # Writable sessions always store at least one version on close
        self._dirty = handle.access.writable

    @classmethod
    def open(cls, path: str, mode: str, connect: Callable[[str, str], GridFsStore]) -> "FileSession":
        """
        Open a file.

        Args:
            path (str): gridfs:// URL of the file
            mode (str): Mode token (r, w, a, x or c with optional t, b, +)
            connect (Callable): Returns the store for ``(endpoint, database)``

        Returns:
            FileSession: The open session

        Raises:
            PathParseError: If the URL is invalid
            ModeClassificationError: If the mode is invalid
            NotFound: If mode ``r`` is used on a missing file
            AlreadyExists: If mode ``x`` is used on an existing file
            StoreCommunicationError: If the store fails
        """
        trace_op("open", path, mode=mode)
        start_time = time.time()

        path_info = parse_path(path)
        contract = classify_mode(mode)
        store = connect(path_info.endpoint, path_info.database)

        with_content = not contract.truncate_existing and not contract.fail_if_exists
        existing = store.find_latest(path_info.bucket, path_info.key, with_content=with_content)
        handle = BufferedFileHandle.open(existing, contract)

        logger.debug(f"open: {path_info.url} in mode {mode!r} ({'existing' if existing else 'new'} file)")
        time_function("open", start_time)
        return cls(path_info, store, handle, existing)

    @property
    def opened_path(self) -> str:
        """Canonical URL of the open file."""
        return self.path_info.url

    @property
    def mode(self) -> str:
        return self.handle.contract.primary

    @property
    def closed(self) -> bool:
        return self.handle.closed

    def readable(self) -> bool:
        return self.handle.access.readable

    def writable(self) -> bool:
        return self.handle.access.writable

    def seekable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        trace_op("read", self.opened_path, size=size)
        return self.handle.read(size)

    read1 = read

    def write(self, data: bytes) -> int:
        trace_op("write", self.opened_path, size=len(data))
        written = self.handle.write(data)
        if written:
            self._dirty = True
        return written

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        trace_op("seek", self.opened_path, offset=offset, whence=whence)
        return self.handle.seek(offset, whence)

    def tell(self) -> int:
        return self.handle.tell()

    def eof(self) -> bool:
        return self.handle.eof()

    def truncate(self, size: Optional[int] = None) -> int:
        if size is None:
            size = self.handle.tell()
        trace_op("truncate", self.opened_path, size=size)
        result = self.handle.truncate(size)
        self._dirty = True
        return result

    def _store_buffer(self, data: bytes) -> FileObject:
        self.opened_file = self.store.write(self.path_info.bucket, self.path_info.key, data)
        self._dirty = False
        logger.info(f"Flushed {len(data)} bytes to {self.opened_path}")
        return self.opened_file

    def flush(self) -> None:
        """Store the whole buffer as the new current version of the file."""
        trace_op("flush", self.opened_path)
        start_time = time.time()
        self.handle.flush(self._store_buffer)
        time_function("flush", start_time)

    def stat(self) -> dict:
        """Stat fields for the open file, sized from the local buffer."""
        return build_stat(self.handle.size, self.opened_file)

    def close(self) -> None:
        """
        Flush pending changes and release the buffer.

        The session is closed even when the flush fails; the error is raised
        after the buffer has been released.
        """
        if self.handle.closed:
            return
        trace_op("close", self.opened_path)
        sink = self._store_buffer if self._dirty else None
        try:
            self.handle.close(sink)
        except GridFsError as e:
            logger.error(f"close: Error flushing {self.opened_path}: {e}")
            raise

    def __enter__(self) -> "FileSession":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __repr__(self) -> str:
        state = 'closed' if self.closed else 'open'
        return f"<FileSession {self.opened_path} mode={self.mode!r} {state}>"

class GridFsStreamWrapper:
    """
    Entry point for gridfs:// URLs.

    Opens sessions and performs the path operations that do not need an
    open session. Failed path operations are logged and reported as False.

    Attributes:
        pool (ClientPool): Provides MongoClient instances per endpoint
        gridfs_factory (Callable): Builds GridFS instances for a database
    """

    def __init__(self, pool: Optional[ClientPool] = None, gridfs_factory=gridfs.GridFS):
        self.pool = pool or ClientPool()
        self.gridfs_factory = gridfs_factory
        self._stores: Dict[Tuple[str, str], GridFsStore] = {}
        self._lock = threading.Lock()

    def store(self, endpoint: str, database: str) -> GridFsStore:
        with self._lock:
            store = self._stores.get((endpoint, database))
            if store is None:
                store = GridFsStore(self.pool.database(endpoint, database), self.gridfs_factory)
                self._stores[(endpoint, database)] = store
            return store

    def open(self, path: str, mode: str = 'rb') -> FileSession:
        """Open a gridfs:// URL. See ``FileSession.open``."""
        try:
            return FileSession.open(path, mode, self.store)
        except GridFsError as e:
            logger.warning(f"open: {e}")
            raise

    def unlink(self, path: str) -> bool:
        """
        Delete every version of a file.

        Returns:
            bool: True if at least one version was removed
        """
        trace_op("unlink", path)
        try:
            info = parse_path(path)
            return self.store(info.endpoint, info.database).delete(info.bucket, info.key)
        except GridFsError as e:
            logger.warning(f"unlink: {e}")
            return False

    def rename(self, old_path: str, new_path: str) -> bool:
        """
        Rename a file within its bucket.

        Returns:
            bool: True on success; False if either URL is invalid, the source
            does not exist, or the target is in another bucket
        """
        trace_op("rename", new_path, old=old_path)
        try:
            old_info = parse_path(old_path)
            new_info = parse_path(new_path)
            if not old_info.same_bucket(new_info):
                raise CrossBucketRenameRejected(
                    f"Cannot rename {old_info.url} to {new_info.url}: renames are only supported within a bucket"
                )
            store = self.store(old_info.endpoint, old_info.database)
            store.rename(old_info.bucket, old_info.key, new_info.key)
            logger.info(f"Renamed {old_info.url} to {new_info.url}")
            return True
        except GridFsError as e:
            logger.warning(f"rename: {e}")
            return False

    def touch(self, path: str, mtime=None, atime=None) -> bool:
        """
        Set modification and access time, creating an empty file if missing.

        Args:
            path (str): gridfs:// URL of the file
            mtime: Epoch seconds or datetime, defaults to now
            atime: Epoch seconds or datetime, defaults to ``mtime``
        """
        trace_op("touch", path, mtime=mtime, atime=atime)
        try:
            info = parse_path(path)
            self.store(info.endpoint, info.database).touch(info.bucket, info.key, mtime, atime)
            return True
        except GridFsError as e:
            logger.warning(f"touch: {e}")
            return False

    def metadata(self, path: str, option: int, value=()) -> bool:
        """Change stream metadata. Only ``META_TOUCH`` with ``(mtime, atime)`` is supported."""
        if option != META_TOUCH:
            return False
        return self.touch(path, *tuple(value or ())[:2])

    def url_stat(self, path: str, quiet: bool = True) -> Optional[dict]:
        """
        Stat a file by URL.

        Returns:
            Optional[dict]: Stat fields, or None if the file does not exist
        """
        trace_op("url_stat", path)
        try:
            info = parse_path(path)
            file = self.store(info.endpoint, info.database).find_latest(info.bucket, info.key)
        except GridFsError as e:
            logger.warning(f"url_stat: {e}")
            return None

        if file is None:
            if not quiet:
                logger.warning(f"No such file or directory: {path}")
            return None
        return build_stat(file.length, file)

    def exists(self, path: str) -> bool:
        return self.url_stat(path) is not None

    # GridFS has no directories
    def opendir(self, path: str, options: int = 0) -> bool:
        return False

    def readdir(self) -> bool:
        return False

    def rewinddir(self) -> bool:
        return False

    def closedir(self) -> bool:
        return False

    def mkdir(self, path: str, mode: int = 0o777, options: int = 0) -> bool:
        return False

    def rmdir(self, path: str, options: int = 0) -> bool:
        return False

    def lock(self, operation: int) -> bool:
        logger.warning("Locking is not supported for gridfs:// streams.")
        return False

    def set_option(self, option: int, arg1=None, arg2=None) -> bool:
        return False

    def cast(self, cast_as: int) -> bool:
        return False

    def close(self) -> None:
        """Close all clients opened by this wrapper."""
        with self._lock:
            self._stores.clear()
        self.pool.close()
