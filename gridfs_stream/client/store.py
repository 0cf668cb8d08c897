# Copyright 2026 gridfs-stream contributors. All Rights Reserved.
"""
GridFS store adapter.

This is the only module that talks to MongoDB. GridFS has no in-place update,
so a write inserts a complete new version of the file and afterwards removes
every older version with the same filename. The two steps are not atomic:
until the removal finishes a stale version may coexist with the new one,
and readers pick the version with the greatest ``metadata.mtime``.
"""

import threading
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

import gridfs

from .exceptions import NotFound
from .translate import STORE_ERRORS, store_call
from .types import FileObject
from ..utils import logger, time_function

Timestamp = Union[int, float, datetime, None]

def _now() -> datetime:
    # BSON dates carry millisecond precision
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)

def to_datetime(value: Timestamp) -> Optional[datetime]:
    """Convert epoch seconds or a datetime to an aware UTC datetime."""
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    return datetime.fromtimestamp(value, tz=timezone.utc)

def to_epoch(value: Optional[datetime]) -> Optional[int]:
    """Convert a stored datetime to integer epoch seconds."""
    if value is None:
        return None
    return int(to_datetime(value).timestamp())

class GridFsStore:
    """
    CRUD protocol for files stored in the GridFS buckets of one database.

    Attributes:
        database: A connected pymongo ``Database``
        gridfs_factory (Callable): Builds a GridFS instance for a bucket,
            called as ``gridfs_factory(database, collection=bucket)``
    """

    def __init__(self, database, gridfs_factory=gridfs.GridFS):
        self.database = database
        self.gridfs_factory = gridfs_factory
        self._buckets: Dict[str, Any] = {}
        self.lock = threading.Lock()

    def _fs(self, bucket: str):
        with self.lock:
            fs = self._buckets.get(bucket)
            if fs is None:
                fs = self.gridfs_factory(self.database, collection=bucket)
                self._buckets[bucket] = fs
            return fs

    def _files(self, bucket: str):
        return self.database[f"{bucket}.files"]

    def _to_file_object(self, bucket: str, grid_out, with_content: bool = False) -> FileObject:
        metadata = grid_out.metadata or {}
        return FileObject(
            bucket=bucket,
            filename=grid_out.filename,
            id=grid_out._id,
            length=grid_out.length,
            ctime=metadata.get('ctime'),
            mtime=metadata.get('mtime'),
            atime=metadata.get('atime'),
            upload_date=grid_out.upload_date,
            content=grid_out.read() if with_content else None,
        )

    @store_call("find")
    def find_latest(self, bucket: str, key: str, with_content: bool = False) -> Optional[FileObject]:
        """
        Return the current version of a file.

        The current version is the match with the greatest ``metadata.mtime``.
        Ties are broken by upload date.

        Args:
            bucket (str): GridFS bucket name
            key (str): Filename
            with_content (bool): Also load the file content

        Returns:
            Optional[FileObject]: The current version, or None if no version exists
        """
        cursor = (
            self._fs(bucket)
            .find({'filename': key})
            .sort([('metadata.mtime', -1), ('uploadDate', -1)])
            .limit(1)
        )
        for grid_out in cursor:
            return self._to_file_object(bucket, grid_out, with_content)
        return None

    def _remove(self, bucket: str, key: str, exclude_id: Any = None) -> int:
        criteria: Dict[str, Any] = {'filename': key}
        if exclude_id is not None:
            criteria['_id'] = {'$ne': exclude_id}

        fs = self._fs(bucket)
        ids = [grid_out._id for grid_out in fs.find(criteria)]
        for file_id in ids:
            fs.delete(file_id)
        return len(ids)

    @store_call("delete")
    def remove(self, bucket: str, key: str, exclude_id: Any = None) -> bool:
        """
        Delete every version of a file, optionally sparing one.

        Args:
            bucket (str): GridFS bucket name
            key (str): Filename
            exclude_id: Identity of a version to keep

        Returns:
            bool: True if at least one version was removed
        """
        removed = self._remove(bucket, key, exclude_id)
        logger.debug(f"Removed {removed} version(s) of {bucket}/{key}")
        return removed > 0

    def delete(self, bucket: str, key: str) -> bool:
        return self.remove(bucket, key)

    def _remove_stale(self, bucket: str, key: str, current_id: Any) -> None:
        # A failure here leaves a duplicate that find_latest resolves; the
        # new version is already stored.
        try:
            removed = self._remove(bucket, key, exclude_id=current_id)
            if removed:
                logger.debug(f"Removed {removed} stale version(s) of {bucket}/{key}")
        except STORE_ERRORS as e:
            logger.warning(f"Could not remove stale versions of {bucket}/{key}: {e}")

    @store_call("write")
    def write(self, bucket: str, key: str, content: bytes) -> FileObject:
        """
        Store ``content`` as the new current version of a file.

        Args:
            bucket (str): GridFS bucket name
            key (str): Filename
            content (bytes): Full file content

        Returns:
            FileObject: The newly inserted version
        """
        start_time = time.time()
        now = _now()
        metadata = {'ctime': now, 'mtime': now, 'atime': now}

        new_id = self._fs(bucket).put(content, filename=key, metadata=metadata)
        logger.debug(f"Stored {len(content)} bytes as {bucket}/{key} ({new_id})")
        self._remove_stale(bucket, key, new_id)

        time_function("write", start_time)
        return FileObject(
            bucket=bucket,
            filename=key,
            id=new_id,
            length=len(content),
            ctime=now,
            mtime=now,
            atime=now,
            content=content,
        )

    @store_call("rename")
    def rename(self, bucket: str, old_key: str, new_key: str) -> FileObject:
        """
        Rename the current version of a file within its bucket.

        Any version already stored under ``new_key`` is removed.

        Raises:
            NotFound: If ``old_key`` has no current version
        """
        file = self.find_latest(bucket, old_key)
        if file is None:
            raise NotFound(f"Cannot rename {bucket}/{old_key}: no such file")

        now = _now()
        self._files(bucket).update_one(
            {'_id': file.id},
            {'$set': {'filename': new_key, 'metadata.mtime': now, 'metadata.atime': now}},
        )
        self._remove_stale(bucket, new_key, file.id)

        file.filename = new_key
        file.mtime = file.atime = now
        return file

    @store_call("touch")
    def touch(self, bucket: str, key: str, mtime: Timestamp = None, atime: Timestamp = None) -> FileObject:
        """
        Set access and modification time of a file, creating it if missing.

        Args:
            bucket (str): GridFS bucket name
            key (str): Filename
            mtime: Modification time, defaults to now
            atime: Access time, defaults to ``mtime``

        Returns:
            FileObject: The touched version
        """
        mtime = to_datetime(mtime) or _now()
        atime = to_datetime(atime) or mtime

        file = self.find_latest(bucket, key)
        if file is None:
            logger.debug(f"touch: creating empty file {bucket}/{key}")
            file = self.write(bucket, key, b'')

        self._files(bucket).update_one(
            {'_id': file.id},
            {'$set': {'metadata.mtime': mtime, 'metadata.atime': atime}},
        )
        file.mtime, file.atime = mtime, atime
        return file
