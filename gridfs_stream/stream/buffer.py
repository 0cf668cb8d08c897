# Copyright 2026 gridfs-stream contributors. All Rights Reserved.
"""
Scratch buffer for an open gridfs stream.

GridFS can only store complete files, so every open session keeps the full
content of the file in a local buffer. Reads, writes, seeks and truncation
operate on that buffer only; a flush hands the whole buffer back to the store
as a new version. The buffer is a SpooledTemporaryFile so that large files
move to disk instead of staying in memory.
"""

import os
import tempfile
from typing import Callable, Optional

from ..client.exceptions import AlreadyExists, NotFound
from ..client.types import FileObject, OpenContract
from ..utils import logger

# --- Spool Size ---
# Spool to disk after 64MB in RAM
DEFAULT_SPOOL_MAX_SIZE = 64 * 1024 * 1024

class BufferedFileHandle:
    """
    A seekable byte stream holding the full content of one file.

    Attributes:
        contract (OpenContract): Contract derived from the open mode
        spooled_file (tempfile.SpooledTemporaryFile): The scratch buffer
    """

    def __init__(self, contract: OpenContract, data: bytes = b"", spool_max_size: int = DEFAULT_SPOOL_MAX_SIZE):
        self.contract = contract
        self.spooled_file = tempfile.SpooledTemporaryFile(max_size=spool_max_size, mode='w+b')
        if data:
            self.spooled_file.write(data)
            if not contract.append_on_write:
                self.spooled_file.seek(0)
        logger.debug(f"Initialized buffer with {len(data)} bytes (mode {contract.primary}, {contract.access.name})")

    @classmethod
    def open(cls, existing: Optional[FileObject], contract: OpenContract, **kwargs) -> "BufferedFileHandle":
        """
        Create the buffer for a new session.

        Args:
            existing (Optional[FileObject]): Current version, with content loaded
                unless the mode truncates
            contract (OpenContract): Contract derived from the open mode

        Raises:
            NotFound: If the mode requires an existing file and there is none
            AlreadyExists: If the mode forbids an existing file and there is one
        """
        if existing is None and contract.fail_if_missing:
            raise NotFound("Failed to open stream: No such file")
        if existing is not None and contract.fail_if_exists:
            raise AlreadyExists(f"Failed to open stream: {existing.filename} already exists")

        data = b""
        if existing is not None and not contract.truncate_existing:
            data = existing.content or b""
        return cls(contract, data, **kwargs)

    @property
    def access(self):
        return self.contract.access

    @property
    def closed(self) -> bool:
        return self.spooled_file is None

    def _check_open(self) -> None:
        if self.spooled_file is None:
            raise ValueError("I/O operation on closed buffer")

    @property
    def size(self) -> int:
        """Current length of the buffer in bytes."""
        self._check_open()
        original_pos = self.spooled_file.tell()
        self.spooled_file.seek(0, os.SEEK_END)
        size = self.spooled_file.tell()
        self.spooled_file.seek(original_pos)
        return size

    def tell(self) -> int:
        self._check_open()
        return self.spooled_file.tell()

    def eof(self) -> bool:
        return self.tell() >= self.size

    def read(self, size: int = -1) -> bytes:
        """
        Read up to ``size`` bytes from the cursor.

        Write-only handles always read nothing and leave the cursor alone.
        """
        self._check_open()
        if not self.access.readable:
            return b""
        if size is None or size < 0:
            return self.spooled_file.read()
        return self.spooled_file.read(size)

    def write(self, data: bytes) -> int:
        """
        Write ``data`` to the buffer.

        Read-only handles write nothing and return 0. In append mode the data
        goes to the end of the buffer and the cursor keeps its position.
        Writing beyond the end of the buffer fills the gap with zero bytes.

        Returns:
            int: Number of bytes written
        """
        self._check_open()
        if not self.access.writable:
            return 0

        data = bytes(data)
        if self.contract.append_on_write:
            original_pos = self.spooled_file.tell()
            self.spooled_file.seek(0, os.SEEK_END)
            self.spooled_file.write(data)
            self.spooled_file.seek(original_pos)
        else:
            self._write_at_cursor(data)
        return len(data)

    def _write_at_cursor(self, data: bytes) -> None:
        position = self.spooled_file.tell()
        size = self.size
        if position > size:
            self.spooled_file.seek(size)
            self.spooled_file.write(b'\x00' * (position - size))
        self.spooled_file.write(data)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """
        Move the cursor. Positions beyond the end of the buffer are allowed.

        Returns:
            int: The new cursor position

        Raises:
            ValueError: If the resulting position is negative or whence is invalid
        """
        self._check_open()
        if whence == os.SEEK_SET:
            target = offset
        elif whence == os.SEEK_CUR:
            target = self.spooled_file.tell() + offset
        elif whence == os.SEEK_END:
            target = self.size + offset
        else:
            raise ValueError(f"Invalid whence ({whence})")

        if target < 0:
            raise ValueError(f"Negative seek position {target}")
        self.spooled_file.seek(target)
        return target

    def truncate(self, size: int) -> int:
        """
        Resize the buffer to exactly ``size`` bytes, zero padding when growing.
        The cursor is not moved.
        """
        self._check_open()
        if size < 0:
            raise ValueError(f"Negative size not allowed: {size}")

        current_size = self.size
        if size < current_size:
            self.spooled_file.truncate(size)
        elif size > current_size:
            original_pos = self.spooled_file.tell()
            self.spooled_file.seek(0, os.SEEK_END)
            self.spooled_file.write(b'\x00' * (size - current_size))
            self.spooled_file.seek(original_pos)
        logger.debug(f"Truncated buffer from {current_size} to {size} bytes")
        return size

    def getvalue(self) -> bytes:
        """Return the whole buffer, keeping the cursor where it is."""
        self._check_open()
        original_pos = self.spooled_file.tell()
        self.spooled_file.seek(0)
        data = self.spooled_file.read()
        self.spooled_file.seek(original_pos)
        return data

    def flush(self, sink: Callable[[bytes], object]):
        """
        Hand the full buffer to ``sink`` as a full-replace write.

        Read-only handles have nothing to store and never call ``sink``.

        Returns:
            The result of ``sink``, or None if nothing was flushed
        """
        self._check_open()
        if not self.access.writable:
            return None
        return sink(self.getvalue())

    def close(self, sink: Optional[Callable[[bytes], object]] = None) -> None:
        """
        Flush to ``sink`` if given, then release the buffer.

        The buffer is released even when the flush fails; the flush error
        propagates to the caller.
        """
        if self.spooled_file is None:
            return
        try:
            if sink is not None:
                self.flush(sink)
        finally:
            self.spooled_file.close()
            self.spooled_file = None
            logger.debug("Released buffer")
