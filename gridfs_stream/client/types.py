import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

SCHEME = "gridfs"

class AccessClass(enum.Enum):
    """What a session may do with its scratch buffer."""
    READ_ONLY = 0
    WRITE_ONLY = 1
    READ_WRITE = 2

    @property
    def readable(self) -> bool:
        return self is not AccessClass.WRITE_ONLY

    @property
    def writable(self) -> bool:
        return self is not AccessClass.READ_ONLY

@dataclass(frozen=True)
class PathInfo:
    """Location of a file inside a GridFS bucket."""
    endpoint: str
    database: str
    bucket: str
    key: str

    @property
    def url(self) -> str:
        return f"{SCHEME}://{self.endpoint}/{self.database}/{self.bucket}/{self.key}"

    def same_bucket(self, other: "PathInfo") -> bool:
        return (self.endpoint, self.database, self.bucket) == (other.endpoint, other.database, other.bucket)

@dataclass(frozen=True)
class OpenContract:
    """Behaviour requested by an open mode token."""
    primary: str
    access: AccessClass
    create_if_missing: bool
    truncate_existing: bool
    fail_if_missing: bool
    fail_if_exists: bool
    append_on_write: bool

@dataclass
class FileObject:
    """A single stored version of a file."""
    bucket: str
    filename: str
    id: Any
    length: int
    ctime: Optional[datetime] = None
    mtime: Optional[datetime] = None
    atime: Optional[datetime] = None
    upload_date: Optional[datetime] = None
    content: Optional[bytes] = None
