"""
gridfs_stream exposes files stored in MongoDB GridFS through a file stream
interface addressed by ``gridfs://host[:port]/database/bucket/path`` URLs.
"""

from .client.exceptions import (
    AlreadyExists,
    ConfigurationError,
    CrossBucketRenameRejected,
    GridFsError,
    ModeClassificationError,
    NotFound,
    PathParseError,
    StoreCommunicationError,
    StreamRegistrationError,
)
from .client.config import ClientPool, StoreConfig
from .client.store import GridFsStore
from .client.types import SCHEME, AccessClass, FileObject, OpenContract, PathInfo
from .stream.session import FileSession, GridFsStreamWrapper
from .stream.registry import GridFsFileSystem, register, unregister

__version__ = "0.1.0"
