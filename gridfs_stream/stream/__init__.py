from .session import FileSession, GridFsStreamWrapper
from .registry import GridFsFileSystem, register, unregister
