class GridFsError(Exception):
    """Base exception for gridfs stream errors."""
    def __init__(self, message: str, code: str = "ERR_UNKNOWN"):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")

class PathParseError(GridFsError, ValueError):
    """Path is malformed or resolves to an empty key."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_PATH")

class ModeClassificationError(GridFsError, ValueError):
    """Open mode token is not recognized."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_MODE")

class NotFound(GridFsError, FileNotFoundError):
    """No current version exists for the requested key."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_NOT_FOUND")

class AlreadyExists(GridFsError, FileExistsError):
    """Exclusive open on a key that already has a current version."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_EXISTS")

class CrossBucketRenameRejected(GridFsError):
    """Rename between different endpoints, databases or buckets."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_RENAME_CROSS_BUCKET")

class StoreCommunicationError(GridFsError, OSError):
    """The blob store itself failed."""
    def __init__(self, message: str, operation: str = None):
        code = "ERR_STORE"
        if operation:
            code = f"ERR_STORE_{operation.upper()}"
        super().__init__(message, code=code)

class StreamRegistrationError(GridFsError):
    """The URL scheme could not be bound or unbound."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_REGISTER")

class ConfigurationError(GridFsError):
    """Configuration or credential error."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_CONFIG")
