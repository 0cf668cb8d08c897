# Copyright 2026 gridfs-stream contributors. All Rights Reserved.
"""
Store Error Translation Module.

This module provides a decorator that converts driver errors raised by
pymongo and gridfs into gridfs stream exceptions. Failed store calls are
never retried; the converted error is raised immediately.

Functions:
    store_call: Decorator converting driver errors for a store operation.
    _convert_pymongo_error: Helper function to convert driver errors to StoreCommunicationError.
"""
from functools import wraps
from typing import Callable, Any
from gridfs.errors import GridFSError
from pymongo.errors import (
    ConnectionFailure,
    DuplicateKeyError,
    ExecutionTimeout,
    OperationFailure,
    PyMongoError,
    ServerSelectionTimeoutError,
)
from .exceptions import StoreCommunicationError
from ..utils import logger

STORE_ERRORS = (PyMongoError, GridFSError)

def _convert_pymongo_error(e: Exception, operation: str = None) -> StoreCommunicationError:
    """
    Convert a driver error to a StoreCommunicationError.

    Args:
        e (Exception): The pymongo or gridfs error to convert.
        operation (str, optional): The store operation being performed. Defaults to None.

    Returns:
        StoreCommunicationError: The converted error.
    """
    if isinstance(e, ServerSelectionTimeoutError):
        return StoreCommunicationError(f"Server selection timed out: {e}", operation=operation)
    if isinstance(e, ConnectionFailure):
        return StoreCommunicationError(f"Connection to store failed: {e}", operation=operation)
    if isinstance(e, ExecutionTimeout):
        return StoreCommunicationError(f"Store operation timed out: {e}", operation=operation)
    if isinstance(e, DuplicateKeyError):
        return StoreCommunicationError(f"Duplicate key: {e}", operation=operation)
    if isinstance(e, OperationFailure):
        if e.code in (13, 18):
            return StoreCommunicationError(f"Access denied: {e}", operation=operation)
        return StoreCommunicationError(f"Store operation failed: {e}", operation=operation)
    return StoreCommunicationError(str(e), operation=operation)

def store_call(operation: str) -> Callable:
    """
    Decorator for a method that talks to the store.

    Args:
        operation (str): Operation name used in the error code, e.g. ``"write"``.

    Returns:
        Callable: A decorator that wraps the function.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except STORE_ERRORS as e:
                logger.error(f"Store error during {func.__name__}: {e}")
                raise _convert_pymongo_error(e, operation) from e
        return wrapper
    return decorator
