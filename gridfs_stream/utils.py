# Copyright 2026 gridfs-stream contributors. All Rights Reserved.
"""
Logging and tracing helpers for the gridfs stream layer.

The log level is read from ``GRIDFS_STREAM_LOG_LEVEL`` and per-operation
tracing is switched on with ``GRIDFS_STREAM_TRACE_OPS``.
"""

import logging
import time
import os

# Enable a debug trace for all stream operations if requested
TRACE_OPERATIONS = os.environ.get('GRIDFS_STREAM_TRACE_OPS', '').lower() in ('true', '1', 'yes')

LOG_LEVEL = os.environ.get('GRIDFS_STREAM_LOG_LEVEL', 'INFO').upper()

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s] - %(message)s'
)
logger = logging.getLogger('GridFsStream')
logger.setLevel(LOG_LEVEL)

def time_function(func_name, start_time):
    """
    Log the elapsed time of an operation.

    Args:
        func_name (str): Name of the operation being timed
        start_time (float): Start time from time.time()

    Returns:
        float: Elapsed time in seconds
    """
    elapsed = time.time() - start_time
    logger.debug(f"{func_name} completed in {elapsed:.4f} seconds")
    return elapsed

def trace_op(operation, path, **details):
    """
    Trace a stream operation when GRIDFS_STREAM_TRACE_OPS is set.

    Args:
        operation (str): The operation being performed
        path (str): The URL or key being operated on
        **details: Additional details to log
    """
    if TRACE_OPERATIONS:
        detail_str = ', '.join(f"{k}={v}" for k, v in details.items())
        logger.debug(f"TRACE: {operation} on {path} {detail_str}")
