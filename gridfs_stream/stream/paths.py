# Copyright 2026 gridfs-stream contributors. All Rights Reserved.
"""
URL parsing for the gridfs:// scheme.

A URL has the form ``gridfs://host[:port]/database/bucket/path/to/file``.
Everything after the bucket is normalized into a single GridFS filename.
"""

from typing import Iterable, List
from urllib.parse import urlsplit

from ..client.exceptions import PathParseError
from ..client.types import SCHEME, PathInfo

def resolve_key(segments: Iterable[str]) -> str:
    """
    Normalize path segments into a GridFS filename.

    Empty and ``.`` segments are dropped. ``..`` removes the previous segment,
    but never the first retained one.

    Args:
        segments (Iterable[str]): Raw path segments

    Returns:
        str: The normalized key, possibly empty
    """
    resolved: List[str] = []
    for segment in segments:
        if segment in ('', '.'):
            continue
        if segment == '..':
            if len(resolved) > 1:
                resolved.pop()
            continue
        resolved.append(segment)
    return '/'.join(resolved)

def parse_path(path: str) -> PathInfo:
    """
    Parse a gridfs:// URL.

    Args:
        path (str): The URL to parse

    Returns:
        PathInfo: Endpoint, database, bucket and normalized key

    Raises:
        PathParseError: If the URL is not a valid gridfs:// file URL
    """
    if not isinstance(path, str):
        raise PathParseError(f"Illegal file name {path!r} given")

    # urlsplit lowercases the scheme, so compare it on the raw string
    scheme, sep, _ = path.partition('://')
    if not sep or scheme != SCHEME:
        raise PathParseError(f"Illegal file name {path}: scheme must be {SCHEME}://")

    try:
        parts = urlsplit(path)
    except ValueError as e:
        raise PathParseError(f"Illegal file name {path}: {e}") from e
    endpoint = parts.netloc.rpartition('@')[2]
    if not endpoint:
        raise PathParseError(f"Illegal file name {path}: missing host")

    segments = parts.path.lstrip('/').split('/')
    if len(segments) < 3:
        raise PathParseError(f"Illegal file name {path}: expected /database/bucket/file")

    database, bucket, rest = segments[0], segments[1], segments[2:]
    if not database or not bucket:
        raise PathParseError(f"Illegal file name {path}: empty database or bucket")

    key = resolve_key(rest)
    if not key:
        raise PathParseError(f"Illegal file name {path}: path resolves to nothing")

    return PathInfo(endpoint=endpoint, database=database, bucket=bucket, key=key)
