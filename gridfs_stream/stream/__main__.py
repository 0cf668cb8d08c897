# Copyright 2026 gridfs-stream contributors. All Rights Reserved.
"""
Command line access to gridfs:// files.

Usage:
    python -m gridfs_stream.stream cat <url>
    python -m gridfs_stream.stream put <url> <local-file>
    python -m gridfs_stream.stream rm <url>
    python -m gridfs_stream.stream mv <url> <new-url>
    python -m gridfs_stream.stream touch <url> [mtime] [atime]
    python -m gridfs_stream.stream stat <url>

Example:
    python -m gridfs_stream.stream put gridfs://localhost/mydb/fs/hello.txt ./hello.txt
"""

import sys

from ..client.exceptions import GridFsError
from .session import GridFsStreamWrapper

USAGE = __doc__.split("Example:")[0].strip()

ARGUMENT_COUNTS = {
    'cat': (1, 1),
    'put': (2, 2),
    'rm': (1, 1),
    'mv': (2, 2),
    'touch': (1, 3),
    'stat': (1, 1),
}

def run(wrapper, command, args, out=None):
    """
    Execute one command.

    Returns:
        int: Process exit status
    """
    out = out or sys.stdout.buffer
    if command == 'cat':
        with wrapper.open(args[0], 'rb') as f:
            out.write(f.read())
        return 0
    if command == 'put':
        with open(args[1], 'rb') as local:
            data = local.read()
        with wrapper.open(args[0], 'wb') as f:
            f.write(data)
        return 0
    if command == 'rm':
        return 0 if wrapper.unlink(args[0]) else 1
    if command == 'mv':
        return 0 if wrapper.rename(args[0], args[1]) else 1
    if command == 'touch':
        times = [int(value) for value in args[1:]]
        return 0 if wrapper.touch(args[0], *times) else 1
    if command == 'stat':
        result = wrapper.url_stat(args[0], quiet=False)
        if result is None:
            return 1
        for field, value in result.items():
            out.write(f"{field}: {value}\n".encode())
        return 0
    raise ValueError(f"Unknown command {command}")

def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] not in ARGUMENT_COUNTS:
        print(USAGE)
        return 2

    command, args = argv[0], argv[1:]
    low, high = ARGUMENT_COUNTS[command]
    if not low <= len(args) <= high:
        print(USAGE)
        return 2

    wrapper = GridFsStreamWrapper()
    try:
        return run(wrapper, command, args)
    except (GridFsError, ValueError) as e:
        print(f"{command} failed: {e}", file=sys.stderr)
        return 1
    finally:
        wrapper.close()

if __name__ == '__main__':
    sys.exit(main())
