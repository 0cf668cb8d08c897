# Copyright 2026 gridfs-stream contributors. All Rights Reserved.
'''
This example demonstrates how to use gridfs:// URLs through fsspec.

Setup:
    pip install gridfs-stream

    # Start a MongoDB server on localhost:27017

Usage:
    python fsspec_operations.py <database> <bucket>
'''
import sys

import fsspec

import gridfs_stream

def main():
    if len(sys.argv) != 3:
        print("Usage: python fsspec_operations.py <database> <bucket>")
        sys.exit(1)

    database = sys.argv[1]
    bucket = sys.argv[2]
    example_file = f"gridfs://localhost:27017/{database}/{bucket}/example.txt"

    gridfs_stream.register()
    try:
        # Write to a file
        try:
            with fsspec.open(example_file, 'w') as f:
                f.write("Hello GridFS")
            print(f"File created and written: {example_file}")
        except Exception as e:
            print(f"Write operation failed: {e}")

        # Read from the file
        try:
            with fsspec.open(example_file, 'r') as f:
                content = f.read()
            print(f"Content read from file: {content}")
        except Exception as e:
            print(f"Read operation failed: {e}")

        # Delete the file
        try:
            fs = fsspec.filesystem("gridfs")
            fs.rm_file(example_file)
            print(f"File removed: {example_file}")
        except Exception as e:
            print(f"Delete operation failed: {e}")
    finally:
        gridfs_stream.unregister()

if __name__ == '__main__':
    main()
