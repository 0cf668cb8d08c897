# Copyright 2026 gridfs-stream contributors. All Rights Reserved.
from gridfs_stream import GridFsStreamWrapper
import time
import uuid

def main():
    # Create a new wrapper; connection options come from GRIDFS_STREAM_* variables
    wrapper = GridFsStreamWrapper()

    try:
        base = f"gridfs://localhost:27017/example-{uuid.uuid4().hex[:8]}/fs"
        url = f"{base}/hello.txt"

        # Write a file
        with wrapper.open(url, "w") as f:
            f.write(b"Hello, World!")
        print(f"Wrote file: {url}")

        # Get file metadata
        stat = wrapper.url_stat(url)
        print(f"File size: {stat['st_size']} bytes")
        print(f"Last modified: {time.ctime(stat['st_mtime'])}")

        # Read it back
        with wrapper.open(url, "r") as f:
            print(f"Read content: {f.read().decode()}")

        # Append to it
        with wrapper.open(url, "a") as f:
            f.write(b" Goodbye!")

        # Rename within the bucket
        new_url = f"{base}/greetings/hello.txt"
        wrapper.rename(url, new_url)
        print(f"Renamed to: {new_url}")

        # Set modification and access time
        wrapper.touch(new_url, int(time.time()) - 3600)

        # Delete the file
        wrapper.unlink(new_url)
        print("Deleted file")

    finally:
        wrapper.close()

if __name__ == "__main__":
    main()
