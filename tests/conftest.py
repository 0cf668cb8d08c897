from datetime import datetime, timezone

import pytest
from bson import ObjectId
from pymongo.errors import AutoReconnect

from gridfs_stream.client.config import ClientPool, StoreConfig
from gridfs_stream.client.store import GridFsStore
from gridfs_stream.stream.session import GridFsStreamWrapper

BASE_URL = "gridfs://localhost/alcaeus_gridfs"

def _get(doc, dotted):
    value = doc
    for part in dotted.split('.'):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value

def _set(doc, dotted, value):
    parts = dotted.split('.')
    for part in parts[:-1]:
        doc = doc.setdefault(part, {})
    doc[parts[-1]] = value

def _matches(doc, criteria):
    for key, condition in criteria.items():
        value = _get(doc, key)
        if isinstance(condition, dict) and '$ne' in condition:
            if value == condition['$ne']:
                return False
        elif value != condition:
            return False
    return True

class FakeCollection:
    """The subset of a pymongo collection used by GridFsStore."""

    def __init__(self):
        self.docs = []

    def find(self, criteria):
        return [doc for doc in self.docs if _matches(doc, criteria)]

    def update_one(self, criteria, update):
        for doc in self.docs:
            if _matches(doc, criteria):
                for key, value in update.get('$set', {}).items():
                    _set(doc, key, value)
                return

class FakeDatabase:
    """In-memory database holding GridFS files and their content."""

    def __init__(self, name="alcaeus_gridfs"):
        self.name = name
        self.collections = {}
        self.contents = {}
        self.fail_deletes = False
        self.fail_all = False

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())

class FakeGridOut:
    def __init__(self, doc, content):
        self._doc = doc
        self._content = content

    @property
    def _id(self):
        return self._doc['_id']

    @property
    def filename(self):
        return self._doc.get('filename')

    @property
    def length(self):
        return self._doc['length']

    @property
    def upload_date(self):
        return self._doc['uploadDate']

    @property
    def metadata(self):
        return self._doc.get('metadata')

    def read(self):
        return self._content

class FakeCursor:
    def __init__(self, items):
        self.items = list(items)

    def sort(self, key_or_list, direction=None):
        keys = key_or_list if isinstance(key_or_list, list) else [(key_or_list, direction)]
        for key, order in reversed(keys):
            self.items.sort(
                key=lambda g: (_get(g._doc, key) is not None, _get(g._doc, key) or 0),
                reverse=order < 0,
            )
        return self

    def limit(self, count):
        self.items = self.items[:count]
        return self

    def __iter__(self):
        return iter(self.items)

class FakeGridFs:
    """The subset of gridfs.GridFS used by GridFsStore."""

    def __init__(self, database, collection="fs"):
        self.database = database
        self.files = database[f"{collection}.files"]

    def _check(self):
        if self.database.fail_all:
            raise AutoReconnect("connection refused")

    def put(self, data, filename=None, metadata=None):
        self._check()
        file_id = ObjectId()
        self.files.docs.append({
            '_id': file_id,
            'filename': filename,
            'length': len(data),
            'uploadDate': datetime.now(timezone.utc),
            'metadata': metadata,
        })
        self.database.contents[file_id] = bytes(data)
        return file_id

    def find(self, criteria):
        self._check()
        return FakeCursor(
            FakeGridOut(doc, self.database.contents[doc['_id']]) for doc in self.files.find(criteria)
        )

    def delete(self, file_id):
        self._check()
        if self.database.fail_deletes:
            raise AutoReconnect("connection lost")
        self.files.docs = [doc for doc in self.files.docs if doc['_id'] != file_id]
        self.database.contents.pop(file_id, None)

class FakeClient:
    def __init__(self, uri, **options):
        self.uri = uri
        self.options = options
        self.databases = {}
        self.closed = False

    def __getitem__(self, name):
        return self.databases.setdefault(name, FakeDatabase(name))

    def close(self):
        self.closed = True

def versions(database, bucket, key):
    """All stored versions of a key, newest first."""
    docs = database[f"{bucket}.files"].find({'filename': key})
    return sorted(docs, key=lambda d: d['metadata']['mtime'], reverse=True)

def content_of(database, doc):
    return database.contents[doc['_id']]

@pytest.fixture
def database():
    return FakeDatabase()

@pytest.fixture
def store(database):
    return GridFsStore(database, gridfs_factory=FakeGridFs)

@pytest.fixture
def pool():
    return ClientPool(StoreConfig(), client_factory=FakeClient)

@pytest.fixture
def wrapper(pool):
    wrapper = GridFsStreamWrapper(pool=pool, gridfs_factory=FakeGridFs)
    yield wrapper
    wrapper.close()

@pytest.fixture
def base_url():
    return BASE_URL

@pytest.fixture
def wrapper_db(wrapper):
    """The fake database behind BASE_URL."""
    return wrapper.pool.database("localhost", "alcaeus_gridfs")
