from .store import GridFsStore
from .config import ClientPool, StoreConfig
