from .record_store import MEMORY, RecordStore, StoreInit, init_store

__all__ = ['MEMORY', 'RecordStore', 'StoreInit', 'init_store']
