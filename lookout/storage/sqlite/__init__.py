from lookout.storage.sqlite.storage import SQLiteStorage

__all__ = ["SQLiteStorage"]
