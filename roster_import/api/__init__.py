from .bulk_insert import BulkInsertClient, BulkInsertError, InsertResult

__all__ = [
    "BulkInsertClient",
    "BulkInsertError",
    "InsertResult",
]
