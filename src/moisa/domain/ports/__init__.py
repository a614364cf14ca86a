from .indexer import IndexerClientPort

__all__ = [
    "IndexerClientPort",
]
