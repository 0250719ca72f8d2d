"""Fetchers package for reading Foundry world journal exports."""

from .base_fetcher import BaseFetcher, FetcherError, RecordReadError
from .record_reader import RecordReader
from .world_fetcher import WorldFetcher

__all__ = [
    'BaseFetcher',
    'FetcherError',
    'RecordReadError',
    'RecordReader',
    'WorldFetcher'
]
