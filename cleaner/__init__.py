"""URL cleaning engine: parsing, parameter filtering, and redirect unwrapping."""

from cleaner.batch import CleanResult, clean_batch
from cleaner.engine import UrlCleaner, clean_parsed, clean_url
from cleaner.params import filter_query
from cleaner.unwrap import unwrap
from cleaner.urls import parse_url

__all__ = [
    "CleanResult",
    "clean_batch",
    "UrlCleaner",
    "clean_parsed",
    "clean_url",
    "filter_query",
    "unwrap",
    "parse_url",
]
