"""
Persistence for the airport dataset: JSON document store and sample data.
"""

from .json_store import Dataset, JsonDocumentStore, find_integrity_issues
from .sample_data import build_sample_dataset

__all__ = [
    "Dataset",
    "JsonDocumentStore",
    "find_integrity_issues",
    "build_sample_dataset",
]
