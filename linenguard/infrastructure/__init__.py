"""Infrastructure layer exports."""

from .classifier import BedClassifier, UnconfiguredClassifier, configure_classifier, get_classifier
from .results import HISTORY_KEY, ResultStore, seed_records
from .storage import InMemoryKeyValueStorage, JsonFileStorage, KeyValueStorage

__all__ = [
    "BedClassifier",
    "UnconfiguredClassifier",
    "configure_classifier",
    "get_classifier",
    "HISTORY_KEY",
    "ResultStore",
    "seed_records",
    "InMemoryKeyValueStorage",
    "JsonFileStorage",
    "KeyValueStorage",
]
