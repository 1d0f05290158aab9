"""Bed classifier integration hooks.

The inspection service asks whichever classifier is installed here. When no
API key is configured the :class:`UnconfiguredClassifier` stays in place and
every request fails fast with :class:`MissingCredentialsError`.
"""
from __future__ import annotations

from typing import Protocol

from linenguard.core.errors import MissingCredentialsError
from linenguard.core.schema import ClassifierVerdict
from linenguard.core.settings import API_KEY_VARIABLES


class BedClassifier(Protocol):
    """Contract for bed photo classifiers."""

    def classify(self, image: bytes, mime_type: str) -> ClassifierVerdict:
        """Return the made/unmade verdict for one photo."""


class UnconfiguredClassifier:
    """Fallback classifier used when no provider credential is configured."""

    def classify(self, image: bytes, mime_type: str) -> ClassifierVerdict:
        raise MissingCredentialsError(
            "Classifier API key is not configured; set "
            + " or ".join(API_KEY_VARIABLES)
            + " and restart the service."
        )


_classifier: BedClassifier = UnconfiguredClassifier()


def configure_classifier(classifier: BedClassifier) -> None:
    """Install the classifier used for new inspections."""

    global _classifier
    _classifier = classifier


def get_classifier() -> BedClassifier:
    """Return the currently configured classifier."""

    return _classifier
