"""Test factories for creating test data."""

from tests.factories.composers import ComposerFactory, ConversationFactory
from tests.factories.stores import YieldingBlobStore

__all__ = [
    "ComposerFactory",
    "ConversationFactory",
    "YieldingBlobStore",
]
