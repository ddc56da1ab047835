from .base import ClassificationProviderBase
from .classification_provider import HttpClassificationProvider

__all__ = ["ClassificationProviderBase", "HttpClassificationProvider"]
