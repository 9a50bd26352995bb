"""
Central re-exports for the metadata extractor data models.
"""
from .metadata import Metadata

__all__ = [
    "Metadata",
]
