"""
Extraction Module - Detail page to Record conversion.
"""

from .extractor import Extractor

__all__ = [
    'Extractor',
]
