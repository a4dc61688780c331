"""
Parsing Module - HTML, linked data and sitemap readers.
"""

from .html_parser import HTMLParser, ParseConfig, element_text, resolved_attr, select, select_first
from .sitemap_reader import iter_locations
from .structured_data import LinkedData, find_linked_data_block, parse_linked_data, strip_query

__all__ = [
    'HTMLParser',
    'ParseConfig',
    'LinkedData',
    'element_text',
    'resolved_attr',
    'select',
    'select_first',
    'iter_locations',
    'find_linked_data_block',
    'parse_linked_data',
    'strip_query',
]
