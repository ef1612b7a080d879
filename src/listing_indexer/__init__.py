"""
Listing Indexer Package.

This package extracts structured property listings from real estate search
results pages of unknown structure and forwards each listing to a semantic
indexing service.

Modules:
    config: Configuration settings and logging setup.
    core: Exceptions, field normalizers and database connections.
    scraping: Page retrieval, layout detection and record extraction.
    indexing: Concurrent dispatch to the indexing service.
    pipeline: End-to-end run used by callers.

Author: Leonardo Pacciani-Mori
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Leonardo Pacciani-Mori"
