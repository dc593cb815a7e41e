"""Library catalog: books, authors, categories and types behind an HTTP API."""

__version__ = "1.0.0"
