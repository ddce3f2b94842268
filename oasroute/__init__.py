"""OpenAPI driven request routing, threaded handler dispatch and schema field extraction."""

__version__ = "0.1.0"