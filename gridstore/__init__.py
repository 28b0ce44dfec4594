"""Chunked object upload streams over a document store."""
