"""Shared building blocks: errors, HTTP retry, caching, persistence helpers."""
