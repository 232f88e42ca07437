"""HTTP utilities for the completion layer.

Exposes async httpx client construction with shared timeouts.
"""
from .client import create_async_client

__all__ = ["create_async_client"]
