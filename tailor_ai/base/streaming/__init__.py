"""Streaming primitives for the completion layer."""

from .stream import Chunk, CompletionStream, default_stream_error_mapper

__all__ = ["Chunk", "CompletionStream", "default_stream_error_mapper"]
