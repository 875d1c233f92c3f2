"""Backends subpackage for stable-uid.

Parser backends bridge source text and ParsedFile trees.  The base install
provides ``JsonDocumentBackend`` for JSON-encoded component documents; real
source-language parsers plug in through the ``ParserBackend`` Protocol.
"""

from stable_uid.backends.document import JsonDocumentBackend

__all__ = ["JsonDocumentBackend"]
