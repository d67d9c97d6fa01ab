"""
Generated file model — returned by generators.
"""

from __future__ import annotations

from pydantic import BaseModel


class GeneratedFile(BaseModel):
    """A file rendered from the resolved manifest.

    Attributes:
        path:    Destination path as written.
        content: Full file content.
        reason:  What the file was generated from.
    """

    path: str
    content: str
    reason: str = ""
