"""
Generated file model — used by all generators.
"""

from __future__ import annotations

from pydantic import BaseModel


class GeneratedFile(BaseModel):
    """A file produced by one of the template generators.

    Attributes:
        path:       Path relative to the project directory.
        content:    Full file content.
        overwrite:  Whether to overwrite if already exists.
        executable: Whether to mark the file executable after writing.
        reason:     Why this file was generated.
    """

    path: str
    content: str
    overwrite: bool = True
    executable: bool = False
    reason: str = ""
