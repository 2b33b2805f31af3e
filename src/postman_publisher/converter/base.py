"""Conversion options.

Mirrors the option set of the openapi-to-postman converter; the defaults are
the ones the publish pipeline has always used.
"""

from typing import Literal

from pydantic import BaseModel


class ConvertOptions(BaseModel):
    """Options controlling how a spec becomes a collection."""

    folder_strategy: Literal["Tags", "Paths"] = "Tags"  # Tags: one folder per first tag
    request_name_source: Literal["Fallback", "URL"] = "Fallback"
    parameters_resolution: Literal["Example", "Schema"] = "Example"
