"""Parse spec text and detect which OpenAPI dialect it uses."""

import json

import yaml

from postman_publisher.errors import ConversionError

OPENAPI3 = "openapi3"
SWAGGER2 = "swagger2"


class SpecLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps (``2024-01-01``) as plain strings."""


SpecLoader.add_constructor(
    "tag:yaml.org,2002:timestamp",
    lambda loader, node: loader.construct_scalar(node),
)


def parse_spec_document(text: str) -> dict:
    """Parse JSON or YAML spec text into a dict.

    Raises ConversionError if the text is neither or is not a mapping.
    """
    if not text.strip():
        raise ConversionError("spec is empty")

    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        try:
            data = yaml.load(text, Loader=SpecLoader)
        except yaml.YAMLError as e:
            raise ConversionError(f"spec is neither valid JSON nor YAML ({e})") from e

    if not isinstance(data, dict):
        raise ConversionError("spec root must be an object")
    return data


def detect_spec_version(doc: dict) -> str:
    """Return OPENAPI3 or SWAGGER2 for a parsed spec document."""
    if "openapi" in doc:
        version = str(doc["openapi"])
        if version.startswith("3."):
            return OPENAPI3
        raise ConversionError(f"unsupported openapi version {version}")
    if "swagger" in doc:
        version = str(doc["swagger"])
        if version.startswith("2"):
            return SWAGGER2
        raise ConversionError(f"unsupported swagger version {version}")
    raise ConversionError("document is not an OpenAPI or Swagger spec")
