"""JSON Schema helpers: local $ref resolution and example generation."""

from typing import Any

MAX_DEPTH = 10

FORMAT_PLACEHOLDERS = {
    "date": "<date>",
    "date-time": "<dateTime>",
    "email": "<email>",
    "uuid": "<uuid>",
    "uri": "<uri>",
    "byte": "<byte>",
    "binary": "<binary>",
}


class RefResolver:
    """Resolves local ``#/...`` JSON pointers against the spec document."""

    def __init__(self, doc: dict):
        self.doc = doc

    def lookup(self, ref: str) -> Any:
        if not ref.startswith("#/"):
            return {}
        target: Any = self.doc
        for part in ref[2:].split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if not isinstance(target, dict) or part not in target:
                return {}
            target = target[part]
        return target

    def resolve(self, node: Any) -> Any:
        """Follow a chain of $ref objects; a cycle resolves to an empty dict."""
        seen: set[str] = set()
        while isinstance(node, dict) and isinstance(node.get("$ref"), str):
            ref = node["$ref"]
            if ref in seen:
                return {}
            seen.add(ref)
            node = self.lookup(ref)
        return node


def schema_type(schema: dict) -> str | None:
    declared = schema.get("type")
    # OpenAPI 3.1 allows a list of types, e.g. ["string", "null"]
    if isinstance(declared, list):
        declared = next((t for t in declared if t != "null"), None)
    if declared is None and "properties" in schema:
        return "object"
    if declared is None and "items" in schema:
        return "array"
    return declared if isinstance(declared, str) else None


def placeholder(schema: dict) -> Any:
    """Typed placeholder for a schema with no usable example."""
    fmt = schema.get("format")
    if fmt in FORMAT_PLACEHOLDERS:
        return FORMAT_PLACEHOLDERS[fmt]
    return f"<{schema_type(schema) or 'string'}>"


def example_from_schema(
    schema: Any,
    resolver: RefResolver,
    use_examples: bool = True,
    depth: int = 0,
    seen: frozenset[str] = frozenset(),
) -> Any:
    """Build an example value for ``schema``.

    With ``use_examples`` the schema's own ``example``/``default``/``enum``
    win over generated placeholders. Recursive $refs are cut off.
    """
    if depth > MAX_DEPTH or not isinstance(schema, dict):
        return None

    ref = schema.get("$ref")
    if isinstance(ref, str):
        if ref in seen:
            return None
        return example_from_schema(resolver.lookup(ref), resolver, use_examples, depth + 1, seen | {ref})

    if use_examples:
        if "example" in schema:
            return schema["example"]
        if "default" in schema:
            return schema["default"]
        enum = schema.get("enum")
        if isinstance(enum, list) and enum:
            return enum[0]

    def nested(sub: Any) -> Any:
        return example_from_schema(sub, resolver, use_examples, depth + 1, seen)

    all_of = schema.get("allOf")
    if isinstance(all_of, list) and all_of:
        merged: dict = {}
        for part in all_of:
            value = nested(part)
            if isinstance(value, dict):
                merged.update(value)
        return merged

    for key in ("oneOf", "anyOf"):
        options = schema.get(key)
        if isinstance(options, list) and options:
            return nested(options[0])

    kind = schema_type(schema)
    if kind == "object":
        properties = schema.get("properties")
        if not isinstance(properties, dict):
            return {}
        return {name: nested(prop) for name, prop in properties.items()}
    if kind == "array":
        item = nested(schema.get("items"))
        return [] if item is None else [item]
    return placeholder(schema)
