"""OpenAPI / Swagger to Postman Collection v2.1 converter.

Converts OpenAPI 3.x and Swagger 2.0 documents into a collection dict.
Requests are grouped into one folder per first tag, path parameters become
``:name`` segments and every URL is rooted at the ``{{baseUrl}}`` variable.
"""

import json
import re
import uuid
from typing import Any

from postman_publisher.collection.models import SCHEMA_V21
from postman_publisher.errors import ConversionError
from postman_publisher.spec.detect import SWAGGER2, detect_spec_version, parse_spec_document

from .auth import auth_for_operation, security_schemes
from .base import ConvertOptions
from .schema import RefResolver, example_from_schema

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
BASE_URL = "{{baseUrl}}"
PATH_PARAM = re.compile(r"\{([^}]+)\}")

FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART = "multipart/form-data"


def convert_spec(spec_text: str, options: ConvertOptions | None = None) -> dict:
    """Convert spec text into a Postman collection dict.

    Raises ConversionError if the text is not a usable OpenAPI/Swagger spec.
    """
    doc = parse_spec_document(spec_text)
    return OpenApiConverter(doc, options or ConvertOptions()).convert()


def _is_json(media_type: str) -> bool:
    media_type = media_type.split(";")[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


class OpenApiConverter:
    """Converts one parsed spec document into a collection dict."""

    def __init__(self, doc: dict, options: ConvertOptions):
        self.doc = doc
        self.options = options
        self.dialect = detect_spec_version(doc)
        self.resolver = RefResolver(doc)
        self.schemes = security_schemes(doc, self.resolver)

    @property
    def use_examples(self) -> bool:
        return self.options.parameters_resolution == "Example"

    def convert(self) -> dict:
        paths = self.doc.get("paths")
        if not isinstance(paths, dict):
            raise ConversionError("spec has no paths")

        info = self.doc.get("info") if isinstance(self.doc.get("info"), dict) else {}
        collection_info = {
            "_postman_id": str(uuid.uuid4()),
            "name": str(info.get("title") or "API"),
            "schema": SCHEMA_V21,
        }
        if info.get("description"):
            collection_info["description"] = info["description"]

        return {
            "info": collection_info,
            "item": self._build_items(paths),
            "variable": [{"key": "baseUrl", "value": self._base_url(), "type": "string"}],
        }

    def _build_items(self, paths: dict) -> list[dict]:
        items: list[dict] = []
        folders: dict[str, dict] = {}

        for path, path_item in paths.items():
            path_item = self.resolver.resolve(path_item)
            if not isinstance(path_item, dict):
                continue
            shared_params = path_item.get("parameters", [])

            for method in HTTP_METHODS:
                operation = path_item.get(method)
                if not isinstance(operation, dict):
                    continue
                request_item = self._request_item(str(path), method, operation, shared_params)

                tag = self._folder_tag(operation)
                if tag is None:
                    items.append(request_item)
                    continue
                if tag not in folders:
                    folders[tag] = self._folder(tag)
                    items.append(folders[tag])
                folders[tag]["item"].append(request_item)

        return items

    def _folder_tag(self, operation: dict) -> str | None:
        if self.options.folder_strategy != "Tags":
            return None
        tags = operation.get("tags")
        if isinstance(tags, list) and tags and isinstance(tags[0], str):
            return tags[0]
        return None

    def _folder(self, tag: str) -> dict:
        folder: dict = {"name": tag, "item": []}
        for entry in self.doc.get("tags") or []:
            if isinstance(entry, dict) and entry.get("name") == tag and entry.get("description"):
                folder["description"] = entry["description"]
        return folder

    # --- base URL ---

    def _base_url(self) -> str:
        if self.dialect == SWAGGER2:
            host = self.doc.get("host")
            base_path = str(self.doc.get("basePath") or "")
            if not host:
                return base_path or "/"
            schemes = self.doc.get("schemes")
            scheme = schemes[0] if isinstance(schemes, list) and schemes else "https"
            return f"{scheme}://{host}{base_path}".rstrip("/")

        servers = self.doc.get("servers")
        if not isinstance(servers, list) or not servers or not isinstance(servers[0], dict):
            return "/"
        server = servers[0]
        url = str(server.get("url") or "/")
        variables = server.get("variables") if isinstance(server.get("variables"), dict) else {}
        for name, var in variables.items():
            if isinstance(var, dict) and "default" in var:
                url = url.replace("{" + name + "}", str(var["default"]))
        return url.rstrip("/") or "/"

    # --- requests ---

    def _request_name(self, path: str, operation: dict) -> str:
        if self.options.request_name_source == "Fallback":
            for key in ("summary", "operationId"):
                if operation.get(key):
                    return str(operation[key])
        return path

    def _parameters(self, shared: Any, own: Any) -> list[dict]:
        """Merge path-level and operation-level parameters; the operation wins."""
        merged: dict[tuple, dict] = {}
        for group in (shared, own):
            if not isinstance(group, list):
                continue
            for param in group:
                param = self.resolver.resolve(param)
                if isinstance(param, dict) and param.get("name") and param.get("in"):
                    merged[(param["name"], param["in"])] = param
        return list(merged.values())

    def _param_value(self, param: dict) -> str:
        if self.use_examples:
            if "example" in param:
                return _to_text(param["example"])
            examples = param.get("examples")
            if isinstance(examples, dict) and examples:
                first = self.resolver.resolve(next(iter(examples.values())))
                if isinstance(first, dict) and "value" in first:
                    return _to_text(first["value"])
        # Swagger 2 keeps type information on the parameter itself
        schema = param.get("schema", param)
        return _to_text(example_from_schema(schema, self.resolver, self.use_examples))

    def _request_item(self, path: str, method: str, operation: dict, shared_params: Any) -> dict:
        params = self._parameters(shared_params, operation.get("parameters"))
        by_location: dict[str, list[dict]] = {}
        for param in params:
            by_location.setdefault(param["in"], []).append(param)

        request: dict = {
            "method": method.upper(),
            "header": [
                {"key": p["name"], "value": self._param_value(p)}
                for p in by_location.get("header", [])
            ],
            "url": self._url(path, by_location.get("query", []), by_location.get("path", [])),
        }
        if operation.get("description"):
            request["description"] = operation["description"]

        body, content_type = self._body(operation, by_location)
        if body is not None:
            request["body"] = body
            request["header"].append({"key": "Content-Type", "value": content_type})

        accept = self._accept(operation)
        if accept:
            request["header"].append({"key": "Accept", "value": accept})

        auth = auth_for_operation(operation, self.doc, self.schemes)
        if auth is not None:
            request["auth"] = auth

        return {
            "name": self._request_name(path, operation),
            "request": request,
            "response": [],
        }

    def _url(self, path: str, query: list[dict], path_params: list[dict]) -> dict:
        segments = [PATH_PARAM.sub(r":\1", s) for s in path.strip("/").split("/") if s]
        raw = BASE_URL + ("/" + "/".join(segments) if segments else "")

        url: dict = {"raw": raw, "host": [BASE_URL], "path": segments}
        if query:
            url["query"] = [self._kv(p) for p in query]
            url["raw"] += "?" + "&".join(f"{q['key']}={q['value']}" for q in url["query"])
        if path_params:
            url["variable"] = [self._kv(p) for p in path_params]
        return url

    def _kv(self, param: dict) -> dict:
        entry = {"key": param["name"], "value": self._param_value(param)}
        if param.get("description"):
            entry["description"] = param["description"]
        return entry

    # --- bodies ---

    def _body(self, operation: dict, by_location: dict[str, list[dict]]) -> tuple[dict | None, str]:
        if self.dialect == SWAGGER2:
            return self._swagger2_body(operation, by_location)

        request_body = self.resolver.resolve(operation.get("requestBody"))
        if not isinstance(request_body, dict):
            return None, ""
        content = request_body.get("content")
        if not isinstance(content, dict) or not content:
            return None, ""

        media_type = self._pick_media_type(content)
        media = content[media_type] if isinstance(content[media_type], dict) else {}
        schema = media.get("schema", {})

        if media_type in (FORM_URLENCODED, MULTIPART):
            return self._form_body(media_type, self.resolver.resolve(schema)), media_type

        example = self._media_example(media)
        if example is None:
            example = example_from_schema(schema, self.resolver, self.use_examples)
        return self._raw_body(example, _is_json(media_type)), media_type

    def _pick_media_type(self, content: dict) -> str:
        for media_type in content:
            if _is_json(media_type):
                return media_type
        for media_type in (FORM_URLENCODED, MULTIPART):
            if media_type in content:
                return media_type
        return next(iter(content))

    def _media_example(self, media: dict) -> Any:
        if not self.use_examples:
            return None
        if "example" in media:
            return media["example"]
        examples = media.get("examples")
        if isinstance(examples, dict) and examples:
            first = self.resolver.resolve(next(iter(examples.values())))
            if isinstance(first, dict):
                return first.get("value")
        return None

    def _raw_body(self, example: Any, as_json: bool) -> dict:
        if as_json:
            return {
                "mode": "raw",
                "raw": json.dumps(example, indent=2, default=str),
                "options": {"raw": {"language": "json"}},
            }
        return {"mode": "raw", "raw": _to_text(example)}

    def _form_body(self, media_type: str, schema: Any) -> dict:
        properties = schema.get("properties") if isinstance(schema, dict) else None
        fields = []
        for name, prop in (properties or {}).items():
            prop = self.resolver.resolve(prop)
            fields.append(self._form_field(media_type, name, prop))
        return self._form(media_type, fields)

    def _form_field(self, media_type: str, name: str, schema: Any) -> dict:
        value = _to_text(example_from_schema(schema, self.resolver, self.use_examples))
        if media_type == FORM_URLENCODED:
            return {"key": name, "value": value}
        is_file = isinstance(schema, dict) and (
            schema.get("format") == "binary" or schema.get("type") == "file"
        )
        if is_file:
            return {"key": name, "type": "file", "src": []}
        return {"key": name, "value": value, "type": "text"}

    def _form(self, media_type: str, fields: list[dict]) -> dict:
        mode = "urlencoded" if media_type == FORM_URLENCODED else "formdata"
        return {"mode": mode, mode: fields}

    def _consumes(self, operation: dict) -> list:
        consumes = operation.get("consumes", self.doc.get("consumes"))
        return consumes if isinstance(consumes, list) else []

    def _swagger2_body(self, operation: dict, by_location: dict[str, list[dict]]) -> tuple[dict | None, str]:
        consumes = self._consumes(operation)

        body_params = by_location.get("body", [])
        if body_params:
            media_type = next((c for c in consumes if _is_json(c)), consumes[0] if consumes else "application/json")
            param = body_params[0]
            example = None
            if self.use_examples and "example" in param:
                example = param["example"]
            if example is None:
                example = example_from_schema(param.get("schema", {}), self.resolver, self.use_examples)
            return self._raw_body(example, _is_json(media_type)), media_type

        form_params = by_location.get("formData", [])
        if form_params:
            media_type = MULTIPART if MULTIPART in consumes or any(
                p.get("type") == "file" for p in form_params
            ) else FORM_URLENCODED
            fields = [self._form_field(media_type, p["name"], p) for p in form_params]
            return self._form(media_type, fields), media_type

        return None, ""

    def _accept(self, operation: dict) -> str | None:
        if self.dialect == SWAGGER2:
            produces = operation.get("produces", self.doc.get("produces"))
            if isinstance(produces, list) and produces:
                return str(produces[0])
            return None

        responses = operation.get("responses")
        if not isinstance(responses, dict):
            return None
        # prefer a 2xx response
        ordered = sorted(responses.items(), key=lambda kv: not str(kv[0]).startswith("2"))
        for _, response in ordered:
            response = self.resolver.resolve(response)
            content = response.get("content") if isinstance(response, dict) else None
            if isinstance(content, dict) and content:
                return next(iter(content))
        return None
