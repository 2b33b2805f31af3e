"""Translate OpenAPI security requirements into Postman auth descriptors."""

from .schema import RefResolver

# OpenAPI 3 flow name / Swagger 2 flow value -> Postman grant_type
GRANT_TYPES = {
    "authorizationCode": "authorization_code",
    "accessCode": "authorization_code",
    "clientCredentials": "client_credentials",
    "application": "client_credentials",
    "password": "password_credentials",
    "implicit": "implicit",
}


def _field(key: str, value) -> dict:
    return {"key": key, "value": value, "type": "string"}


def security_schemes(doc: dict, resolver: RefResolver) -> dict[str, dict]:
    """Return the named security schemes of an OpenAPI 3 or Swagger 2 document."""
    components = doc.get("components")
    raw = components.get("securitySchemes") if isinstance(components, dict) else None
    if raw is None:
        raw = doc.get("securityDefinitions")
    if not isinstance(raw, dict):
        return {}

    schemes = {}
    for name, scheme in raw.items():
        scheme = resolver.resolve(scheme)
        if isinstance(scheme, dict):
            schemes[name] = scheme
    return schemes


def _oauth2_fields(scheme: dict, scopes: list) -> list[dict]:
    fields = []
    flows = scheme.get("flows")
    if isinstance(flows, dict) and flows:
        flow_name, flow = next(iter(flows.items()))
    else:
        # Swagger 2 keeps the flow inline
        flow_name, flow = scheme.get("flow"), scheme
    if not isinstance(flow, dict):
        flow = {}

    if flow_name in GRANT_TYPES:
        fields.append(_field("grant_type", GRANT_TYPES[flow_name]))
    if flow.get("authorizationUrl"):
        fields.append(_field("authUrl", flow["authorizationUrl"]))
    if flow.get("tokenUrl"):
        fields.append(_field("accessTokenUrl", flow["tokenUrl"]))
    if scopes:
        fields.append(_field("scope", " ".join(str(s) for s in scopes)))
    return fields


def auth_for_scheme(scheme: dict, scopes: list) -> dict | None:
    kind = scheme.get("type")
    if kind in ("oauth2", "openIdConnect"):
        return {"type": "oauth2", "oauth2": _oauth2_fields(scheme, scopes)}

    if kind == "http":
        http_scheme = str(scheme.get("scheme", "")).lower()
        if http_scheme == "bearer":
            return {"type": "bearer", "bearer": [_field("token", "{{bearerToken}}")]}
        if http_scheme == "basic":
            kind = "basic"

    if kind == "basic":
        return {
            "type": "basic",
            "basic": [
                _field("username", "{{basicAuthUsername}}"),
                _field("password", "{{basicAuthPassword}}"),
            ],
        }

    if kind == "apiKey":
        location = "query" if scheme.get("in") == "query" else "header"
        return {
            "type": "apikey",
            "apikey": [
                _field("key", scheme.get("name", "")),
                _field("value", "{{apiKey}}"),
                _field("in", location),
            ],
        }
    return None


def auth_for_operation(operation: dict, doc: dict, schemes: dict[str, dict]) -> dict | None:
    """Auth descriptor for an operation, falling back to the root ``security``.

    Only the first requirement is used; an empty requirement (anonymous
    access allowed) or an empty list means no auth.
    """
    requirements = operation.get("security", doc.get("security"))
    if not isinstance(requirements, list) or not requirements:
        return None
    first = requirements[0]
    if not isinstance(first, dict):
        return None

    for name, scopes in first.items():
        scheme = schemes.get(name)
        if scheme is None:
            continue
        auth = auth_for_scheme(scheme, scopes if isinstance(scopes, list) else [])
        if auth is not None:
            return auth
    return None
