"""Post-processing applied to a converted collection before it is published.

Four edits, applied in order by :func:`apply_transforms`:

1. prepend an "Auth" folder with a token request,
2. strip hardcoded Authorization headers,
3. point oauth2/bearer descriptors at the ``{{accessToken}}`` variable,
4. drop the embedded ``baseUrl`` variable.

None of them raise on an unexpected tree shape; anything that is not the
expected model is skipped. They are not safe to run twice on the same tree.
"""

from collections.abc import Iterator

from .models import Auth, Collection, Folder, KeyValue, Request, RequestItem

ACCESS_TOKEN_VARIABLE = "{{accessToken}}"
BASE_URL_VARIABLE = "baseUrl"

# auth kind -> field holding the token
TOKEN_FIELDS = {
    "oauth2": "accessToken",
    "bearer": "token",
}

AUTH_TEST_SCRIPT = (
    "var jsonData = pm.response.json();\n"
    'pm.environment.set("accessToken", jsonData.access_token);\n'
    'pm.environment.set("refreshToken", jsonData.refresh_token);\n'
)


def build_auth_folder() -> Folder:
    """Build the "Auth" folder holding the password-grant token request."""
    token_request = RequestItem(
        name="Get Access Token",
        event=[
            {
                "listen": "test",
                "script": {"type": "text/javascript", "exec": AUTH_TEST_SCRIPT.split("\n")},
            }
        ],
        request=Request(
            method="POST",
            header=[KeyValue(key="Content-Type", value="application/x-www-form-urlencoded")],
            url="{{baseUrl}}/api/v2/auth/token/",
            body={
                "mode": "urlencoded",
                "urlencoded": [
                    {"key": "username", "value": "{{username}}", "type": "text"},
                    {"key": "password", "value": "{{password}}", "type": "text"},
                    {"key": "grant_type", "value": "password", "type": "text"},
                    {"key": "client_id", "value": "{{clientId}}", "type": "text"},
                    {"key": "client_secret", "value": "{{clientSecret}}", "type": "text"},
                ],
            },
        ),
    )
    return Folder(name="Auth", item=[token_request])


def walk_items(items) -> Iterator[Folder | RequestItem]:
    """Yield every folder and request item depth-first, in document order."""
    if not isinstance(items, list):
        return
    for node in items:
        if isinstance(node, (Folder, RequestItem)):
            yield node
        if isinstance(node, Folder):
            yield from walk_items(node.item)


def insert_auth_folder(collection: Collection) -> Collection:
    if not isinstance(collection.item, list):
        collection.item = []
    collection.item.insert(0, build_auth_folder())
    return collection


def _is_authorization_header(header) -> bool:
    return (
        isinstance(header, KeyValue)
        and isinstance(header.key, str)
        and header.key.lower() == "authorization"
    )


def _request_of(node: Folder | RequestItem) -> Request | None:
    return node.request if isinstance(node.request, Request) else None


def strip_authorization_headers(collection: Collection) -> Collection:
    """Remove literal Authorization headers; auth descriptors stay as they are."""
    for node in walk_items(collection.item):
        request = _request_of(node)
        if request is None:
            continue
        headers = request.header
        if isinstance(headers, list):
            request.header = [h for h in headers if not _is_authorization_header(h)]
    return collection


def bind_token_field(auth) -> None:
    """Set the token field of an oauth2/bearer descriptor to ``{{accessToken}}``."""
    if not isinstance(auth, Auth) or not isinstance(auth.type, str):
        return
    field_key = TOKEN_FIELDS.get(auth.type)
    if field_key is None:
        return
    fields = auth.fields_for(auth.type)
    if fields is None:
        return

    for entry in fields:
        if isinstance(entry, KeyValue) and entry.key == field_key:
            entry.value = ACCESS_TOKEN_VARIABLE
            return
    fields.append(KeyValue(key=field_key, value=ACCESS_TOKEN_VARIABLE, type="string"))


def bind_access_token(collection: Collection) -> Collection:
    for node in walk_items(collection.item):
        request = _request_of(node)
        if request is not None:
            bind_token_field(request.auth)
        bind_token_field(node.auth)
    return collection


def remove_base_url_variable(collection: Collection) -> Collection:
    if not isinstance(collection.variable, list):
        return collection
    collection.variable = [
        v for v in collection.variable
        if not (isinstance(v, KeyValue) and v.key == BASE_URL_VARIABLE)
    ]
    return collection


def apply_transforms(collection: Collection) -> Collection:
    """Run all four edits in their fixed order."""
    insert_auth_folder(collection)
    strip_authorization_headers(collection)
    bind_access_token(collection)
    remove_base_url_variable(collection)
    return collection
