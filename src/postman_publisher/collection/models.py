"""Postman Collection v2.1 document models.

The converter hands over a plain dict; these models give it a typed shape
(folder vs. request item, auth descriptors, key/value entries) while keeping
every unknown key. Values that do not fit the expected shape are kept as raw
data (the ``Any`` arm of each lenient union) so a slightly different tree
never fails validation; the transforms simply skip them.
"""

from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Field

SCHEMA_V21 = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"


class _Node(BaseModel):
    model_config = ConfigDict(extra="allow")


class KeyValue(_Node):
    """A header, variable, body field or auth field entry."""

    key: Any = None
    value: Any = None
    type: Any = None


Entry = Annotated[Union[KeyValue, Any], Field(union_mode="left_to_right")]
EntryList = Annotated[Union[list[Entry], Any], Field(union_mode="left_to_right")]


class Auth(_Node):
    """Auth descriptor: ``type`` selects which field list applies."""

    type: Any = None
    oauth2: EntryList = None
    bearer: EntryList = None

    def fields_for(self, kind: str) -> list | None:
        """Return the field list for ``kind`` if it is present as a list."""
        fields = getattr(self, kind, None)
        return fields if isinstance(fields, list) else None


AuthField = Annotated[Union[Auth, Any], Field(union_mode="left_to_right")]


class Request(_Node):
    method: Any = None
    url: Any = None
    header: EntryList = None
    body: Any = None
    auth: AuthField = None


RequestField = Annotated[Union[Request, Any], Field(union_mode="left_to_right")]


class RequestItem(_Node):
    """A leaf item wrapping a single request."""

    name: Any = None
    request: Request
    auth: AuthField = None
    event: Any = None


class Folder(_Node):
    """A folder item holding an ordered list of child items.

    A node carrying both ``item`` and ``request`` is a folder whose request
    is still edited by the transforms.
    """

    name: Any = None
    item: list["Node"]
    request: RequestField = None
    auth: AuthField = None


Node = Annotated[Union[Folder, RequestItem, Any], Field(union_mode="left_to_right")]
NodeList = Annotated[Union[list[Node], Any], Field(union_mode="left_to_right")]


class Info(_Node):
    name: Any = None


InfoField = Annotated[Union[Info, Any], Field(union_mode="left_to_right")]


class Collection(_Node):
    """Root of a collection document."""

    info: InfoField = None
    item: NodeList = None
    variable: EntryList = None

    @classmethod
    def from_dict(cls, data: dict) -> "Collection":
        return cls.model_validate(data)

    def to_dict(self) -> dict:
        # only keys read from the input or assigned since; explicit nulls survive
        return self.model_dump(mode="json", exclude_unset=True)


Folder.model_rebuild()
Collection.model_rebuild()
