"""Name, write and upload the finished collection."""

import json
from datetime import date, datetime, timezone
from pathlib import Path

import click

from postman_publisher.collection.models import Collection, Info
from postman_publisher.config import Settings
from postman_publisher.errors import OutputWriteError

from .client import PostmanClient


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def collection_name(product: str, today: date) -> str:
    return f"{product} API {today.isoformat()}"


def stamp_collection_name(collection: Collection, product: str, today: date) -> Collection:
    """Set ``info.name`` to the dated display name, creating ``info`` if needed."""
    if not isinstance(collection.info, Info):
        collection.info = Info()
    collection.info.name = collection_name(product, today)
    return collection


def write_collection(collection: Collection, path: Path) -> Path:
    """Write the collection as pretty-printed JSON, replacing any existing file."""
    text = json.dumps(collection.to_dict(), indent=2, ensure_ascii=False)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(str(path), e.strerror or str(e)) from e
    return path


def read_upload_payload(path: Path) -> dict:
    """Wrap the collection exactly as it was written to disk."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(str(path), e.strerror or str(e)) from e
    return {"collection": json.loads(text)}


def publish(
    collection: Collection,
    settings: Settings,
    client: PostmanClient | None = None,
    today: date | None = None,
) -> str | None:
    """Write the collection and, if an API key is configured, upload it.

    Returns the upload response body, or None when the upload was skipped.
    """
    stamp_collection_name(collection, settings.product, today or today_utc())

    output = write_collection(collection, Path(settings.output_file))
    click.echo(f"Wrote {output}")

    if not settings.upload:
        click.echo("Upload disabled, skipping upload.", err=True)
        return None
    if not settings.upload_enabled:
        click.echo("Warning: POSTMAN_API_KEY not set, skipping upload.", err=True)
        return None

    payload = read_upload_payload(output)
    if client is None:
        with PostmanClient(settings.api_key, settings.api_base) as own_client:
            body = own_client.create_collection(payload, settings.workspace_id)
    else:
        body = client.create_collection(payload, settings.workspace_id)

    click.echo(f"Collection created: {body}")
    return body
