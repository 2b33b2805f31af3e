"""The publish pipeline: load, convert, transform, publish."""

from pathlib import Path

import click

from postman_publisher.collection.models import Collection
from postman_publisher.collection.transform import apply_transforms
from postman_publisher.config import Settings
from postman_publisher.converter.base import ConvertOptions
from postman_publisher.converter.openapi import convert_spec
from postman_publisher.publish.client import PostmanClient
from postman_publisher.publish.publisher import (
    publish,
    stamp_collection_name,
    today_utc,
    write_collection,
)
from postman_publisher.spec.loader import load_spec_text


def build_collection(spec_source: str, options: ConvertOptions | None = None) -> Collection:
    """Load and convert the spec, then apply the post-processing edits."""
    click.echo(f"Loading spec from {spec_source}...")
    spec_text = load_spec_text(spec_source)

    collection = Collection.from_dict(convert_spec(spec_text, options))
    return apply_transforms(collection)


def run(settings: Settings, client: PostmanClient | None = None) -> str | None:
    """Full pipeline. Returns the upload response body, or None if skipped."""
    collection = build_collection(settings.spec_source)
    return publish(collection, settings, client=client)


def write_only(spec_source: str, output: Path, product: str, options: ConvertOptions | None = None) -> Path:
    """Convert and transform, then write the file without uploading."""
    collection = build_collection(spec_source, options)
    stamp_collection_name(collection, product, today_utc())
    write_collection(collection, output)
    click.echo(f"Wrote {output}")
    return output
