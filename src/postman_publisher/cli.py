"""CLI entry point for postman-publisher."""

import os
import sys
from pathlib import Path

import click

from postman_publisher import pipeline
from postman_publisher.config import DEFAULT_ENV_FILE, DEFAULT_PRODUCT, Settings, load_env_file
from postman_publisher.converter.base import ConvertOptions
from postman_publisher.errors import PublisherError


def _fail(exc: PublisherError) -> None:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(exc.exit_code)


@click.group()
def main():
    """Postman Publisher: convert an OpenAPI spec into a Postman collection and publish it."""
    pass


@main.command()
@click.option("--spec", "spec_source", default=None, help="Spec path or URL. [env: SPEC_URL]")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output collection file. [env: OUTPUT_FILE]")
@click.option("--product", default=None, help="Product name used in the collection name. [env: PRODUCT_NAME]")
@click.option("--workspace", "workspace_id", default=None, help="Postman workspace ID. [env: POSTMAN_WORKSPACE_ID]")
@click.option("--env-file", default=DEFAULT_ENV_FILE, type=click.Path(path_type=Path), help="Dotenv file loaded before reading the environment.")
@click.option("--skip-upload", is_flag=True, help="Write the collection but do not upload it.")
def build(
    spec_source: str | None,
    output: Path | None,
    product: str | None,
    workspace_id: str | None,
    env_file: Path,
    skip_upload: bool,
):
    """Full pipeline: load spec -> convert -> transform -> write -> upload."""
    load_env_file(env_file)
    settings = Settings.from_env(
        os.environ,
        spec_source=spec_source,
        output_file=output,
        product=product,
        workspace_id=workspace_id,
    )
    if skip_upload:
        settings = settings.model_copy(update={"upload": False})

    try:
        pipeline.run(settings)
    except PublisherError as e:
        _fail(e)


@main.command()
@click.argument("spec_source")
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output collection file.")
@click.option("--product", default=DEFAULT_PRODUCT, help="Product name used in the collection name.")
@click.option("--folders", "folder_strategy", default="Tags", type=click.Choice(["Tags", "Paths"]), help="Group requests by tag or keep them flat.")
def convert(spec_source: str, output: Path, product: str, folder_strategy: str):
    """Convert and transform a spec into a collection file without uploading."""
    try:
        pipeline.write_only(spec_source, output, product, ConvertOptions(folder_strategy=folder_strategy))
    except PublisherError as e:
        _fail(e)
