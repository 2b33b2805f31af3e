"""Run configuration.

Settings are resolved once by the CLI (option > environment > dotenv file >
default) and passed explicitly to every stage of the pipeline.
"""

from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, model_validator

DEFAULT_SPEC_SOURCE = "./openapi.json"
DEFAULT_PRODUCT = "Polly"
DEFAULT_WORKSPACE_ID = "ca4b69c0-6e8f-4566-8561-075f5d7d6a7b"
DEFAULT_API_BASE = "https://api.getpostman.com"
DEFAULT_ENV_FILE = "./env.local"

# setting name -> environment variable
ENV_VARS = {
    "spec_source": "SPEC_URL",
    "product": "PRODUCT_NAME",
    "output_file": "OUTPUT_FILE",
    "workspace_id": "POSTMAN_WORKSPACE_ID",
    "api_key": "POSTMAN_API_KEY",
    "api_base": "POSTMAN_API_BASE",
}


class Settings(BaseModel):
    """Effective configuration for one run."""

    spec_source: str = DEFAULT_SPEC_SOURCE
    product: str = DEFAULT_PRODUCT
    output_file: Path | None = None
    workspace_id: str = DEFAULT_WORKSPACE_ID
    api_key: str | None = None
    api_base: str = DEFAULT_API_BASE
    upload: bool = True

    @model_validator(mode="after")
    def _default_output_file(self) -> "Settings":
        if self.output_file is None:
            self.output_file = Path(f"./{self.product}.postman_collection.json")
        return self

    @property
    def upload_enabled(self) -> bool:
        return self.upload and bool(self.api_key)

    @classmethod
    def from_env(cls, environ: Mapping[str, str], **overrides) -> "Settings":
        """Build settings from an environment mapping plus explicit overrides.

        Empty strings and ``None`` overrides count as unset.
        """
        values = {}
        for field, var in ENV_VARS.items():
            value = environ.get(var)
            if value:
                values[field] = value
        for field, value in overrides.items():
            if value not in (None, ""):
                values[field] = value
        return cls(**values)


def load_env_file(path: str | Path = DEFAULT_ENV_FILE) -> bool:
    """Load a dotenv file into the process environment without overriding it.

    Returns True if the file existed and was loaded.
    """
    env_path = Path(path)
    if not env_path.is_file():
        return False
    return load_dotenv(env_path, override=False)
