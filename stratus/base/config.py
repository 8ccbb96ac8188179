"""
Pydantic configuration models for provider configs.

Validates credentials and endpoint settings when a client is built, so a
bad config fails with :class:`ConfigurationError` before any request is
signed or sent.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from stratus.base.exceptions import ConfigurationError


class EC2Config(BaseModel):
    """Configuration for the EC2 query API.

    Credentials are resolved in order:
    1. Explicit values passed in the config dict.
    2. Environment variables (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY).

    Both are required; the secret key is only ever used to derive request
    signatures.  Instances are frozen for the lifetime of a client.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    aws_access_key_id: str = Field(min_length=1, description="AWS access key ID")
    aws_secret_access_key: str = Field(
        min_length=1, description="AWS secret access key", repr=False
    )
    host: str = Field(default="ec2.amazonaws.com", description="API endpoint host")
    port: int = Field(default=443, gt=0, lt=65536)
    scheme: Literal["http", "https"] = "https"
    api_version: str = Field(default="2009-04-04", description="EC2 API version")
    timeout: float = Field(default=60.0, gt=0, description="Socket timeout in seconds")

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing credentials."""
        env_map = {
            "aws_access_key_id": "AWS_ACCESS_KEY_ID",
            "aws_secret_access_key": "AWS_SECRET_ACCESS_KEY",
        }
        values = dict(values)
        for field, env_var in env_map.items():
            if not values.get(field):
                values[field] = os.environ.get(env_var)
        return values

    @property
    def endpoint(self) -> str:
        """Base URL of the endpoint, e.g. ``https://ec2.amazonaws.com:443``."""
        return f"{self.scheme}://{self.host}:{self.port}"


class GCPConfig(BaseModel):
    """Configuration for GCP services.

    Credentials are resolved in order:
    1. Explicit values passed in the config dict.
    2. Environment variables (GOOGLE_CLOUD_PROJECT, GOOGLE_APPLICATION_CREDENTIALS).
    3. If neither is set, credentials are left as None so the GCP SDK can fall
       back to Application Default Credentials (ADC).
    """

    model_config = ConfigDict(extra="forbid")

    project_id: str | None = Field(default=None, description="GCP project ID")
    credentials: Any | None = Field(default=None, description="GCP credentials object")
    credentials_path: str | None = Field(
        default=None, description="Path to service account JSON key file"
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing config."""
        values = dict(values)
        if not values.get("project_id"):
            values["project_id"] = os.environ.get("GOOGLE_CLOUD_PROJECT") or os.environ.get(
                "GCLOUD_PROJECT"
            )
        if not values.get("credentials_path"):
            values["credentials_path"] = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
        return values

    @model_validator(mode="after")
    def validate_project_and_credentials(self) -> GCPConfig:
        """Ensure project_id is set and load credentials from path if needed."""
        if self.project_id is None:
            raise ValueError(
                "GCP project_id is required. Set it explicitly or via "
                "GOOGLE_CLOUD_PROJECT / GCLOUD_PROJECT environment variable."
            )
        if self.credentials is None and self.credentials_path:
            path = Path(self.credentials_path)
            if not path.exists():
                raise ValueError(f"Credentials file not found: {self.credentials_path}")
            from google.oauth2 import service_account  # lazy import

            self.credentials = service_account.Credentials.from_service_account_file(
                str(path)
            )
        return self


# Map provider names to their config models for dynamic validation
CONFIG_REGISTRY: dict[str, type[BaseModel]] = {
    "aws": EC2Config,
    "gcp": GCPConfig,
}


def validate_config(cloud_provider: str, config: dict | BaseModel) -> BaseModel:
    """Validate and return a typed config model for the given provider.

    Args:
        cloud_provider: The cloud provider name (e.g. 'aws', 'gcp').
        config: Raw configuration dictionary, or an already-validated model.

    Returns:
        A validated Pydantic config model.

    Raises:
        ConfigurationError: If the provider is unknown or the config is invalid.
    """
    model = CONFIG_REGISTRY.get(cloud_provider)
    if model is None:
        raise ConfigurationError(f"No config model registered for provider: {cloud_provider}")
    if isinstance(config, model):
        return config
    try:
        return model(**config)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "config" for err in e.errors())
        raise ConfigurationError(f"Invalid {cloud_provider} config ({fields})") from e


__all__ = [
    "EC2Config",
    "GCPConfig",
    "CONFIG_REGISTRY",
    "validate_config",
]
