"""boto3 session construction.

Credentials resolve in this order: the configured profile (or
AWS_DEFAULT_PROFILE), then boto3's default chain of environment variables,
shared files and container/instance role providers.
"""

import os
from collections.abc import Mapping

import boto3
from botocore.exceptions import BotoCoreError

from ecsploy.config import AwsConfig
from ecsploy.domain.shared.error import ConfigurationError


def _setting(value: str, key: str, environ: Mapping[str, str]) -> str | None:
    return value or environ.get(key) or None


def create_session(config: AwsConfig, environ: Mapping[str, str] | None = None) -> boto3.Session:
    """Build a boto3 session from config, falling back to AWS_DEFAULT_* vars."""
    environ = os.environ if environ is None else environ
    session_kwargs = {}
    profile = _setting(config.profile, "AWS_DEFAULT_PROFILE", environ)
    if profile:
        session_kwargs["profile_name"] = profile
    region = _setting(config.region, "AWS_DEFAULT_REGION", environ)
    if region:
        session_kwargs["region_name"] = region

    try:
        return boto3.Session(**session_kwargs)
    except BotoCoreError as e:
        raise ConfigurationError(f"Cannot create AWS session: {e}") from e
