# tariff_engine/utils/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(key)
    return v if v is not None and v != "" else default


def _env_bool(key: str, default: bool) -> bool:
    v = _env(key)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ProjectPaths:
    root: Path
    data_dir: Path
    rated_dir: Path
    reports_dir: Path


def get_project_root() -> Path:
    """
    Resolve repo root robustly.
    Assumes this file lives at: <root>/tariff_engine/utils/config.py
    """
    return Path(__file__).resolve().parents[2]


def get_paths() -> ProjectPaths:
    root = get_project_root()
    data_dir = root / "data"
    return ProjectPaths(
        root=root,
        data_dir=data_dir,
        rated_dir=data_dir / "rated",
        reports_dir=root / "reports",
    )


@dataclass(frozen=True)
class AwsConfig:
    region: str
    s3_bucket: Optional[str]
    s3_prefix: str

    @property
    def enabled(self) -> bool:
        return self.s3_bucket is not None


def get_aws_config() -> AwsConfig:
    """
    Configure S3 usage via environment variables.
    Keep it optional so local runs are frictionless.

    Env:
      AWS_REGION (default: eu-west-3)
      S3_BUCKET  (optional)
      S3_PREFIX  (default: ctn-tariff-engine)
    """
    return AwsConfig(
        region=_env("AWS_REGION", "eu-west-3") or "eu-west-3",
        s3_bucket=_env("S3_BUCKET", None),
        s3_prefix=_env("S3_PREFIX", "ctn-tariff-engine") or "ctn-tariff-engine",
    )


@dataclass(frozen=True)
class ServiceConfig:
    include_breakdown: bool


def get_service_config() -> ServiceConfig:
    """
    Env:
      TARIFF_INCLUDE_BREAKDOWN (default: true) - return the audit breakdown in responses
    """
    return ServiceConfig(include_breakdown=_env_bool("TARIFF_INCLUDE_BREAKDOWN", True))
