# tariff_engine/batch/rate.py
"""
Batch-rate a portfolio of questionnaires (one per row) with the CTN tariff.

What it does:
- Reads a source file (CSV or Parquet), one questionnaire per row
- Rates each row independently through the same pipeline as the API
- Writes the rated file (input columns + result columns) to data/rated/
- Writes a run manifest JSON to reports/ (row counts, valid/invalid, totals, hash)
- Optionally uploads the rated file + manifest to S3 (if S3_BUCKET is set)

Usage:
  python -m tariff_engine.batch.rate --in_path data/portfolio.csv

Optional:
  python -m tariff_engine.batch.rate --in_path data/portfolio.csv \
    --out_path data/rated/portfolio_rated.csv \
    --manifest_path reports/rating_manifest.json \
    --upload_s3

Env (optional for S3):
  AWS_REGION=eu-west-3
  S3_BUCKET=your-bucket
  S3_PREFIX=ctn-tariff-engine
"""

from __future__ import annotations

import argparse
import time
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from tariff_engine.intake.runtime import build_questionnaire_from_raw
from tariff_engine.pricing.config import TariffConfig
from tariff_engine.pricing.quote import calculate
from tariff_engine.utils.config import get_aws_config, get_paths
from tariff_engine.utils.io import read_df, s3_upload_file, sha256_file, write_df, write_json

RESULT_COLUMNS = [
    "valid",
    "premium_excluding_tax",
    "premium_including_tax",
    "commission_rate_percent",
    "commission_amount",
    "messages",
    "input_warnings",
]


@dataclass
class RatingManifest:
    source_path: str
    rated_path: str
    created_utc: str
    currency: str
    rows: int
    valid_rows: int
    invalid_rows: int
    rows_with_advisories: int
    total_premium_excluding_tax: Decimal
    total_premium_including_tax: Decimal
    total_commission: Decimal
    sha256: str
    notes: list[str]


def _utc_now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


def _default_out_path(in_path: Path) -> Path:
    paths = get_paths()
    return paths.rated_dir / f"{in_path.stem}_rated{in_path.suffix.lower()}"


def _default_manifest_path() -> Path:
    paths = get_paths()
    return paths.reports_dir / "rating_manifest.json"


def rate_dataframe(
    df: pd.DataFrame, cfg: Optional[TariffConfig] = None
) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """
    Rate every row of df. Returns (rated_df, totals).

    Rows are independent; an invalid row gets valid=False and zero amounts,
    it never stops the run.
    """
    cfg = cfg or TariffConfig()
    out_rows: List[Dict[str, Any]] = []
    totals: Dict[str, Any] = {
        "valid_rows": 0,
        "invalid_rows": 0,
        "rows_with_advisories": 0,
        "premium_ht": Decimal("0"),
        "premium_ttc": Decimal("0"),
        "commission": Decimal("0"),
    }

    for record in df.to_dict(orient="records"):
        built = build_questionnaire_from_raw(record)
        result = calculate(built.questionnaire, cfg)

        if result.valid:
            totals["valid_rows"] += 1
            totals["premium_ht"] += result.premium_excluding_tax
            totals["premium_ttc"] += result.premium_including_tax
            totals["commission"] += result.commission_amount
            if result.advisories:
                totals["rows_with_advisories"] += 1
        else:
            totals["invalid_rows"] += 1

        out_rows.append(
            {
                "valid": result.valid,
                "premium_excluding_tax": float(result.premium_excluding_tax),
                "premium_including_tax": float(result.premium_including_tax),
                "commission_rate_percent": result.commission_rate_percent,
                "commission_amount": float(result.commission_amount),
                "messages": " | ".join(result.message_texts),
                "input_warnings": " | ".join(built.warnings),
            }
        )

    results = pd.DataFrame(out_rows, columns=RESULT_COLUMNS, index=df.index)
    rated = pd.concat([df.drop(columns=[c for c in RESULT_COLUMNS if c in df.columns]), results], axis=1)
    return rated, totals


def build_manifest(
    source_path: Path,
    rated_path: Path,
    rows: int,
    totals: Dict[str, Any],
    sha: str,
    currency: str,
    notes: Optional[list[str]] = None,
) -> RatingManifest:
    return RatingManifest(
        source_path=str(source_path),
        rated_path=str(rated_path),
        created_utc=_utc_now_iso(),
        currency=currency,
        rows=int(rows),
        valid_rows=int(totals["valid_rows"]),
        invalid_rows=int(totals["invalid_rows"]),
        rows_with_advisories=int(totals["rows_with_advisories"]),
        total_premium_excluding_tax=totals["premium_ht"],
        total_premium_including_tax=totals["premium_ttc"],
        total_commission=totals["commission"],
        sha256=sha,
        notes=notes or [],
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Batch-rate questionnaires with the CTN tariff.")
    p.add_argument("--in_path", type=str, required=True, help="Input CSV or Parquet (one questionnaire per row).")
    p.add_argument("--out_path", type=str, default=None, help="Rated output path (default: data/rated/<stem>_rated.<ext>).")
    p.add_argument("--manifest_path", type=str, default=None, help="Manifest JSON path (default: reports/rating_manifest.json).")
    p.add_argument("--upload_s3", action="store_true", help="Upload rated file + manifest to S3 (requires S3_BUCKET).")
    return p.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> RatingManifest:
    args = parse_args(argv)
    aws = get_aws_config()
    cfg = TariffConfig()

    in_path = Path(args.in_path)
    out_path = Path(args.out_path) if args.out_path else _default_out_path(in_path)
    manifest_path = Path(args.manifest_path) if args.manifest_path else _default_manifest_path()

    if args.upload_s3 and not aws.enabled:
        raise RuntimeError("S3 upload requested but S3_BUCKET is not set in environment.")

    df = read_df(in_path, as_text=True)

    notes: list[str] = []
    if df.empty:
        notes.append("WARNING: Input dataframe is empty.")

    rated, totals = rate_dataframe(df, cfg)
    write_df(rated, out_path)

    manifest = build_manifest(
        source_path=in_path,
        rated_path=out_path,
        rows=len(rated),
        totals=totals,
        sha=sha256_file(out_path),
        currency=cfg.currency,
        notes=notes,
    )
    write_json(manifest, manifest_path)

    print(f"[OK] Rated source         : {in_path}")
    print(f"[OK] Rated file saved     : {out_path}")
    print(f"[OK] Manifest saved       : {manifest_path}")
    print(
        f"Rows: {manifest.rows} | Valid: {manifest.valid_rows} | Invalid: {manifest.invalid_rows} | "
        f"Premium HT: {manifest.total_premium_excluding_tax} {manifest.currency}"
    )

    if args.upload_s3:
        bucket = aws.s3_bucket  # type: ignore[assignment]
        prefix = aws.s3_prefix.rstrip("/")

        # s3://<bucket>/<prefix>/rated/<filename>
        # s3://<bucket>/<prefix>/manifests/<manifest filename>
        rated_key = f"{prefix}/rated/{out_path.name}"
        manifest_key = f"{prefix}/manifests/{manifest_path.name}"

        s3_upload_file(out_path, bucket=bucket, key=rated_key, region=aws.region)
        s3_upload_file(manifest_path, bucket=bucket, key=manifest_key, region=aws.region)

        print(f"[OK] Uploaded rated to S3 : s3://{bucket}/{rated_key}")
        print(f"[OK] Uploaded manifest    : s3://{bucket}/{manifest_key}")

    return manifest


if __name__ == "__main__":
    main()
