import json
from decimal import Decimal

import pandas as pd
import pytest

from tariff_engine.batch.rate import main, rate_dataframe
from tariff_engine.utils.io import read_df


def _portfolio() -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"employee_count": 50, "sector_code": "D", "guarantee_amount": 20000, "coverage_type": "full", "had_severe_prior_disability": False},
            {"employee_count": 1000, "sector_code": "B", "guarantee_amount": 200000, "coverage_type": "full", "had_severe_prior_disability": True},
            {"employee_count": 5, "sector_code": "G", "guarantee_amount": 150000, "coverage_type": "full", "had_severe_prior_disability": False},
            {"employee_count": 0, "sector_code": "Z", "guarantee_amount": 20000, "coverage_type": "full", "had_severe_prior_disability": False},
        ]
    )


def test_rate_dataframe_rates_rows_independently():
    rated, totals = rate_dataframe(_portfolio())

    assert list(rated["valid"]) == [True, True, True, False]
    assert list(rated["premium_excluding_tax"]) == [50.0, 1732.64, 50.0, 0.0]
    assert rated.loc[3, "messages"] == "employee count must be > 0 | invalid or missing sector code"
    assert totals["valid_rows"] == 3
    assert totals["invalid_rows"] == 1
    assert totals["rows_with_advisories"] == 1
    assert str(totals["premium_ht"]) == "1832.64"


def test_main_writes_rated_file_and_manifest(tmp_path, capsys):
    in_path = tmp_path / "portfolio.csv"
    _portfolio().to_csv(in_path, index=False)
    out_path = tmp_path / "out" / "rated.csv"
    manifest_path = tmp_path / "reports" / "manifest.json"

    manifest = main(["--in_path", str(in_path), "--out_path", str(out_path), "--manifest_path", str(manifest_path)])

    assert out_path.exists()
    assert manifest.rows == 4
    assert manifest.valid_rows == 3
    saved = json.loads(manifest_path.read_text(encoding="utf-8"))
    assert saved["total_premium_excluding_tax"] == "1832.64"
    assert saved["currency"] == "EUR"
    assert "[OK] Rated file saved" in capsys.readouterr().out


def test_upload_without_bucket_fails(tmp_path, monkeypatch):
    monkeypatch.delenv("S3_BUCKET", raising=False)
    in_path = tmp_path / "portfolio.csv"
    _portfolio().to_csv(in_path, index=False)
    with pytest.raises(RuntimeError):
        main(["--in_path", str(in_path), "--upload_s3"])


def test_missing_input_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        main(["--in_path", str(tmp_path / "nope.csv"), "--out_path", str(tmp_path / "o.csv"), "--manifest_path", str(tmp_path / "m.json")])


def test_manifest_totals_are_decimal_and_round_trip(tmp_path):
    in_path = tmp_path / "portfolio.csv"
    _portfolio().to_csv(in_path, index=False)
    manifest_path = tmp_path / "manifest.json"

    manifest = main(["--in_path", str(in_path), "--out_path", str(tmp_path / "rated.csv"), "--manifest_path", str(manifest_path)])

    assert manifest.total_premium_excluding_tax == Decimal("1832.64")
    assert isinstance(manifest.total_commission, Decimal)
    saved = json.loads(manifest_path.read_text(encoding="utf-8"))
    assert Decimal(saved["total_premium_excluding_tax"]) == manifest.total_premium_excluding_tax
    assert Decimal(saved["total_premium_including_tax"]) == manifest.total_premium_including_tax
    assert Decimal(saved["total_commission"]) == manifest.total_commission


def test_portfolio_csv_is_read_as_text(tmp_path):
    in_path = tmp_path / "form_export.csv"
    in_path.write_text(
        "employees_count,ctn_code,guarantee_amount,ipp_type,had_ip_gt_10_last_4y\n"
        " 50 ,d,20000,IP3 & IP4,non\n"
        ",D,20000,full,\n",
        encoding="utf-8",
    )

    df = read_df(in_path, as_text=True)
    assert df.loc[0, "guarantee_amount"] == "20000"
    assert df.loc[0, "employees_count"] == " 50 "
    assert pd.isna(df.loc[1, "employees_count"])

    rated, totals = rate_dataframe(df)
    assert list(rated["valid"]) == [True, False]
    assert rated.loc[0, "premium_excluding_tax"] == 50.0
    assert rated.loc[0, "input_warnings"] == ""
    assert rated.loc[1, "messages"] == "employee count must be > 0"
    assert totals["valid_rows"] == 1
