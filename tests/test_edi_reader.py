"""Tests for parsing the EDI biomass CSV."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from urchin_timeseries.datasources.edi.client import COLUMN_NAMES
from urchin_timeseries.datasources.edi.reader import format_summary, glimpse, load
from urchin_timeseries.exceptions import ParseError, SchemaMismatch

if TYPE_CHECKING:
    from pathlib import Path

HEADER = ",".join(f'"{name}"' for name in COLUMN_NAMES)


def csv_line(year: int = 2015, site: str = "NAPL", name: str = "Red Urchin", n: int = 24) -> str:
    """One data line with ``n`` fields; the first 24 follow the biomass schema."""
    fields = [
        str(year),
        "6",
        f"{year}-06-10",
        site,
        "1",
        "5.5",
        "MEFR",
        "-99999",
        "0.8",
        "250.1",
        "12.4",
        "0.1",
        "0.05",
        '"Mesocentrotus franciscanus"',
        f'"{name}"',
        "Animalia",
        "Echinoidea",
        "Echinodermata",
        "Camarodonta",
        "Strongylocentrotidae",
        "Mesocentrotus",
        "Invertebrate",
        "MOBILE",
        "SOLITARY",
    ]
    while len(fields) < n:
        fields.append("extra")
    return ",".join(fields[:n])


def write_csv(path: Path, lines: list[str], header: str = HEADER) -> Path:
    path.write_text("\n".join([header, *lines]) + "\n")
    return path


class TestLoad:
    """Parsing, column naming and temp file cleanup."""

    def test_loads_rows_with_named_columns(self, tmp_path: Path) -> None:
        path = write_csv(tmp_path / "dt1.csv", [csv_line(2015), csv_line(2016)])

        df = load(path)

        assert df.shape == (2, 24)
        assert list(df.columns) == list(COLUMN_NAMES)
        assert df["YEAR"].tolist() == [2015, 2016]
        assert df["DRY_GM2"].tolist() == [12.4, 12.4]

    def test_row_count_not_fixed(self, tmp_path: Path) -> None:
        path = write_csv(tmp_path / "dt1.csv", [csv_line(2008 + i) for i in range(7)])
        assert len(load(path)) == 7

    def test_header_line_skipped(self, tmp_path: Path) -> None:
        path = write_csv(tmp_path / "dt1.csv", [csv_line()], header="totally,different,header")
        df = load(path)
        assert len(df) == 1
        assert df.loc[0, "SITE"] == "NAPL"

    def test_quoted_field_with_comma(self, tmp_path: Path) -> None:
        path = write_csv(tmp_path / "dt1.csv", [csv_line(name="urchin, red")])
        df = load(path)
        assert df.loc[0, "COMMON_NAME"] == "urchin, red"

    def test_deletes_file_on_success(self, tmp_path: Path) -> None:
        path = write_csv(tmp_path / "dt1.csv", [csv_line()])
        load(path)
        assert not path.exists()

    def test_too_few_columns(self, tmp_path: Path) -> None:
        path = write_csv(tmp_path / "dt1.csv", [csv_line(n=23), csv_line(n=23)])

        with pytest.raises(SchemaMismatch, match="Expected 24 columns, found 23") as exc_info:
            load(path)

        assert exc_info.value.missing == ["GROWTH_MORPH"]
        assert not path.exists()

    def test_ragged_rows(self, tmp_path: Path) -> None:
        path = write_csv(tmp_path / "dt1.csv", [csv_line(), csv_line(n=26)])

        with pytest.raises(ParseError, match="Malformed CSV"):
            load(path)
        assert not path.exists()

    def test_short_row_after_full_row(self, tmp_path: Path) -> None:
        path = write_csv(tmp_path / "dt1.csv", [csv_line(2015), csv_line(2016, n=20)])

        with pytest.raises(ParseError, match="line 3 has 20 fields, expected 24"):
            load(path)
        assert not path.exists()

    def test_truncated_last_line(self, tmp_path: Path) -> None:
        truncated = csv_line(2016)[:40]
        path = write_csv(tmp_path / "dt1.csv", [csv_line(2015), csv_line(2015), truncated])

        with pytest.raises(ParseError, match="Malformed CSV"):
            load(path)

    def test_empty_fields_are_not_ragged(self, tmp_path: Path) -> None:
        blank_site = csv_line(2015).replace(",NAPL,", ",,")
        path = write_csv(tmp_path / "dt1.csv", [csv_line(2015), blank_site])

        df = load(path)
        assert df.shape == (2, 24)

    def test_header_only(self, tmp_path: Path) -> None:
        path = write_csv(tmp_path / "dt1.csv", [])
        with pytest.raises(ParseError):
            load(path)
        assert not path.exists()

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "dt1.csv"
        path.write_bytes(b"")
        with pytest.raises(ParseError):
            load(path)
        assert not path.exists()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load(tmp_path / "never-downloaded.csv")

    def test_custom_column_names(self, tmp_path: Path) -> None:
        path = tmp_path / "small.csv"
        path.write_text("a,b\n1,x\n2,y\n")
        df = load(path, column_names=["NUM", "LETTER"])
        assert list(df.columns) == ["NUM", "LETTER"]
        assert df["LETTER"].tolist() == ["x", "y"]


class TestGlimpse:
    """First-look summaries."""

    def test_summary_shape(self, tmp_path: Path) -> None:
        df = load(write_csv(tmp_path / "dt1.csv", [csv_line(2015), csv_line(2016)]))
        summary = glimpse(df)

        assert summary.rows == 2
        assert summary.column_count == 24
        year = summary.columns[0]
        assert year.name == "YEAR"
        assert year.dtype == "int64"
        assert year.samples == ["2015", "2016"]

    def test_sample_limit(self, tmp_path: Path) -> None:
        df = load(write_csv(tmp_path / "dt1.csv", [csv_line(2008 + i) for i in range(5)]))
        assert len(glimpse(df, samples=2).columns[0].samples) == 2

    def test_format_summary(self, tmp_path: Path) -> None:
        df = load(write_csv(tmp_path / "dt1.csv", [csv_line()]))
        text = format_summary(glimpse(df))

        assert "Rows: 1" in text
        assert "Columns: 24" in text
        assert "$ YEAR" in text
        assert "<int64>" in text
