"""Tests for the refueling and employee directory loaders."""

import logging
import math

import pandas as pd
import pytest

from abastecimentos_dashboard.config import REFUELING_COLUMNS
from abastecimentos_dashboard.loaders import (
    civil_day_key,
    load_employees,
    load_refuelings,
    parse_employees,
    parse_refuelings,
)
from abastecimentos_dashboard.loaders import refuelings as refuelings_module


class TestParseRefuelingsPositional:
    def test_thirteen_column_layout(self, positional_csv, fixed_now):
        df = parse_refuelings(positional_csv, now=fixed_now)
        assert len(df) == 2
        first = df.iloc[0]
        assert first["card_id"] == "CARD7"
        assert first["raw_time_of_day"] == "08:15:00"
        assert first["nozzle"] == "B01"
        assert first["amount"] == pytest.approx(10.0)
        assert first["volume"] == pytest.approx(5.0)
        assert first["owner_id"] == "1"
        assert civil_day_key(first["timestamp"]) == "2024-12-05"
        assert not first["date_defaulted"]

    def test_schema(self, positional_csv):
        df = parse_refuelings(positional_csv)
        assert list(df.columns) == REFUELING_COLUMNS
        assert str(df["timestamp"].dt.tz) == "UTC"

    def test_ids_are_unique(self, positional_csv):
        df = parse_refuelings(positional_csv)
        assert df["id"].is_unique

    def test_reparsing_is_idempotent_apart_from_id(self, positional_csv, fixed_now):
        first = parse_refuelings(positional_csv, now=fixed_now).drop(columns="id")
        second = parse_refuelings(positional_csv, now=fixed_now).drop(columns="id")
        pd.testing.assert_frame_equal(first, second)

    def test_owner_id(self, positional_csv):
        df = parse_refuelings(positional_csv, owner_id="42")
        assert set(df["owner_id"]) == {"42"}


class TestParseRefuelingsByHeader:
    def test_alternative_header_names(self, fixed_now):
        text = "data_hora;frentista;id_bico;total;quantidade\n2024-12-05 10:30;F1;B02;50,00;10,5\n"
        df = parse_refuelings(text, now=fixed_now)
        row = df.iloc[0]
        assert row["card_id"] == "F1"
        assert row["nozzle"] == "B02"
        assert row["amount"] == pytest.approx(50.0)
        assert row["volume"] == pytest.approx(10.5)
        assert row["raw_time_of_day"] is None
        assert row["timestamp"] == pd.Timestamp("2024-12-05 13:30", tz="UTC")

    def test_defaults_when_columns_missing(self, fixed_now):
        df = parse_refuelings("data,valor\n05/12/2024,10\n", now=fixed_now)
        row = df.iloc[0]
        assert row["card_id"] == "N/A"
        assert row["nozzle"] == "B?"
        assert math.isnan(row["volume"])

    def test_missing_date_is_flagged(self, fixed_now):
        df = parse_refuelings("valor,litros\n10,5\n", now=fixed_now)
        assert df.iloc[0]["timestamp"] == fixed_now
        assert df.iloc[0]["date_defaulted"]

    def test_first_non_empty_header_wins(self):
        df = parse_refuelings("data,valor,total\n05/12/2024,,25\n")
        assert df.iloc[0]["amount"] == pytest.approx(25.0)

    def test_duplicate_header_rightmost_wins(self):
        df = parse_refuelings("data,valor,valor\n05/12/2024,1,2\n")
        assert df.iloc[0]["amount"] == pytest.approx(2.0)

    def test_empty_cells_count_as_zero(self):
        df = parse_refuelings("data,valor,litros\n05/12/2024,,\n")
        assert len(df) == 1
        assert df.iloc[0]["amount"] == 0.0
        assert df.iloc[0]["volume"] == 0.0


class TestDropRule:
    def test_both_invalid_dropped(self):
        text = "data,valor,litros\n05/12/2024,abc,xyz\n06/12/2024,10,5\n"
        df = parse_refuelings(text)
        assert len(df) == 1
        assert df.iloc[0]["amount"] == pytest.approx(10.0)

    def test_valid_amount_invalid_volume_kept(self):
        df = parse_refuelings("data,valor,litros\n05/12/2024,10,xyz\n")
        assert len(df) == 1
        assert math.isnan(df.iloc[0]["volume"])

    def test_valid_volume_invalid_amount_kept(self):
        df = parse_refuelings("data,valor,litros\n05/12/2024,abc,5\n")
        assert len(df) == 1
        assert math.isnan(df.iloc[0]["amount"])

    def test_infinite_amount_is_invalid(self):
        df = parse_refuelings("data,valor,litros\n05/12/2024,inf,5\n05/12/2024,10,5\n06/12/2024,nan,infinity\n")
        assert len(df) == 2
        assert math.isnan(df.iloc[0]["amount"])
        assert df["amount"].sum() == pytest.approx(10.0)
        assert df["volume"].sum() == pytest.approx(10.0)

    def test_no_numeric_columns_dropped(self):
        df = parse_refuelings("data,bico\n05/12/2024,B1\n")
        assert df.empty


class TestParseRefuelingsFailures:
    def test_header_only_returns_empty_frame(self):
        df = parse_refuelings("data,valor,litros\n")
        assert df.empty
        assert list(df.columns) == REFUELING_COLUMNS

    def test_failing_row_is_skipped(self, monkeypatch, caplog):
        original = refuelings_module.resolve_refueling

        def flaky(values, row, **kwargs):
            if values[0] == "boom":
                raise RuntimeError("bad row")
            return original(values, row, **kwargs)

        monkeypatch.setattr(refuelings_module, "resolve_refueling", flaky)
        text = "bico,valor,litros\nB1,10,5\nboom,1,1\nB2,20,4\n"

        with caplog.at_level(logging.WARNING):
            df = parse_refuelings(text)

        assert df["nozzle"].tolist() == ["B1", "B2"]
        assert "Skipping refueling data row 2" in caplog.text

    def test_load_from_disk(self, tmp_path, positional_csv):
        path = tmp_path / "abastecimentos.csv"
        path.write_text(positional_csv, encoding="utf-8")
        assert len(load_refuelings(str(path))) == 2

    def test_load_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            load_refuelings(str(tmp_path / "missing.csv"))


class TestParseEmployees:
    def test_one_entry_per_card(self):
        text = (
            "nome;matricula;cartao_1;cartao_2;cartao_3\n"
            "Ana;1;X1;X2;\n"
            "Carla;4;;Y1;Y2\n"
        )
        df = parse_employees(text)
        assert df.to_dict(orient="records") == [
            {"card_id": "X1", "display_name": "Ana"},
            {"card_id": "X2", "display_name": "Ana"},
            {"card_id": "Y1", "display_name": "Carla"},
            {"card_id": "Y2", "display_name": "Carla"},
        ]

    def test_rows_without_card_or_name_dropped(self):
        text = (
            "nome;matricula;cartao_1;cartao_2;cartao_3\n"
            "Bruno;2;;;\n"
            ";3;X9;;\n"
            "Dani;5;Z1\n"
        )
        df = parse_employees(text)
        assert df.to_dict(orient="records") == [{"card_id": "Z1", "display_name": "Dani"}]

    def test_empty_file(self):
        df = parse_employees("")
        assert df.empty
        assert list(df.columns) == ["card_id", "display_name"]

    def test_load_from_disk(self, tmp_path):
        path = tmp_path / "frentistas.csv"
        path.write_text("nome,mat,c1,c2,c3\nAna,1,X1,,\n", encoding="utf-8")
        assert load_employees(str(path))["card_id"].tolist() == ["X1"]
