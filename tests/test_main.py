"""Smoke tests for the main.py pipeline."""

import main


class TestMainPipeline:
    def test_reads_exports_from_disk(self, tmp_path, monkeypatch, capsys, positional_csv):
        refuelings_file = tmp_path / "abastecimentos.csv"
        employees_file = tmp_path / "frentistas.csv"
        refuelings_file.write_text(positional_csv, encoding="utf-8")
        employees_file.write_text("nome,matricula,c1,c2,c3\nJoão,1,CARD7,,\n", encoding="utf-8")
        monkeypatch.setattr(main, "REFUELINGS_FILE", refuelings_file)
        monkeypatch.setattr(main, "EMPLOYEES_FILE", employees_file)

        main.main()

        out = capsys.readouterr().out
        assert "Refuelings: 2 rows imported" in out
        assert "Directory: 1 cards" in out
        assert "João" in out
        assert "FAIL" not in out

    def test_falls_back_to_simulated_exports(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(main, "REFUELINGS_FILE", tmp_path / "missing.csv")
        monkeypatch.setattr(main, "EMPLOYEES_FILE", tmp_path / "missing_too.csv")

        main.main()

        out = capsys.readouterr().out
        assert "Refuelings: 200 rows imported" in out
        assert "FAIL" not in out
