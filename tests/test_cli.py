"""
Tests for the batch generation entry point (python -m engine)

Run with: pytest tests/test_cli.py -v
"""

import json

from engine.__main__ import main


class TestMain:
    """Test argument handling and exit codes."""

    def test_generates_files(self, tmp_path):
        output_dir = tmp_path / "run"
        code = main([
            "--output-dir", str(output_dir),
            "--years", "1",
            "--seed", "3",
            "--end-date", "2024-01-01",
        ])

        assert code == 0
        metadata = json.loads((output_dir / "metadata.json").read_text())
        assert metadata["startDate"] == "2023-01-01"
        assert metadata["totalDays"] == 365
        assert sorted(metadata["turbineIds"]) == [1, 2, 3, 4]
        for turbine_id in metadata["turbineIds"]:
            assert (output_dir / f"turbine{turbine_id}.json").exists()

    def test_csv_flag(self, tmp_path):
        code = main([
            "--output-dir", str(tmp_path),
            "--years", "1",
            "--seed", "3",
            "--end-date", "2024-01-01",
            "--csv",
        ])

        assert code == 0
        assert (tmp_path / "turbine1.csv").exists()

    def test_bad_end_date(self, tmp_path):
        assert main(["--output-dir", str(tmp_path), "--end-date", "01/01/2024"]) == 2
        assert not (tmp_path / "metadata.json").exists()

    def test_non_positive_years(self, tmp_path):
        assert main(["--output-dir", str(tmp_path), "--years", "0"]) == 2

    def test_window_before_year_one(self, tmp_path):
        code = main(["--output-dir", str(tmp_path), "--years", "3000", "--end-date", "2024-01-01"])

        assert code == 2
        assert not (tmp_path / "metadata.json").exists()

    def test_bad_environment_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GENERATION_YEARS", "ten")
        assert main(["--output-dir", str(tmp_path)]) == 2
