"""
tests/test_main.py -- CLI tests for main.py.

Snapshots are written to tmp_path and passed via --data-dir. The interactive
loop is driven through run_interactive's input_fn seam, so no real stdin
is involved.
"""

import json

import pytest

import main as cli
from core.aggregator import summarize
from core.config import Settings
from core.formatter import build_legend

ASM = [{"SerialNumber": "SN100", "BuiltDate": 0, "BuiltBy": "ACME", "Description": "Node", "SalesOrder": "SO-1"}]
DWE = [{"Enclosure SN": "SN100", "Drive SN": "D1", "Drive Manufacturer": "Seagate", "Model": "M", "Part Number": "P"}]
ZEN = [{"RMA": 55, "Serial": "SN100", "Drive": "D1", "OldDiagnosis": "Clicking", "NewDiagnosis": "Head crash"}]


@pytest.fixture
def data_dir(write_snapshots, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    return write_snapshots(asm=ASM, dwe=DWE, zen=ZEN)


def _scripted(*lines):
    """Return an input function that yields lines, then raises EOFError."""
    pending = list(lines)

    def _input():
        if not pending:
            raise EOFError
        return pending.pop(0)

    return _input


class TestOneShot:
    def test_search_prints_linked_records(self, data_dir, capsys):
        cli.main(["--data-dir", str(data_dir), "--no-summary", "sn100"])
        out = capsys.readouterr().out
        assert "Glyph Database Started. Type Q to quit." in out
        assert "Assemblies Database Loaded." in out
        assert "Serial Number: SN100" in out
        assert "Drive SN: D1" in out
        assert out.count("RMA: 55") == 1

    def test_summary_printed_by_default(self, data_dir, capsys):
        cli.main(["--data-dir", str(data_dir), "--no-color", "nothing-matches"])
        out = capsys.readouterr().out
        assert "Unique Drive Manufacturers: 1" in out
        assert "No matching results found." in out

    def test_date_term(self, data_dir, capsys):
        cli.main(["--data-dir", str(data_dir), "--no-summary", "$1609459200000"])
        assert "Parsed Date: 2021-01-03" in capsys.readouterr().out

    def test_json_output_is_clean(self, data_dir, capsys):
        cli.main(["--data-dir", str(data_dir), "--json", "D1"])
        data = json.loads(capsys.readouterr().out)
        assert data["outcome"] == "Report"
        assert data["lines"][0]["record"]["drive_sn"] == "D1"

    def test_json_multiple_terms_is_a_list(self, data_dir, capsys):
        cli.main(["--data-dir", str(data_dir), "--json", "D1", "$x"])
        data = json.loads(capsys.readouterr().out)
        assert [d["outcome"] for d in data] == ["Report", "InvalidDate"]

    def test_quit_term_stops_later_terms(self, data_dir, capsys):
        cli.main(["--data-dir", str(data_dir), "--no-summary", "q", "SN100"])
        out = capsys.readouterr().out
        assert "Exiting Glyph Database. Goodbye!" in out
        assert "Serial Number: SN100" not in out

    def test_json_quit_term_stops_later_terms(self, data_dir, capsys):
        cli.main(["--data-dir", str(data_dir), "--json", "D1", "Q", "SN100"])
        data = json.loads(capsys.readouterr().out)
        assert [d["outcome"] for d in data] == ["Report", "Quit"]

    def test_json_requires_terms(self, data_dir):
        with pytest.raises(SystemExit):
            cli.main(["--data-dir", str(data_dir), "--json"])

    def test_missing_snapshots_do_not_crash(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        cli.main(["--data-dir", str(tmp_path / "nowhere"), "--no-summary", "SN100"])
        assert "No matching results found." in capsys.readouterr().out


class TestInteractive:
    def _session(self, data_dir):
        settings = Settings(data_dir=data_dir)
        dataset = cli.load_with_progress(settings)
        return dataset, build_legend(summarize(dataset)), settings

    def test_quit_ends_session(self, data_dir, capsys):
        dataset, legend, settings = self._session(data_dir)
        cli.run_interactive(dataset, legend, settings, input_fn=_scripted("SN100", "q", "D1"))
        out = capsys.readouterr().out
        assert "Serial Number: SN100" in out
        assert "Exiting Glyph Database. Goodbye!" in out
        # nothing after quit is evaluated
        assert out.count("Drive SN: D1") == 1

    def test_eof_ends_session(self, data_dir, capsys):
        dataset, legend, settings = self._session(data_dir)
        cli.run_interactive(dataset, legend, settings, input_fn=_scripted())
        assert "Goodbye!" in capsys.readouterr().out

    def test_each_cycle_prompts_again(self, data_dir, capsys):
        dataset, legend, settings = self._session(data_dir)
        cli.run_interactive(dataset, legend, settings, input_fn=_scripted("#x", "$abc", "Q"))
        out = capsys.readouterr().out
        assert "Filtering previous results is not supported." in out
        assert "Invalid date format" in out
        assert out.count("Please enter search criteria:") == 3

    def test_repeated_search_prints_full_report_each_time(self, data_dir, capsys):
        dataset, legend, settings = self._session(data_dir)
        cli.run_interactive(dataset, legend, settings, input_fn=_scripted("SN100", "SN100", "Q"))
        assert capsys.readouterr().out.count("RMA: 55") == 2
