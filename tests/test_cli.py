import io
import json
from pathlib import Path
from daynightavg import cli

DATA = Path(__file__).parent / "data"


def test_compute_from_file(capsys, monkeypatch):
    monkeypatch.delenv("DAYNIGHT_VARIANT", raising=False)
    assert cli.main(["compute", str(DATA / "lisbon_week.txt")]) == 0
    assert capsys.readouterr().out.strip() == "Day Average: 24.0  Night Average: 14.4  (n=7)"


def test_compute_from_stdin_as_json(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("Mon 25°/14° Tue 27º/16º"))
    assert cli.main(["compute", "--variant", "minimal", "--json"]) == 0
    # minimal ignores the alternate glyph and leaves out the count
    assert json.loads(capsys.readouterr().out) == {"dayAvg": 25.0, "nightAvg": 14.0}


def test_compute_blank_input_in_strict_mode(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("  \n"))
    assert cli.main(["compute", "--variant", "lenient"]) == 2
    assert "No input provided" in capsys.readouterr().err


def test_compute_many_files_are_prefixed(capsys, tmp_path):
    other = tmp_path / "porto.txt"
    other.write_text("Sat 20°/11°", encoding="utf-8")
    lisbon = str(DATA / "lisbon_week.txt")

    assert cli.main(["compute", "--variant", "lenient", lisbon, str(other)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        f"{lisbon}: Day Average: 24.0  Night Average: 14.4  (n=7)",
        f"{other}: Day Average: 20.0  Night Average: 11.0  (n=1)",
    ]


def test_remote_prints_endpoint_answer(capsys, monkeypatch):
    def fake_average_all(texts, client=None, max_workers=3):
        return [(name, {"dayAvg": 26.0, "nightAvg": 15.0}) for name in texts]

    monkeypatch.setattr(cli, "average_all", fake_average_all)
    monkeypatch.setattr("sys.stdin", io.StringIO("Mon 25°/14° Tue 27°/16°"))

    assert cli.main(["remote", "--endpoint", "https://fn.example.net/api/TemperatureAverage"]) == 0
    assert capsys.readouterr().out.strip() == "Day Average: 26.0  Night Average: 15.0"


def test_remote_without_endpoint_is_an_error(capsys, monkeypatch):
    monkeypatch.delenv("DAYNIGHT_ENDPOINT", raising=False)
    monkeypatch.setattr("sys.stdin", io.StringIO("25°/14°"))
    assert cli.main(["remote"]) == 1
    assert "DAYNIGHT_ENDPOINT" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "usage" in capsys.readouterr().out


def test_bad_environment_config_is_reported(capsys, monkeypatch):
    monkeypatch.setenv("DAYNIGHT_VARIANT", "strictish")
    monkeypatch.setattr("sys.stdin", io.StringIO("25°/14°"))
    assert cli.main(["compute"]) == 1
    assert capsys.readouterr().err.startswith("error: unknown variant")

    monkeypatch.setenv("DAYNIGHT_VARIANT", "lenient")
    monkeypatch.setenv("DAYNIGHT_STRICT_VALIDATION", "maybe")
    assert cli.main(["compute"]) == 1
    assert "DAYNIGHT_STRICT_VALIDATION" in capsys.readouterr().err


def test_line_rounds_halves_away_from_zero(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("1°/1° 1°/1° 1°/1° 2°/2°"))
    assert cli.main(["compute", "--variant", "lenient"]) == 0
    assert capsys.readouterr().out.strip() == "Day Average: 1.3  Night Average: 1.3  (n=4)"
