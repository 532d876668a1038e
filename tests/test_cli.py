import csv
import io

from typer.testing import CliRunner

from rirparse.cli import app

runner = CliRunner()


def rows(text):
    return list(csv.reader(io.StringIO(text)))


def test_records_to_stdout(sample_file):
    result = runner.invoke(app, ["records", str(sample_file)])

    assert result.exit_code == 0, result.output
    out = rows(result.stdout)
    assert out[0] == ["cidr", "kind", "country"]
    assert out[1] == ["2001:4200::/32", "ipv6", "ZA"]
    assert len(out) == 1 + 24


def test_records_filters(sample_file, tmp_path):
    output = tmp_path / "ke.csv"

    result = runner.invoke(
        app, ["records", str(sample_file), "--kind", "ipv4", "--country", "ke", "-o", str(output)]
    )

    assert result.exit_code == 0, result.output
    out = rows(output.read_text())
    assert out[1:] == [[f"41.57.{n}.0/24", "ipv4", "KE"] for n in range(96, 100)]


def test_records_bad_feed_exits_nonzero(tmp_path):
    path = tmp_path / "bad"
    path.write_text("ripencc|NL|ipv4|10.0.0.x|256|20100101|allocated\n")

    result = runner.invoke(app, ["records", str(path)])

    assert result.exit_code == 1


def test_records_invalid_utf8_exits_cleanly(tmp_path):
    path = tmp_path / "bad-bytes"
    path.write_bytes(b"afrinic|ZA|ipv4|41.0.0.0|256|20071126|allocated|\xff\n")

    result = runner.invoke(app, ["records", str(path)])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "not valid UTF-8" in result.output


def test_records_missing_file_exits_nonzero(tmp_path):
    result = runner.invoke(app, ["records", str(tmp_path / "missing")])

    assert result.exit_code == 1


def test_summary(sample_file, tmp_path):
    html = tmp_path / "summary.html"

    result = runner.invoke(app, ["--quiet", "summary", str(sample_file), "--html", str(html)])

    assert result.exit_code == 0, result.output
    assert "afrinic snapshot 2024-03-14" in result.stdout
    lines = result.stdout.splitlines()
    assert any(line.split()[:4] == ["EG", "16", "1", "17"] for line in lines if line.strip())
    assert any(line.split()[:4] == ["TOTAL", "22", "2", "24"] for line in lines if line.strip())
    assert html.exists()


def test_verbose_and_quiet_conflict(sample_file):
    result = runner.invoke(app, ["--verbose", "--quiet", "records", str(sample_file)])

    assert result.exit_code != 0
