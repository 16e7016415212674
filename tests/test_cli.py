"""Tests for the command line front end."""
import polars as pl
import pytest

from rdfxml_starbase.cli import main

from conftest import EX, rdf_document


DOC = rdf_document('<rdf:Description rdf:ID="s"><ex:a>1</ex:a></rdf:Description>')


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "doc.rdf"
    path.write_text(DOC, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("RDFXML_REIFY", "RDFXML_BASE", "RDFXML_FORMAT", "RDFXML_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestMain:
    def test_ntriples_to_stdout(self, source, capsys):
        assert main([str(source), "--base", "http://example.org/doc"]) == 0
        out = capsys.readouterr().out
        assert out == f'<http://example.org/doc#s> <{EX}a> "1" .\n'

    def test_default_base_is_file_uri(self, source, capsys):
        assert main([str(source)]) == 0
        assert source.resolve().as_uri() + "#s" in capsys.readouterr().out

    def test_nquads_with_context(self, source, capsys):
        assert main([str(source), "--base", "http://example.org/doc", "--format", "nquads",
                     "--context", "http://example.org/g"]) == 0
        assert capsys.readouterr().out.strip().endswith("<http://example.org/g> .")

    def test_csv_output_file(self, source, tmp_path):
        out = tmp_path / "out.csv"
        assert main([str(source), "--base", "http://example.org/doc", "--format", "csv",
                     "--output", str(out)]) == 0
        df = pl.read_csv(out)
        assert df.height == 1
        assert df["object"].to_list() == [1] or df["object"].to_list() == ["1"]

    def test_parquet_requires_output(self, source, capsys):
        assert main([str(source), "--format", "parquet"]) == 1
        assert "--output" in capsys.readouterr().err

    def test_parse_error_exit_code(self, tmp_path, capsys):
        path = tmp_path / "bad.rdf"
        path.write_text(rdf_document('<rdf:Description rdf:about="http://x/" rdf:ID="x"/>'), encoding="utf-8")
        assert main([str(path)]) == 1
        assert "rdf:ID" in capsys.readouterr().err

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "missing.rdf")]) == 1

    def test_invalid_env_config(self, source, monkeypatch, capsys):
        monkeypatch.setenv("RDFXML_REIFY", "maybe")
        assert main([str(source)]) == 2
        assert "RDFXML_REIFY" in capsys.readouterr().err

    def test_reify_from_env(self, tmp_path, monkeypatch, capsys):
        path = tmp_path / "doc.rdf"
        path.write_text(rdf_document(
            '<rdf:Description rdf:about="http://example.org/s"><ex:p rdf:ID="r">v</ex:p></rdf:Description>'
        ), encoding="utf-8")
        monkeypatch.setenv("RDFXML_REIFY", "1")
        assert main([str(path), "--base", "http://example.org/doc"]) == 0
        assert len(capsys.readouterr().out.strip().splitlines()) == 5
