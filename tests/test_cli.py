import datetime as dt
import json
from types import SimpleNamespace

import psycopg2
import pytest

from pulso.cli import build_parser
from pulso.commands.apply_schema import SCHEMA_PATH, split_statements
from tests.conftest import make_pdf


def _run(argv):
    args = build_parser().parse_args(argv)
    args.func(args)


def test_parser_extract_defaults():
    args = build_parser().parse_args(["extract", "export.pdf"])

    assert args.strategy == "auto"
    assert args.out == "json"
    assert not args.show


def test_parser_analyze_source_id():
    args = build_parser().parse_args([
        "analyze", "--source-id", "abc", "--report-date", "2025-01-13", "--delay", "0",
    ])

    assert args.pdf_file is None
    assert args.source_id == "abc"
    assert args.report_date == dt.date(2025, 1, 13)
    assert args.delay == 0.0
    assert args.min_comments is None


def test_parser_analyze_requires_a_source():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["analyze"])


def test_parser_reset_targets():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["reset", "units"])
    assert build_parser().parse_args(["reset", "all"]).target == "all"


def test_extract_writes_units_json(tmp_path):
    pdf = tmp_path / "export.pdf"
    pdf.write_bytes(make_pdf(
        "SBRSPAA01 Comment: Great service at the front desk",
        "SBRSPAB02 Comment: Locker room was not clean today",
    ))

    _run(["extract", str(pdf), "--surveys"])

    data = json.loads((tmp_path / "export.units.json").read_text(encoding="utf-8"))
    assert [u["unit_code"] for u in data["units"]] == ["SBRSPAA01", "SBRSPAB02"]
    assert data["units"][0]["comments"] == ["Great service at the front desk"]
    assert data["units"][0]["surveys"][0]["comment"] == "Great service at the front desk"


def test_extract_without_units_writes_nothing(tmp_path):
    pdf = tmp_path / "cover.pdf"
    pdf.write_bytes(make_pdf("Weekly satisfaction report"))

    _run(["extract", str(pdf)])

    assert not (tmp_path / "cover.units.json").exists()


def test_extract_unreadable_pdf_exits_1(tmp_path):
    pdf = tmp_path / "broken.pdf"
    pdf.write_bytes(b"not a pdf document")

    with pytest.raises(SystemExit) as exc:
        _run(["extract", str(pdf)])
    assert exc.value.code == 1


def test_analyze_database_error_exits_1(monkeypatch):
    import analysis
    import pulso._db

    class BrokenStore:
        def __init__(self, conn):
            pass

        def load_source(self, source_id):
            raise psycopg2.DataError("invalid input syntax for type uuid")

    monkeypatch.setattr(pulso._db, "get_connection", lambda settings=None: SimpleNamespace(close=lambda: None))
    monkeypatch.setattr(analysis, "PgStore", BrokenStore)

    with pytest.raises(SystemExit) as exc:
        _run(["analyze", "--source-id", "abc"])
    assert exc.value.code == 1


def test_split_statements_keeps_dollar_blocks():
    sql = (
        "create table a (id int);\n"
        "DO $$ BEGIN\n"
        "    CREATE TYPE t AS ENUM ('x');\n"
        "EXCEPTION\n"
        "    WHEN duplicate_object THEN null;\n"
        "END $$;\n"
        "create index i on a (id);\n"
    )

    stmts = split_statements(sql)

    assert len(stmts) == 3
    assert stmts[1].startswith("DO $$") and stmts[1].endswith("END $$;")


def test_schema_file_splits():
    stmts = split_statements(SCHEMA_PATH.read_text(encoding="utf-8"))

    assert any("qualitative_reports" in s for s in stmts)
    assert all(s.rstrip().endswith(";") for s in stmts)
