from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from recordgrid.cli import app

runner = CliRunner()

COLUMNS = [
    {"fieldName": "Id", "label": "Id"},
    {"fieldName": "Name", "label": "Account Name", "editable": True},
    {"fieldName": "Industry", "label": "Industry", "editable": True},
    {"fieldName": "Phone", "label": "Phone", "type": "phone"},
]


@pytest.fixture
def records_file(tmp_path: Path) -> Path:
    path = tmp_path / "accounts.json"
    path.write_text(
        json.dumps(
            {
                "records": [
                    {"Id": "a1", "Name": "Acme Corp", "Industry": "Manufacturing", "Phone": "555-0100"},
                    {"Id": "a2", "Name": "Globex", "Industry": "Energy", "Phone": "555-0101"},
                    {"Id": "a3", "Name": "Initech", "Industry": "Technology", "Phone": None},
                ],
                "columns": COLUMNS,
            }
        ),
        encoding="utf-8",
    )
    return path


def test_show_renders_first_page(records_file: Path) -> None:
    result = runner.invoke(app, ["show", str(records_file)])

    assert result.exit_code == 0
    assert "Page 1 of 1" in result.stdout
    assert "Globex" in result.stdout
    assert "3 of 3 record(s)" in result.stdout


def test_show_search_narrows_rows(records_file: Path) -> None:
    result = runner.invoke(app, ["show", str(records_file), "--search", "acme"])

    assert result.exit_code == 0
    assert "Acme Corp" in result.stdout
    assert "Globex" not in result.stdout
    assert "1 of 3 record(s)" in result.stdout


def test_show_reports_no_matches(records_file: Path) -> None:
    result = runner.invoke(app, ["show", str(records_file), "-s", "nothing-like-this"])

    assert result.exit_code == 0
    assert "No records match." in result.stdout


def test_show_pages_with_settings_file(records_file: Path, tmp_path: Path) -> None:
    settings = tmp_path / "settings.json"
    settings.write_text(json.dumps({"view": {"page_size": 2}}), encoding="utf-8")

    result = runner.invoke(
        app, ["show", str(records_file), "--settings", str(settings), "--page", "2"]
    )

    assert result.exit_code == 0
    assert "Page 2 of 2" in result.stdout
    assert "Initech" in result.stdout


def test_update_single_prints_payload(records_file: Path) -> None:
    result = runner.invoke(
        app, ["update", str(records_file), "--id", "a1", "--set", "Name=Acme Ltd"]
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "kind": "update",
        "targets": ["a1"],
        "fields": {"Name": "Acme Ltd", "Industry": "Manufacturing"},
    }


def test_update_bulk_prints_payload(records_file: Path) -> None:
    result = runner.invoke(
        app,
        ["update", str(records_file), "--id", "a2", "--id", "a1", "--set", "Industry=Retail"],
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "kind": "update",
        "targets": ["a1", "a2"],
        "fields": {"Industry": "Retail"},
    }


def test_update_skips_read_only_field(records_file: Path) -> None:
    result = runner.invoke(
        app, ["update", str(records_file), "--id", "a1", "--set", "Phone=555-9999"]
    )

    assert result.exit_code == 0
    assert "Skipped" in result.output
    assert "555-9999" not in result.stdout


def test_update_all_editable_accepts_any_column(records_file: Path) -> None:
    result = runner.invoke(
        app,
        ["update", str(records_file), "--id", "a3", "--set", "Phone=555-0000", "--all-editable"],
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout)["fields"]["Phone"] == "555-0000"


def test_update_unknown_id_is_refused(records_file: Path) -> None:
    result = runner.invoke(app, ["update", str(records_file), "--id", "zz", "--set", "Name=x"])

    assert result.exit_code == 1
    assert "Refused" in result.output


def test_bad_assignment_is_a_usage_error(records_file: Path) -> None:
    result = runner.invoke(app, ["update", str(records_file), "--id", "a1", "--set", "Name"])

    assert result.exit_code == 2


def test_create_prints_payload(records_file: Path) -> None:
    result = runner.invoke(app, ["create", str(records_file), "--set", "Name=Hooli"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"kind": "create", "fields": {"Name": "Hooli"}}


def test_delete_prints_payload(records_file: Path) -> None:
    result = runner.invoke(app, ["delete", str(records_file), "--id", "a2"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"kind": "delete", "target": "a2"}


def test_delete_resolves_numeric_ids(tmp_path: Path) -> None:
    path = tmp_path / "numeric.json"
    path.write_text(
        json.dumps({"rows": [{"Id": 7, "Name": "Seven"}], "columns": COLUMNS}), encoding="utf-8"
    )

    result = runner.invoke(app, ["delete", str(path), "--id", "7"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"kind": "delete", "target": 7}


def test_delete_unknown_id_is_refused(records_file: Path) -> None:
    result = runner.invoke(app, ["delete", str(records_file), "--id", "a9"])

    assert result.exit_code == 1
    assert "Refused" in result.output


def test_invalid_record_file_reports_error(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"records": []}), encoding="utf-8")

    result = runner.invoke(app, ["show", str(path)])

    assert result.exit_code == 1
    assert "Error:" in result.output
