import io
import json

from json_schema_ddl.handlers_schema import (
    create_schema_handler,
    export_schema_handler,
    load_samples_handler,
    rules_from_table,
)
from json_schema_ddl.handlers_sql import (
    database_code,
    export_sql_handler,
    generate_sql_handler,
    use_created_schema_handler,
)


def test_rules_from_table_list_rows():
    rows = [["zip", "exact", "integer"], ["", "exact", "string"], ["note", None, "text"]]
    assert rules_from_table(rows) == [
        {"fieldName": "zip", "matchType": "exact", "newType": "integer"},
        {"fieldName": "note", "matchType": "exact", "newType": "text"},
    ]
    assert rules_from_table(None) == []


def test_load_samples_handler():
    samples, status = load_samples_handler(io.BytesIO(b'[{"a": 1}, {"a": 2}]'))
    assert samples == [{"a": 1}, {"a": 2}]
    assert "2 sample" in status

    samples, status = load_samples_handler(io.BytesIO(b"{oops"))
    assert samples is None
    assert status.startswith("Error parsing JSON")


def test_create_schema_handler_from_text():
    schema, status = create_schema_handler(
        None, '{"id": 1, "name": "x"}', "", False, False, False, "id->string", [], False, True, False, False
    )
    assert schema["properties"]["id"] == {"type": "string"}
    assert "2 top-level" in status


def test_create_schema_handler_without_data():
    schema, status = create_schema_handler(None, "", "", False, False, False, "", [], False, True, False, False)
    assert schema is None
    assert status == "No data loaded."


def test_generate_sql_handler_reports_errors_as_status(items_schema):
    sql, status = generate_sql_handler(items_schema, "", "PostgreSQL", "bad name", "", True, "", [], True, False, False)
    assert sql == ""
    assert status.startswith("Failed to generate SQL DDL: Invalid table name")


def test_generate_sql_handler_success(items_schema):
    sql, status = generate_sql_handler(None, json.dumps(items_schema), "MariaDB", "items", "", True, "", [], True, False, False)
    assert sql.startswith("create table `items`")
    assert "(mysql2)" in status


def test_database_code():
    assert database_code("CockroachDB") == "cockroachdb"
    assert database_code("sqlite3") == "sqlite3"
    assert database_code("") == "pg"


def test_use_created_schema_handler():
    schema, text, status = use_created_schema_handler({"type": "object"})
    assert json.loads(text) == {"type": "object"}
    assert use_created_schema_handler(None)[2] == "Create a schema first."


def test_exports(tmp_path, monkeypatch):
    monkeypatch.setattr("tempfile.tempdir", str(tmp_path))
    path, status = export_schema_handler({"type": "object"}, "out", 2)
    assert path.endswith("out.json")
    with open(path, encoding="utf-8") as f:
        assert json.load(f) == {"type": "object"}

    path, status = export_sql_handler('create table "t" ("a" integer)', "")
    assert path.endswith("create_table.sql")
    with open(path, encoding="utf-8") as f:
        assert f.read() == 'create table "t" ("a" integer);\n'

    assert export_sql_handler("", "x") == (None, "No SQL to export.")


def test_create_schema_handler_format_inference_toggles():
    text = '{"id": "3f2504e0-4f89-11d3-9a0c-0305e82c3301"}'
    schema, _ = create_schema_handler(None, text, "", False, False, False, "", [], False, True, False, False)
    assert schema["properties"]["id"] == {"type": "string", "format": "uuid"}
    schema, _ = create_schema_handler(
        None, text, "", False, False, False, "", [], False, True, False, False, True, False
    )
    assert schema["properties"]["id"] == {"type": "string"}
