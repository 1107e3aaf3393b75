import json

import pytest

from json_schema_ddl.errors import InputError, SchemaOperationError, SchemaStructureError, TableNameError
from json_schema_ddl.operations import create_schema, generate_sql_ddl


def test_generate_items_table(items_schema):
    result = generate_sql_ddl(items_schema, table_name="items", database_type="pg")
    sql = result["sql"]
    assert '"id" serial primary key' in sql
    assert '"name" varchar(255) not null' in sql
    assert '"tags" jsonb' in sql
    assert '"tags" jsonb not null' not in sql
    assert result["tableName"] == "items"
    assert result["databaseType"] == "pg"


def test_generate_does_not_mutate_input(items_schema):
    before = json.dumps(items_schema, sort_keys=True)
    generate_sql_ddl(items_schema, table_name="items", override_rules_text="id->uuid", lowercase_all_fields=True)
    assert json.dumps(items_schema, sort_keys=True) == before


def test_uuid_override_keeps_primary_key_without_auto_increment(items_schema):
    sql = generate_sql_ddl(
        items_schema, table_name="items", database_type="mysql2", override_rules_text="id->uuid"
    )["sql"]
    assert "`id` char(36) primary key" in sql
    assert "auto_increment" not in sql


@pytest.mark.parametrize(
    "database_type, fragment",
    [
        ("pg", '"id" serial primary key'),
        ("cockroachdb", '"id" serial primary key'),
        ("mysql2", "`id` int unsigned not null auto_increment primary key"),
        ("sqlite3", "`id` integer not null primary key autoincrement"),
        ("mssql", "[id] int identity(1,1) not null primary key"),
        ("oracledb", '"id" number not null primary key'),
    ],
)
def test_auto_detected_mixed_case_id(database_type, fragment):
    schema = {"type": "object", "properties": {"Id": {"type": "integer"}, "name": {"type": "string"}}}
    result = generate_sql_ddl(schema, table_name="t", database_type=database_type, enable_debug=True)
    assert result["debug"]["primaryKeyFields"] == ["id"]
    assert fragment in result["sql"]


def test_auto_detect_disabled():
    schema = {"type": "object", "properties": {"id": {"type": "integer"}, "name": {"type": "string"}}}
    sql = generate_sql_ddl(schema, table_name="t", auto_detect_primary_key=False)["sql"]
    assert "primary key" not in sql
    assert '"id" integer' in sql


def test_explicit_primary_keys_override_detection():
    schema = {"type": "object", "properties": {"id": {"type": "integer"}, "Code": {"type": "string"}}}
    sql = generate_sql_ddl(schema, table_name="t", primary_key_fields="Code")["sql"]
    assert '"code" varchar(255) primary key' in sql
    assert '"id" integer' in sql


def test_quoted_identifiers_mssql():
    schema = {"type": "object", "properties": {"order id": {"type": "integer"}, "Note": {"type": "string"}}}
    sql = generate_sql_ddl(
        schema, table_name="Order Lines", database_type="mssql", quote_identifiers=True
    )["sql"]
    assert sql.startswith("create table [Order Lines] (")
    assert "[order id] int" in sql
    assert "[Note] varchar(255)" in sql


def test_accepts_wrapped_and_encoded_inputs(items_schema):
    expected = generate_sql_ddl(items_schema, table_name="items")["sql"]
    assert generate_sql_ddl(json.dumps(items_schema), table_name="items")["sql"] == expected
    assert generate_sql_ddl([{"schema": items_schema}], table_name="items")["sql"] == expected


def test_ref_root_schema(ref_schema):
    sql = generate_sql_ddl(ref_schema, table_name="people", database_type="sqlite3")["sql"]
    assert sql == (
        "create table `people` (`id` integer not null primary key autoincrement, `address` text)"
    )


def test_override_preserves_nullability_into_ddl():
    schema = {
        "type": "object",
        "properties": {"a": {"type": "integer"}, "score": {"type": ["integer", "null"]}},
        "required": ["a", "score"],
    }
    sql = generate_sql_ddl(schema, table_name="t", override_rules_text="score->number")["sql"]
    assert '"score" decimal(10,2))' in sql
    sql = generate_sql_ddl(
        schema, table_name="t", override_rules_text="score->number", preserve_nullability=False
    )["sql"]
    assert '"score" decimal(10,2) not null' in sql


def test_lowercase_all_fields_before_generation():
    schema = {"type": "object", "properties": {"ID": {"type": "integer"}, "Name": {"type": "string"}}, "required": ["Name"]}
    sql = generate_sql_ddl(schema, table_name="t", lowercase_all_fields=True, quote_identifiers=True)["sql"]
    assert '"id" serial primary key' in sql
    assert '"name" varchar(255) not null' in sql


def test_invalid_table_name_is_wrapped(items_schema):
    with pytest.raises(TableNameError) as info:
        generate_sql_ddl(items_schema, table_name="bad name")
    assert str(info.value).startswith("Failed to generate SQL DDL: Invalid table name: ")


def test_missing_properties_is_structural_error():
    with pytest.raises(SchemaStructureError, match="^Failed to generate SQL DDL: Schema must have"):
        generate_sql_ddl({"type": "object"}, table_name="t")


def test_bad_json_string_is_input_error():
    with pytest.raises(InputError, match="not valid JSON"):
        generate_sql_ddl("{not json", table_name="t")


def test_empty_input_list_is_input_error():
    with pytest.raises(InputError):
        generate_sql_ddl([], table_name="t")


def test_unknown_dialect():
    with pytest.raises(SchemaOperationError, match="Unsupported database type"):
        generate_sql_ddl({"properties": {"a": {"type": "string"}}}, table_name="t", database_type="db2")


def test_create_schema_from_samples():
    samples = [
        {"id": 1, "firstName": "Ada", "nickname": None, "tags": ["x"]},
        {"id": 2, "firstName": "Grace", "nickname": "gh", "tags": []},
    ]
    result = create_schema(
        samples,
        required_fields="nick",
        use_substring_matching=True,
        override_rules_text="id->string",
    )
    schema = result["schema"]
    assert schema["type"] == "object"
    assert schema["properties"]["id"] == {"type": "string"}
    assert "nickname" in schema["required"]
    assert "id" in schema["required"]


def test_create_schema_override_required_replaces_inferred():
    samples = [{"id": 1, "name": "a"}]
    schema = create_schema(samples, required_fields="name", override_inferred_required=True)["schema"]
    assert schema["required"] == ["name"]


def test_create_schema_lowercase_and_alphabetize():
    samples = [{"Zeta": 1, "Alpha": {"Inner": True}}]
    schema = create_schema(samples, lowercase_all_fields=True, alphabetize=True)["schema"]
    assert list(schema["properties"]) == ["alpha", "zeta"]
    assert list(schema["properties"]["alpha"]["properties"]) == ["inner"]
    assert sorted(schema["required"]) == ["alpha", "zeta"]


def test_create_schema_passthrough_minimises_definitions():
    external = {
        "$schema": "http://json-schema.org/draft-06/schema#",
        "$ref": "#/definitions/Root",
        "definitions": {"Root": {"type": "object", "properties": {"a": {"type": "integer"}}}},
    }
    schema = create_schema(schema=external)["schema"]
    assert schema == {
        "$schema": "http://json-schema.org/draft-06/schema#",
        "type": "object",
        "properties": {"a": {"type": "integer"}},
    }
    assert "$ref" in external


def test_create_schema_rejects_empty_samples():
    with pytest.raises(InputError, match="^Failed to infer JSON schema: No input data"):
        create_schema([])


def test_create_schema_debug_payload():
    result = create_schema([{"a": 1}], enable_debug=True, required_fields="a")
    assert result["debug"]["inputItemCount"] == 1
    assert result["debug"]["options"]["required_fields"] == "a"


def test_table_name_with_trailing_newline_is_rejected(items_schema):
    with pytest.raises(TableNameError, match="Invalid table name"):
        generate_sql_ddl(items_schema, table_name="items\n")


def test_definitions_only_root_types_ref_properties_like_ref_root(ref_schema):
    definitions_only = {"definitions": ref_schema["definitions"]}
    with_ref = generate_sql_ddl(ref_schema, table_name="people")["sql"]
    without_ref = generate_sql_ddl(definitions_only, table_name="people")["sql"]
    assert '"address" jsonb' in with_ref
    assert without_ref == with_ref


def test_errors_keep_subclass_and_operation_prefix(items_schema):
    with pytest.raises(SchemaOperationError) as info:
        generate_sql_ddl(items_schema, table_name="")
    assert isinstance(info.value, TableNameError)
    assert str(info.value) == "Failed to generate SQL DDL: Invalid table name: Table name cannot be empty"
    assert isinstance(info.value.__cause__, TableNameError)


def test_create_schema_infers_formats_into_ddl():
    samples = [{"id": "3f2504e0-4f89-11d3-9a0c-0305e82c3301", "createdAt": "2024-05-01T10:00:00Z"}]
    schema = create_schema(samples)["schema"]
    assert schema["properties"]["createdAt"] == {"type": "string", "format": "date-time"}
    sql = generate_sql_ddl(schema, table_name="events")["sql"]
    assert '"id" uuid primary key' in sql
    assert '"createdAt"' not in sql
    assert '"createdat" timestamptz not null' in sql


def test_create_schema_without_format_inference():
    samples = [{"id": "3f2504e0-4f89-11d3-9a0c-0305e82c3301", "createdAt": "2024-05-01T10:00:00Z"}]
    schema = create_schema(samples, infer_date_times=False, infer_uuids=False)["schema"]
    assert schema["properties"]["id"] == {"type": "string"}
    assert schema["properties"]["createdAt"] == {"type": "string"}
