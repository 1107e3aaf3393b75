"""Core logic for JSON Schema to SQL DDL.

The Gradio UI lives in `app.py`. This package contains pure functions that:
- infer a JSON Schema from sample documents
- mark required fields and override field types by name pattern
- resolve local `$ref`s and find the effective root object
- render a CREATE TABLE statement for one of several SQL dialects
"""
from .operations import create_schema, generate_sql_ddl, transform_schema

__all__ = ["create_schema", "generate_sql_ddl", "transform_schema"]
