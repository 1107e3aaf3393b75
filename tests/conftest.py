import pytest


@pytest.fixture()
def items_schema():
    return {
        "type": "object",
        "properties": {
            "id": {"type": "integer"},
            "name": {"type": "string"},
            "tags": {"type": "array"},
        },
        "required": ["id", "name"],
    }


@pytest.fixture()
def ref_schema():
    return {
        "$schema": "http://json-schema.org/draft-06/schema#",
        "$ref": "#/definitions/Root",
        "definitions": {
            "Root": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "address": {"$ref": "#/definitions/Address"},
                },
                "required": ["id"],
            },
            "Address": {
                "type": "object",
                "properties": {
                    "street": {"type": "string"},
                    "postcode": {"type": "string"},
                },
                "required": ["street"],
            },
        },
    }
