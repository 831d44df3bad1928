# tests/test_normalizer.py
"""
Tests for ``services.config_engine.normalizer``.

Both server shapes (flat and schema-annotated) must end up as the same
canonical value store.
"""
from models.field_schema import FieldSchema, ValueType
from services.config_engine.normalizer import infer_value_type, normalize


def test_flat_and_annotated_shapes_are_equivalent():
    flat = {"a": 1, "b": True}
    annotated = {
        "properties": {
            "a": {"type": "integer", "default": 1},
            "b": {"type": "boolean", "default": True},
        }
    }
    assert normalize(flat, []) == normalize(annotated, [])
    assert normalize(flat, []).to_dict() == {"a": 1, "b": True}


def test_default_filling_from_schema():
    schema = [
        FieldSchema(name="url", valueType="url", required=True, default=""),
        FieldSchema(name="pageStart", valueType="integer", default=1),
    ]
    assert normalize({}, schema).to_dict() == {"url": "", "pageStart": 1}


def test_annotated_missing_default_falls_back_to_schema_then_type(product_schema):
    document = {
        "title": "Multi-Website Product Crawler",
        "type": "object",
        "properties": {
            "pageEnd": {"type": "integer"},
            "maxProductLinks": {"type": "integer"},
            "brand": {"title": "Brand"},
        },
    }
    store = normalize(document, product_schema)
    assert store["pageEnd"] == 2              # schema default
    assert store["maxProductLinks"] == 0      # type-appropriate empty value
    assert store["brand"] == ""               # no type at all → string
    assert store["url"] == ""                 # filled from schema


def test_flat_values_are_conformed_to_declared_types(product_schema):
    store = normalize({"pageStart": "3", "isBrowser": "true"}, product_schema)
    assert store["pageStart"] == 3
    assert store["isBrowser"] is True


def test_unknown_keys_are_preserved_verbatim(product_schema):
    store = normalize({"url": "https://a.test", "legacyFlag": {"x": 1}}, product_schema)
    assert store["legacyFlag"] == {"x": 1}
    assert store.extra_keys(product_schema) == ["legacyFlag"]


def test_overlay_replaces_defaults_but_not_loaded_values(product_schema):
    overlay = {"url": "https://overlay.test", "pageEnd": 9, "notInSchema": "x"}
    store = normalize({"url": "https://record.test"}, product_schema, overlay)
    assert store["url"] == "https://record.test"
    assert store["pageEnd"] == 9
    assert "notInSchema" not in store


def test_infer_value_type():
    url_field = FieldSchema(name="url", valueType="url")
    assert infer_value_type(True) is ValueType.BOOLEAN
    assert infer_value_type(5) is ValueType.INTEGER
    assert infer_value_type(["a"]) is ValueType.STRING_ARRAY
    assert infer_value_type("https://a.test") is ValueType.STRING
    assert infer_value_type("https://a.test", url_field) is ValueType.URL
