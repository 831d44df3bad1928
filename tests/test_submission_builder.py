# tests/test_submission_builder.py
from models.field_schema import FieldSchema
from models.template_metadata import TemplateMetadata
from services.config_engine.submission_builder import build_payload
from services.config_engine.value_store import ValueStore

ACTOR = "507f1f77bcf86cd799439011"


def test_required_empty_field_blocks_the_payload():
    schema = [FieldSchema(name="url", valueType="url", required=True, default="")]
    result = build_payload(ValueStore({"url": ""}), schema, ACTOR)
    assert not result.ok
    assert result.fields == ["url"]
    assert result.payload is None


def test_whitespace_only_counts_as_empty():
    schema = [FieldSchema(name="websiteName", valueType="string", required=True)]
    result = build_payload({"websiteName": "   "}, schema, ACTOR)
    assert result.fields == ["websiteName"]


def test_every_declared_field_is_present_in_declaration_order(product_schema):
    values = {"url": "https://a.test", "pageStart": 1, "pageEnd": 2, "extra": 7}
    result = build_payload(values, product_schema, ACTOR)
    assert result.ok
    config = result.payload["input"]
    assert list(config) == [
        "url",
        "paginationPattern",
        "pageStart",
        "pageEnd",
        "productLinkIncludePatterns",
        "isBrowser",
        "extra",
    ]
    assert config["paginationPattern"] == ""
    assert config["productLinkIncludePatterns"] == []
    assert config["isBrowser"] is False
    assert result.payload["actorId"] == ACTOR


def test_url_scheme_and_ranges_are_checked(product_schema):
    values = {"url": "ftp://a.test", "pageStart": 1, "pageEnd": 501}
    result = build_payload(values, product_schema, ACTOR)
    assert result.fields == ["url", "pageEnd"]


def test_reference_is_resolved_before_attaching():
    schema = [FieldSchema(name="url", valueType="url")]
    result = build_payload(
        {"url": ""},
        schema,
        "Actor Craw by Class (Latest)",
        legacy_names={"Actor Craw by Class (Latest)": "689464ac10595b979c15002a"},
    )
    assert result.payload["actorId"] == "689464ac10595b979c15002a"
    assert not result.unverified_reference


def test_unverified_reference_is_submitted_but_flagged():
    result = build_payload({}, [], "Bar Unknown")
    assert result.ok
    assert result.payload["actorId"] == "Bar Unknown"
    assert result.unverified_reference is True


def test_metadata_defaults_and_requirements():
    schema = [FieldSchema(name="url", valueType="url", required=True)]
    metadata = TemplateMetadata(name="Tiles", tags="tiles, wall ,", actorReference=ACTOR)
    result = build_payload({"url": "https://shop.test/c"}, schema, metadata=metadata)
    assert result.ok
    payload = result.payload
    assert payload["website"] == "https://shop.test/c"
    assert payload["urlPattern"] == "*.shop.test/*"
    assert payload["category"] == "ecommerce"
    assert payload["isPublic"] is True
    assert payload["tags"] == ["tiles", "wall"]
    assert payload["actorId"] == ACTOR
    assert "actorReference" not in payload


def test_missing_metadata_is_reported():
    result = build_payload({}, [], metadata=TemplateMetadata())
    # urlPattern is derived, so it is never reported missing
    assert result.fields == ["name", "website", "actorReference"]


def test_schema_metadata_is_not_reembedded(product_schema):
    values = {"url": "https://a.test", "pageStart": 1, "pageEnd": 1}
    result = build_payload(values, product_schema, ACTOR)
    assert result.ok
    assert "label" not in result.payload["input"]
    assert all(not isinstance(v, FieldSchema) for v in result.payload["input"].values())


def test_input_holds_only_current_values():
    schema = [FieldSchema(name="url", valueType="url")]
    result = build_payload({"url": "https://new.test", "extra": 1}, schema, ACTOR)
    assert result.payload["input"] == {"url": "https://new.test", "extra": 1}

    result = build_payload({"url": "https://new.test"}, schema, ACTOR)
    assert result.payload["input"] == {"url": "https://new.test"}
