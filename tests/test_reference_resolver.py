# tests/test_reference_resolver.py
"""
Resolution priority: embedded object id → identifier string → allow-listed
legacy name → unchanged but flagged.
"""
from models.actor_reference import EmbeddedReference, Identifier, LegacyName
from services.config_engine.reference_resolver import (
    campaign_actor_reference,
    classify_reference,
    resolve_actor_reference,
)

LEGACY = {"Actor Craw by Class (Latest)": "689464ac10595b979c15002a"}


def test_embedded_object_resolves_to_id_never_name():
    resolved = resolve_actor_reference({"id": "507f1f77bcf86cd799439011", "name": "Foo"})
    assert resolved.actor_id == "507f1f77bcf86cd799439011"
    assert resolved.display_name == "Foo"
    assert resolved.unverified is False


def test_embedded_object_with_mongo_style_id():
    resolved = resolve_actor_reference({"_id": "507f1f77bcf86cd799439011"})
    assert resolved.actor_id == "507f1f77bcf86cd799439011"


def test_identifier_string_is_returned_unchanged():
    resolved = resolve_actor_reference("507f1f77bcf86cd799439011", LEGACY)
    assert resolved.actor_id == "507f1f77bcf86cd799439011"
    assert not resolved.unverified


def test_known_legacy_name_is_mapped():
    resolved = resolve_actor_reference("Actor Craw by Class (Latest)", LEGACY)
    assert resolved.actor_id == "689464ac10595b979c15002a"
    assert resolved.display_name == "Actor Craw by Class (Latest)"
    assert not resolved.unverified


def test_unmapped_legacy_name_is_flagged():
    resolved = resolve_actor_reference("Bar Unknown", LEGACY)
    assert resolved.actor_id == "Bar Unknown"
    assert resolved.unverified is True


def test_legacy_lookup_does_not_guess():
    """Case differences are not matched – the table is an explicit allow-list."""
    resolved = resolve_actor_reference("actor craw by class (latest)", LEGACY)
    assert resolved.unverified is True


def test_empty_reference_is_flagged():
    assert resolve_actor_reference(None).unverified
    assert resolve_actor_reference("   ").actor_id == ""


def test_custom_identifier_pattern():
    resolved = resolve_actor_reference("act_123", id_pattern=r"^act_\d+$")
    assert resolved.actor_id == "act_123"
    assert not resolved.unverified


def test_classification():
    assert isinstance(classify_reference("507f1f77bcf86cd799439011"), Identifier)
    assert isinstance(classify_reference({"id": "x1", "name": "X"}), EmbeddedReference)
    assert isinstance(classify_reference("Some Crawler"), LegacyName)
    assert isinstance(classify_reference({"name": "Some Crawler"}), LegacyName)
    assert isinstance(classify_reference([{"id": "x1"}]), EmbeddedReference)
    assert classify_reference([]) is None


def test_campaign_prefers_original_actor_id():
    campaign = {"actorIdOriginal": "507f1f77bcf86cd799439011", "actorId": {"name": "Foo"}}
    assert campaign_actor_reference(campaign) == "507f1f77bcf86cd799439011"
    assert campaign_actor_reference({"actorId": "abc"}) == "abc"
