# tests/test_overlays.py
"""
Tests for ``services.config_engine.overlays``.

The loader returns validated Pydantic models; the shipped
``configs/overlays.yaml`` must always load.
"""
import pytest

from core.exceptions import OverlayConfigError
from services.config_engine import overlays
from services.config_engine.overlays import (
    OverlayTable,
    get_overlay,
    legacy_actor_table,
    load_overlay_table,
)

DAISAN_ACTOR = "689464ac10595b979c15002a"


@pytest.fixture(autouse=True)
def _fresh_cache():
    overlays.clear_cache()
    yield
    overlays.clear_cache()


def test_shipped_file_loads():
    table = load_overlay_table()
    assert isinstance(table, OverlayTable)
    assert DAISAN_ACTOR in table.overlays


def test_known_overlay_values():
    values = get_overlay(DAISAN_ACTOR)
    assert values["websiteName"] == "DAISANSTORE"
    assert values["pageStart"] == 1
    assert values["productLinkIncludePatterns"] == ["/products/"]
    # one canonical default for the required-field booleans
    assert values["isPrice"] is True
    assert values["isThumbnail"] is True


def test_unknown_actor_has_no_overlay():
    assert get_overlay("000000000000000000000000") == {}


def test_result_is_cached_per_path():
    assert load_overlay_table() is load_overlay_table()


_LEGACY_PARAMS = list(legacy_actor_table().items())[:3]


@pytest.mark.parametrize("name,actor_id", _LEGACY_PARAMS)
def test_legacy_names_map_to_identifiers(name, actor_id):
    assert len(actor_id) == 24
    int(actor_id, 16)  # hexadecimal


def test_missing_file_raises(tmp_path):
    with pytest.raises(OverlayConfigError):
        load_overlay_table(tmp_path / "missing.yaml")


def test_legacy_name_mapped_to_non_identifier_is_rejected(tmp_path):
    path = tmp_path / "overlays.yaml"
    path.write_text("legacy_actor_names:\n  Some Crawler: not-an-id\n", encoding="utf-8")
    with pytest.raises(OverlayConfigError) as exc_info:
        load_overlay_table(path)
    assert "Some Crawler" in str(exc_info.value)


def test_non_mapping_file_is_rejected(tmp_path):
    path = tmp_path / "overlays.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(OverlayConfigError):
        load_overlay_table(path)
