# tests/conftest.py
import sys
from pathlib import Path

import pytest

repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from models.field_schema import FieldSchema  # noqa: E402

ACTOR_ID = "689464ac10595b979c15002a"


@pytest.fixture
def product_schema():
    """A trimmed version of the product-crawler actor schema."""
    return (
        FieldSchema(name="url", label="Start URL", valueType="url", required=True, default=""),
        FieldSchema(name="paginationPattern", valueType="string", default="?page="),
        FieldSchema(name="pageStart", valueType="integer", default=1, min=1),
        FieldSchema(name="pageEnd", valueType="integer", default=2, min=1, max=500),
        FieldSchema(name="productLinkIncludePatterns", valueType="stringArray"),
        FieldSchema(name="isBrowser", valueType="boolean", default=False),
    )


@pytest.fixture
def wire_fields():
    """Field descriptors as the backend sends them."""
    return [
        {"name": "url", "label": "URL", "type": "url", "required": True, "default": ""},
        {"name": "pageStart", "label": "Page start", "type": "number", "default": 1, "min": 1},
        {"name": "excludePatterns", "label": "Exclude", "type": "array", "default": []},
        {"name": "isPrice", "label": "Has price", "type": "boolean", "default": True},
        {"name": "titleClass", "label": "Title selector", "type": "text",
         "placeholder": "h1.product-title"},
    ]
