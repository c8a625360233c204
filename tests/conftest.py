"""Shared fixtures for cipher312 tests."""

import pytest

from cipher312.codec import Codec
from cipher312.symbols import mappings_for

# Messages both cipher versions must decode identically
SHARED_VECTORS = [
    ("54634341653520343124126312", "MISSION START"),
    ("1321521321353", "HELLO"),
    ("31561652412661031323424431215", "TRINARY UPDATE"),
    ("3515413121321526031323424431215", "WEATHER UPDATE"),
    ("3121534312", "TEST"),
    ("16555152604353261505441652312155241524315", "INNER CORE MAINTENANCE"),
    (
        "2656161216521504321315412641524315012443124104412345326231312165352",
        "ROUTINE CLEARANCE DATA ABSORPTION",
    ),
    ("26153431326261546121512104423123154612165352", "RESURRECTED AFFECTION"),
    ("31561652412661031323424431215121", "TRINARY UPDATED"),
    ("41fk", "A¿fk?"),
]

GHOST = "794842328138412791"


@pytest.fixture
def codec() -> Codec:
    """Return a fresh codec with the default depth limit."""
    return Codec()


@pytest.fixture
def v1_mappings():
    return mappings_for("v1")


@pytest.fixture
def v2_mappings():
    return mappings_for("v2")
