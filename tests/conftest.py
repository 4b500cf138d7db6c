import io

import pytest
from PIL import Image

from garden_tutor.catalog import load_base_catalog
from garden_tutor.db import KeyValueStore
from garden_tutor.models import LightRequirement, Plant


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_garden.db")
    return db_path


@pytest.fixture
def store(tmp_db):
    return KeyValueStore(tmp_db)


@pytest.fixture
def plants():
    return load_base_catalog()


@pytest.fixture
def small_catalog():
    return [
        Plant(id="a", common_name="Alpha", scientific_name="Alpha alba", light=LightRequirement.FULL_SUN, image_url="http://img/a.jpg"),
        Plant(id="b", common_name="Beta", scientific_name="Beta bella", light=LightRequirement.SHADE, image_url="http://img/b.jpg"),
        Plant(id="c", common_name="Gamma", scientific_name="Gamma grata", light=LightRequirement.PARTIAL_SHADE, image_url="http://img/c.jpg"),
        Plant(id="d", common_name="Delta", scientific_name="Delta dura", light=LightRequirement.FULL_SUN, image_url="http://img/d.jpg"),
        Plant(id="e", common_name="Epsilon", scientific_name="Epsilon erecta", light=LightRequirement.SHADE, image_url="http://img/e.jpg"),
    ]


@pytest.fixture
def make_image():
    """Return encoded image bytes of the given size."""
    def _make(width, height, fmt="PNG", mode="RGB"):
        buf = io.BytesIO()
        Image.new(mode, (width, height), color=(40, 160, 60) if mode == "RGB" else 0).save(buf, format=fmt)
        return buf.getvalue()
    return _make
