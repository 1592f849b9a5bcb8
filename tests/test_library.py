"""
Tests for the saved-palette library and its key-value store.
"""

import pytest

from palettelab.services.colors.errors import InvalidColorFormat
from palettelab.services.library import COLOR_COUNT_KEY, PALETTES_KEY, InMemoryStore, PaletteLibrary


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def library(store):
    return PaletteLibrary(store=store, max_palettes=3)


class TestInMemoryStore:
    """Test get/set/subscribe"""

    def test_get_default(self, store):
        assert store.get("missing") is None
        assert store.get("missing", 7) == 7

    def test_subscribers_notified(self, store):
        events = []
        unsubscribe = store.subscribe(lambda key, value: events.append((key, value)))

        store.set("theme", "dark")
        unsubscribe()
        store.set("theme", "light")

        assert events == [("theme", "dark")]
        assert store.get("theme") == "light"


class TestPaletteLibrary:
    """Test saving, listing and deleting palettes"""

    def test_save_normalizes_and_names(self, library):
        saved = library.save(["#ff6b6b", "#4ecdc4", "#45b7d1"])

        assert saved.colors == ["#FF6B6B", "#4ECDC4", "#45B7D1"]
        assert saved.name == "Palette 1"
        assert library.get(saved.id) == saved

    def test_newest_first(self, library):
        first = library.save(["#000000"], name="first")
        second = library.save(["#FFFFFF"], name="second")

        assert [p.id for p in library.list()] == [second.id, first.id]

    def test_capacity_drops_oldest(self, library):
        saved = [library.save(["#111111"], name=f"p{i}") for i in range(4)]
        names = [p.name for p in library.list()]

        assert names == ["p3", "p2", "p1"]
        assert library.get(saved[0].id) is None

    def test_delete(self, library):
        saved = library.save(["#123456"], image_ref="photo.jpg")

        assert library.delete(saved.id) is True
        assert library.delete(saved.id) is False
        assert library.list() == []

    def test_empty_palette_rejected(self, library):
        with pytest.raises(ValueError):
            library.save([])

    def test_invalid_color_rejected(self, library):
        with pytest.raises(InvalidColorFormat):
            library.save(["#12345G"])

    def test_persisted_through_store(self, store, library):
        events = []
        store.subscribe(lambda key, value: events.append(key))
        saved = library.save(["#ABCDEF"])

        assert events == [PALETTES_KEY]
        assert PaletteLibrary(store=store).get(saved.id).colors == ["#ABCDEF"]


class TestColorCountPreference:
    """Test the stored palette size preference"""

    def test_default(self, library):
        assert library.color_count == 5

    @pytest.mark.parametrize("value,expected", [(1, 3), (6, 6), (20, 8)])
    def test_clamped(self, store, library, value, expected):
        library.color_count = value
        assert library.color_count == expected
        assert store.get(COLOR_COUNT_KEY) == expected
