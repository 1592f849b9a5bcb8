"""
PaletteLab Palette Library
Saved palettes and user preferences kept in an injected key-value store.
"""
import threading
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from palettelab.config import config
from palettelab.services.colors.conversion import normalize_hex

Listener = Callable[[str, Any], None]

PALETTES_KEY = "palettes"
COLOR_COUNT_KEY = "color_count"


class KeyValueStore(ABC):
    """Persistence collaborator with get/set/subscribe semantics."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Get a stored value."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value and notify subscribers."""
        pass

    @abstractmethod
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns an unsubscribe callable."""
        pass


class InMemoryStore(KeyValueStore):
    """Process-local store used by default and in tests."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value
            listeners = list(self._listeners)
        for listener in listeners:
            listener(key, value)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe


@dataclass
class SavedPalette:
    """A palette saved to the library."""
    id: str
    name: str
    colors: List[str]
    image_ref: Optional[str]
    created_at: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class PaletteLibrary:
    """Newest-first collection of saved palettes."""

    def __init__(self, store: Optional[KeyValueStore] = None, max_palettes: Optional[int] = None):
        self.store = store if store is not None else InMemoryStore()
        self.max_palettes = max_palettes or config.LIBRARY_MAX_PALETTES

    def _load(self) -> List[SavedPalette]:
        return [SavedPalette(**entry) for entry in self.store.get(PALETTES_KEY, [])]

    def _save_all(self, palettes: List[SavedPalette]) -> None:
        self.store.set(PALETTES_KEY, [p.to_dict() for p in palettes])

    def save(self, colors: List[str], name: Optional[str] = None,
             image_ref: Optional[str] = None) -> SavedPalette:
        """
        Save a palette at the front of the library.

        Raises:
            ValueError: If colors is empty
            InvalidColorFormat: If a color is not #RRGGBB
        """
        if not colors:
            raise ValueError("Cannot save an empty palette")

        palettes = self._load()
        palette = SavedPalette(
            id=uuid.uuid4().hex[:12],
            name=name or f"Palette {len(palettes) + 1}",
            colors=[normalize_hex(c) for c in colors],
            image_ref=image_ref,
            created_at=time.time(),
        )
        palettes.insert(0, palette)
        if len(palettes) > self.max_palettes:
            dropped = palettes[self.max_palettes:]
            palettes = palettes[:self.max_palettes]
            logger.info(f"Library full, dropped {len(dropped)} oldest palette(s)")

        self._save_all(palettes)
        logger.debug(f"Saved palette {palette.id} ({len(palette.colors)} colors)")
        return palette

    def list(self) -> List[SavedPalette]:
        return self._load()

    def get(self, palette_id: str) -> Optional[SavedPalette]:
        return next((p for p in self._load() if p.id == palette_id), None)

    def delete(self, palette_id: str) -> bool:
        palettes = self._load()
        remaining = [p for p in palettes if p.id != palette_id]
        if len(remaining) == len(palettes):
            return False
        self._save_all(remaining)
        return True

    @property
    def color_count(self) -> int:
        return int(self.store.get(COLOR_COUNT_KEY, config.DEFAULT_COLOR_COUNT))

    @color_count.setter
    def color_count(self, value: int) -> None:
        clamped = max(config.MIN_COLOR_COUNT, min(config.MAX_COLOR_COUNT, int(value)))
        self.store.set(COLOR_COUNT_KEY, clamped)
