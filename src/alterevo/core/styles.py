"""Style catalog loaded from JSON.

The catalog file has the shape ``{"styles": [{...}, ...]}`` where each entry
matches :class:`Style` (camelCase or snake_case keys).  The packaged
``data/styles.json`` is used unless a different file is configured.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter

from .models import Style

logger = logging.getLogger(__name__)

DEFAULT_STYLES_FILE = Path(__file__).resolve().parent.parent / "data" / "styles.json"

_styles_adapter = TypeAdapter(list[Style])


class StyleCatalog:
    """Ordered, read-only collection of styles keyed by id."""

    def __init__(self, styles: list[Style]) -> None:
        self._styles: dict[str, Style] = {}
        for style in styles:
            if style.id in self._styles:
                raise ValueError(f"Duplicate style id: {style.id}")
            self._styles[style.id] = style

    @classmethod
    def from_file(cls, path: Path | None = None) -> StyleCatalog:
        """Load a catalog from ``path`` (default: the packaged catalog).

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not a valid catalog
        """
        path = Path(path) if path else DEFAULT_STYLES_FILE
        with open(path, encoding="utf-8") as handle:
            data = json.load(handle)

        if not isinstance(data, dict) or not isinstance(data.get("styles"), list):
            raise ValueError(f"Style catalog {path} must contain a 'styles' list")

        catalog = cls(_styles_adapter.validate_python(data["styles"]))
        logger.info(f"Loaded {len(catalog)} styles from {path}")
        return catalog

    def get(self, style_id: str) -> Style:
        """Return the style with ``style_id``.

        Raises:
            KeyError: If no such style exists
        """
        try:
            return self._styles[style_id]
        except KeyError:
            raise KeyError(f"Unknown style: {style_id}") from None

    def list_styles(self) -> list[Style]:
        """Return all styles in catalog order."""
        return list(self._styles.values())

    def __len__(self) -> int:
        return len(self._styles)

    def __contains__(self, style_id: str) -> bool:
        return style_id in self._styles
