"""Localised UI strings.

Catalogues are nested JSON objects under ``nestro/locales/<language>.json``
and are looked up with dotted keys (``"auth.linkError"``). A key with no
translation resolves to itself so a missing string is visible rather than
blank.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_LOCALES_DIR = Path(__file__).parent / "locales"


@dataclass(frozen=True)
class Translator:
    """Dotted-key lookup over one language catalogue."""

    language: str
    catalogue: dict[str, Any]

    def t(self, key: str) -> str:
        node: Any = self.catalogue
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                logger.debug("Missing translation: %s [%s]", key, self.language)
                return key
            node = node[part]
        if not isinstance(node, str):
            return key
        return node


def load_catalogue(language: str) -> dict[str, Any]:
    """Read a language catalogue from the locales directory.

    Raises:
        FileNotFoundError: If no catalogue ships for ``language``.
    """
    path = _LOCALES_DIR / f"{language}.json"
    return json.loads(path.read_text(encoding="utf-8"))


@lru_cache(maxsize=8)
def get_translator(language: str) -> Translator:
    """Return the cached translator for ``language``."""
    return Translator(language=language, catalogue=load_catalogue(language))
