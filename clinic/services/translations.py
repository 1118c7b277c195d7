"""
Translation catalogs.

Catalogs are nested JSON objects under ``clinic/translations/<code>.json``
and are addressed with dotted keys such as ``dashboard.welcome``.  A missing
key renders as the key itself; a catalog that cannot be loaded falls back to
the Spanish one.
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from clinic.services.language import Language

logger = logging.getLogger(__name__)

CATALOG_DIR = Path(__file__).resolve().parent.parent / 'translations'
FALLBACK = Language.ES


@lru_cache(maxsize=None)
def load_catalog(language: Language) -> dict:
    path = CATALOG_DIR / f'{language.value}.json'
    try:
        with path.open(encoding='utf-8') as fh:
            return json.load(fh)
    except (OSError, ValueError) as exc:
        logger.error('Error loading translations for %s: %s', language.value, exc)
        if language is not FALLBACK:
            return load_catalog(FALLBACK)
        return {}


def translate(language, key: str) -> str:
    value = load_catalog(Language.parse(language))
    for part in key.split('.'):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            logger.warning('Translation key not found: %s', key)
            return key
    return value if isinstance(value, str) else key


class Translator:
    """``translate`` bound to one language, callable as ``t('nav.patients')``."""

    def __init__(self, language) -> None:
        self.language = Language.parse(language)

    def __call__(self, key: str) -> str:
        return translate(self.language, key)

    @property
    def catalog(self) -> dict:
        return load_catalog(self.language)
