"""Language selector control: toggles or picks the session language."""
from __future__ import annotations

import logging

from clinic.services.language import Language, LanguageStore, other

logger = logging.getLogger('clinic.language')


class LanguageSelector:
    def __init__(self, store: LanguageStore) -> None:
        self._store = store

    @property
    def language(self) -> Language:
        return self._store.language

    def toggle(self) -> Language:
        old = self._store.language
        new = self._store.set_language(other(old))
        self._record(old, new)
        return new

    def select(self, value) -> Language:
        """Switch to ``value``; raises ``InvalidLanguage`` for unknown codes."""
        old = self._store.language
        new = self._store.set_language(value)
        if new is not old:
            self._record(old, new)
        return new

    def choices(self) -> list[dict]:
        current = self._store.language
        return [
            {'code': lang.value, 'name': lang.label, 'flag': lang.flag, 'selected': lang is current}
            for lang in Language
        ]

    @staticmethod
    def _record(old: Language, new: Language) -> None:
        logger.info(
            'language changed: %s -> %s', old.value, new.value,
            extra={'language_from': old.value, 'language_to': new.value},
        )
