"""
Language state store.

Holds the display language of one client session.  The value is always one
of the members of :class:`Language`; anything else is rejected with
:class:`~clinic.exceptions.InvalidLanguage` and the previous value is kept.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable

from clinic.exceptions import InvalidLanguage
from clinic.services.observers import Observable, Subscription


class Language(str, Enum):
    ES = 'es'
    EN = 'en'

    @classmethod
    def parse(cls, value) -> 'Language':
        """Return the member for ``value`` (a member or its code)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value == value:
                    return member
        raise InvalidLanguage(value)

    @property
    def label(self) -> str:
        return LANGUAGE_LABELS[self][0]

    @property
    def flag(self) -> str:
        return LANGUAGE_LABELS[self][1]


LANGUAGE_LABELS = {
    Language.ES: ('Español', '🇪🇸'),
    Language.EN: ('English', '🇺🇸'),
}


def other(language: Language) -> Language:
    """The toggle target: the other member of the two-language set."""
    return Language.EN if Language.parse(language) is Language.ES else Language.ES


class LanguageStore:
    """Current language plus change notification.

    Subscribers are called with ``(old, new)`` after every real change.
    Setting the language to its current value is accepted silently.
    """

    def __init__(self, initial=Language.ES) -> None:
        self._language = Language.parse(initial)
        self._changes = Observable()

    @property
    def language(self) -> Language:
        return self._language

    def set_language(self, value) -> Language:
        new = Language.parse(value)
        old = self._language
        if new is old:
            return old
        self._language = new
        self._changes.emit(old, new)
        return new

    def subscribe(self, callback: Callable[[Language, Language], None]) -> Subscription:
        return self._changes.subscribe(callback)


def detect_language(saved=None, accept_language: str = '', default=Language.ES) -> Language:
    """Pick the initial language for a new client session.

    A saved preference wins; otherwise a browser preferring English gets
    English and everyone else the default.
    """
    if saved:
        try:
            return Language.parse(saved)
        except InvalidLanguage:
            pass
    preferred = (accept_language or '').split(',')[0].strip().lower()
    if preferred.startswith('en'):
        return Language.EN
    return Language.parse(default)
