"""
Authentication state store.

The state is a closed union: :class:`Loading` while the authentication
collaborator has not answered, :class:`Authenticated` with the user once it
has, and :class:`Anonymous` when there is no user (never logged in, logged
out, expired, or the collaborator failed).
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

from clinic.exceptions import AuthResolutionFailure
from clinic.services.observers import Observable, Subscription

logger = logging.getLogger('clinic.auth')


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Authenticated:
    user: Any


@dataclass(frozen=True)
class Anonymous:
    # None, 'logout', 'expired' or 'failure'
    reason: Optional[str] = None


AuthState = Union[Loading, Authenticated, Anonymous]


def state_for_user(user) -> AuthState:
    if user is None or not getattr(user, 'is_authenticated', True):
        return Anonymous()
    return Authenticated(user)


class AuthStore:
    def __init__(self, state: AuthState | None = None) -> None:
        self._state: AuthState = state if state is not None else Loading()
        self._changes = Observable()

    @property
    def state(self) -> AuthState:
        return self._state

    def current_user(self):
        if isinstance(self._state, Authenticated):
            return self._state.user
        return None

    def is_loading(self) -> bool:
        return isinstance(self._state, Loading)

    def subscribe(self, callback: Callable[[AuthState, AuthState], None]) -> Subscription:
        return self._changes.subscribe(callback)

    def begin_loading(self) -> None:
        self._set(Loading())

    def resolve(self, user) -> AuthState:
        """The collaborator answered; ``user`` may be None or an anonymous user."""
        self._set(state_for_user(user))
        return self._state

    def fail(self, error: BaseException) -> AuthState:
        logger.warning('auth resolution failed: %s', error)
        self._set(Anonymous(reason='failure'))
        return self._state

    def invalidate(self, reason: str = 'logout') -> AuthState:
        self._set(Anonymous(reason=reason))
        return self._state

    async def resolve_with(self, loader: Callable[[], Awaitable[Any]], timeout: float) -> AuthState:
        """Await ``loader`` for at most ``timeout`` seconds and resolve with its result.

        Errors and timeouts both end in :class:`Anonymous` so that nothing
        waiting on this store stays in :class:`Loading` indefinitely.
        """
        self.begin_loading()
        try:
            user = await asyncio.wait_for(loader(), timeout)
        except asyncio.TimeoutError:
            return self.fail(AuthResolutionFailure(f'no answer after {timeout}s'))
        except Exception as exc:
            return self.fail(AuthResolutionFailure(str(exc) or exc.__class__.__name__))
        return self.resolve(user)

    def _set(self, new: AuthState) -> None:
        old = self._state
        if new == old:
            return
        self._state = new
        self._changes.emit(old, new)


def describe(state: AuthState) -> dict:
    """JSON-ready view of an auth state."""
    if isinstance(state, Authenticated):
        user = state.user
        return {
            'status': 'authenticated',
            'user': {
                'id': getattr(user, 'id', None),
                'email': getattr(user, 'email', ''),
                'name': (user.get_full_name() if hasattr(user, 'get_full_name') else '') or str(user),
                'role': getattr(user, 'role', None),
            },
        }
    if isinstance(state, Anonymous):
        return {'status': 'anonymous', 'reason': state.reason}
    return {'status': 'loading'}
