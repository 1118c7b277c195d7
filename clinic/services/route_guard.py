"""
Route guard.

Watches an :class:`~clinic.services.auth_state.AuthStore` and a router and
sends unauthenticated navigations to the login route.

States::

    LOADING --user--> AUTHENTICATED --logout/expiry--> UNAUTHENTICATED
    LOADING --none/error/timeout--> UNAUTHENTICATED --login--> AUTHENTICATED

No redirect is ever issued while LOADING.  Entering UNAUTHENTICATED, or a
route change while UNAUTHENTICATED, issues one ``navigate(login_path)``
unless the current route is the login route (or a public prefix) or a
redirect is already pending.  A redirect stays pending until the router
reports a route change or a user signs in; reloading the auth state does
not clear it.

A guard only reacts between :meth:`RouteGuard.mount` and
:meth:`RouteGuard.unmount`; anything arriving after unmount is a stale
transition and is dropped.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Iterable, Protocol

from clinic.exceptions import StaleTransition
from clinic.services.auth_state import AuthState, AuthStore, Authenticated, Loading
from clinic.services.observers import CancellationToken, Observable, Subscription

logger = logging.getLogger('clinic.guard')


class GuardState(str, Enum):
    LOADING = 'LOADING'
    AUTHENTICATED = 'AUTHENTICATED'
    UNAUTHENTICATED = 'UNAUTHENTICATED'


class Router(Protocol):
    def current_path(self) -> str: ...

    def navigate(self, path: str) -> None: ...

    def subscribe(self, callback: Callable[[str], None]) -> Subscription: ...


def guard_state_for(auth_state: AuthState) -> GuardState:
    if isinstance(auth_state, Loading):
        return GuardState.LOADING
    if isinstance(auth_state, Authenticated):
        return GuardState.AUTHENTICATED
    return GuardState.UNAUTHENTICATED


class RouteGuard:
    def __init__(
        self,
        auth: AuthStore,
        router: Router,
        login_path: str = '/login',
        public_prefixes: Iterable[str] = (),
    ) -> None:
        self._auth = auth
        self._router = router
        self.login_path = login_path
        self.public_prefixes = tuple(public_prefixes)
        self.state = GuardState.LOADING
        self.redirect_pending = False
        self._token: CancellationToken | None = None
        self._subscriptions: list[Subscription] = []
        self._changes = Observable()

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    @property
    def mounted(self) -> bool:
        return self._token is not None and not self._token.cancelled

    def mount(self) -> 'RouteGuard':
        if self.mounted:
            return self
        token = CancellationToken()
        self._token = token
        self._subscriptions = [
            self._auth.subscribe(lambda old, new: self._on_auth(token, new)),
            self._router.subscribe(lambda path: self._on_route(token, path)),
        ]
        self._on_auth(token, self._auth.state)
        return self

    def unmount(self) -> None:
        if self._token is None:
            return
        self._token.cancel()
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []

    def __enter__(self) -> 'RouteGuard':
        return self.mount()

    def __exit__(self, *exc_info) -> None:
        self.unmount()

    def subscribe(self, callback: Callable[[GuardState, GuardState], None]) -> Subscription:
        """Observe guard state changes as ``(old, new)``."""
        return self._changes.subscribe(callback)

    # ------------------------------------------------------------------
    # transitions
    # ------------------------------------------------------------------
    def is_public(self, path: str) -> bool:
        if path == self.login_path:
            return True
        return any(path.startswith(prefix) for prefix in self.public_prefixes)

    def _on_auth(self, token: CancellationToken, auth_state: AuthState) -> None:
        try:
            token.raise_if_cancelled()
        except StaleTransition:
            logger.debug('dropping stale auth transition to %s', auth_state)
            return
        old, new = self.state, guard_state_for(auth_state)
        self.state = new
        if old is not new:
            logger.debug('guard %s -> %s at %s', old.value, new.value, self._router.current_path())
            self._changes.emit(old, new)
            if token.cancelled:
                # a listener unmounted the guard
                return
        if new is GuardState.UNAUTHENTICATED:
            self._redirect_if_needed()
        elif new is GuardState.AUTHENTICATED:
            self.redirect_pending = False

    def _on_route(self, token: CancellationToken, path: str) -> None:
        try:
            token.raise_if_cancelled()
        except StaleTransition:
            logger.debug('dropping stale route change to %s', path)
            return
        self.redirect_pending = False
        if self.state is GuardState.UNAUTHENTICATED:
            self._redirect_if_needed()

    def _redirect_if_needed(self) -> None:
        path = self._router.current_path()
        if self.redirect_pending or self.is_public(path):
            return
        self.redirect_pending = True
        logger.info('redirecting unauthenticated navigation %s to %s', path, self.login_path)
        self._router.navigate(self.login_path)
