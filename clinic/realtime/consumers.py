"""
Session socket.

One connection mirrors one open browser tab: it owns a language store, an
auth store and a route guard, and reports their changes as JSON frames.

Client frames::

    {"type": "route", "path": "/dashboard"}
    {"type": "language.toggle"}
    {"type": "language.set", "language": "en"}

Server frames are ``state``, ``navigate``, ``language`` and ``error``.
"""
import json
import logging
from urllib.parse import parse_qs

from channels.auth import get_user
from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings

from clinic.exceptions import InvalidLanguage
from clinic.services.auth_state import AuthStore, describe
from clinic.services.language import Language, LanguageStore, detect_language
from clinic.services.language_selector import LanguageSelector
from clinic.services.observers import Observable, Subscription
from clinic.services.route_guard import RouteGuard
from clinic.services.session_events import session_group, user_group

logger = logging.getLogger(__name__)


class SocketRouter:
    """Router collaborator backed by the client's own navigation.

    ``navigate`` asks the client to move; the route only changes when the
    client reports it with a ``route`` frame.
    """

    def __init__(self, outbox: list, path: str = '/') -> None:
        self._outbox = outbox
        self._path = path
        self._changes = Observable()

    def current_path(self) -> str:
        return self._path

    def navigate(self, path: str) -> None:
        self._outbox.append({'type': 'navigate', 'path': path})

    def change(self, path: str) -> None:
        self._path = path
        self._changes.emit(path)

    def subscribe(self, callback) -> Subscription:
        return self._changes.subscribe(callback)


def _header(scope, name: bytes) -> str:
    for key, value in scope.get('headers', []):
        if key.lower() == name:
            return value.decode('latin-1')
    return ''


class SessionConsumer(AsyncWebsocketConsumer):
    async def connect(self):
        self.outbox = []
        self.groups_joined = []
        query = parse_qs(self.scope.get('query_string', b'').decode())
        path = (query.get('path') or ['/'])[0]
        if not path.startswith('/'):
            path = '/'

        self.language = LanguageStore(initial=detect_language(
            saved=await self._saved_language(),
            accept_language=_header(self.scope, b'accept-language'),
            default=settings.MEDIXONE_DEFAULT_LANGUAGE,
        ))
        self.auth = AuthStore()
        self.router = SocketRouter(self.outbox, path)
        self.guard = RouteGuard(
            self.auth,
            self.router,
            login_path=settings.MEDIXONE_LOGIN_PATH,
            public_prefixes=settings.MEDIXONE_GUARD_EXEMPT_PREFIXES,
        )
        self.subscriptions = [
            self.guard.subscribe(lambda old, new: self.outbox.append(self._state_frame())),
            self.language.subscribe(lambda old, new: self.outbox.append(self._language_frame())),
        ]

        await self.accept()
        self.guard.mount()
        await self.send_frame(self._state_frame())

        await self.auth.resolve_with(self.load_user, settings.MEDIXONE_AUTH_TIMEOUT)
        user = self.auth.current_user()
        if user is not None:
            await self._join(user_group(user.pk))
        session = self.scope.get('session')
        if session is not None and session.session_key:
            await self._join(session_group(session.session_key))
        await self.flush()

    async def disconnect(self, close_code):
        guard = getattr(self, 'guard', None)
        if guard is None:
            return
        guard.unmount()
        for subscription in self.subscriptions:
            subscription.unsubscribe()
        for group in self.groups_joined:
            await self.channel_layer.group_discard(group, self.channel_name)

    async def load_user(self):
        """Ask the session for its user; None when nobody is logged in."""
        user = await get_user(self.scope)
        return user if user.is_authenticated else None

    async def receive(self, text_data=None, bytes_data=None):
        if not text_data:
            return
        try:
            data = json.loads(text_data)
        except ValueError:
            await self.send_error(4000, 'invalid_json')
            return
        if not isinstance(data, dict):
            await self.send_error(4001, 'invalid_payload')
            return

        kind = data.get('type')
        if kind == 'route':
            path = data.get('path')
            if not isinstance(path, str) or not path.startswith('/'):
                await self.send_error(4003, 'invalid_path')
                return
            self.router.change(path)
        elif kind == 'language.toggle':
            await self._change_language(LanguageSelector(self.language).toggle)
        elif kind == 'language.set':
            await self._change_language(lambda: LanguageSelector(self.language).select(data.get('language')))
        else:
            await self.send_error(4002, 'unsupported_type')
            return
        await self.flush()

    # group_send handlers
    async def session_invalidated(self, event):
        self.auth.invalidate(event.get('reason') or 'logout')
        await self.flush()

    async def language_changed(self, event):
        try:
            self.language.set_language(event.get('language'))
        except InvalidLanguage:
            logger.warning('ignoring language broadcast %r', event.get('language'))
            return
        await self.flush()

    # frames
    def _state_frame(self) -> dict:
        return {
            'type': 'state',
            'guard': self.guard.state.value,
            'auth': describe(self.auth.state),
            'path': self.router.current_path(),
            'language': self.language.language.value,
        }

    def _language_frame(self) -> dict:
        return {
            'type': 'language',
            'language': self.language.language.value,
            'choices': LanguageSelector(self.language).choices(),
        }

    async def send_frame(self, frame: dict):
        await self.send(text_data=json.dumps(frame, ensure_ascii=False))

    async def send_error(self, code: int, message: str, detail: str = ''):
        frame = {'type': 'error', 'code': code, 'message': message}
        if detail:
            frame['detail'] = detail
        await self.send_frame(frame)

    async def flush(self):
        while self.outbox:
            await self.send_frame(self.outbox.pop(0))

    # helpers
    async def _join(self, group: str):
        await self.channel_layer.group_add(group, self.channel_name)
        self.groups_joined.append(group)

    async def _change_language(self, action):
        old = self.language.language
        try:
            new = action()
        except InvalidLanguage as exc:
            await self.send_error(4004, 'invalid_language', str(exc))
            return
        if new is old:
            return
        session = self.scope.get('session')
        if session is None:
            return
        await self._save_language(new)
        if session.session_key:
            # Other tabs of the same browser session follow the change
            await self.channel_layer.group_send(
                session_group(session.session_key),
                {'type': 'language.changed', 'language': new.value},
            )

    @database_sync_to_async
    def _saved_language(self):
        session = self.scope.get('session')
        if session is None:
            return None
        return session.get(settings.MEDIXONE_LANGUAGE_SESSION_KEY)

    @database_sync_to_async
    def _save_language(self, language: Language):
        session = self.scope['session']
        session[settings.MEDIXONE_LANGUAGE_SESSION_KEY] = language.value
        session.save()
