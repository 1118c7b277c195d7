"""
Per-request session stores.

``LanguageMiddleware`` gives every request a language store seeded from the
session (or the browser's preference) and activates it for Django's
translation machinery.  ``RouteGuardMiddleware`` runs the route guard
against the request path and turns its redirect into a login redirect.
"""
import logging

from django.conf import settings
from django.contrib.auth.models import AnonymousUser
from django.contrib.auth.views import redirect_to_login
from django.utils import translation

from clinic.services.auth_state import AuthStore
from clinic.services.language import Language, LanguageStore, detect_language
from clinic.services.observers import Observable, Subscription
from clinic.services.route_guard import RouteGuard
from clinic.services.session_events import broadcast_language_changed

logger = logging.getLogger(__name__)


class LanguageMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response
        self.session_key = settings.MEDIXONE_LANGUAGE_SESSION_KEY

    def __call__(self, request):
        store = LanguageStore(initial=detect_language(
            saved=request.session.get(self.session_key),
            accept_language=request.META.get('HTTP_ACCEPT_LANGUAGE', ''),
            default=settings.MEDIXONE_DEFAULT_LANGUAGE,
        ))
        store.subscribe(lambda old, new: self._apply(request, new, persist=True))
        request.language_store = store
        self._apply(request, store.language)

        response = self.get_response(request)
        response.headers.setdefault('Content-Language', store.language.value)
        return response

    def _apply(self, request, language: Language, persist: bool = False):
        translation.activate(language.value)
        request.LANGUAGE_CODE = language.value
        if persist:
            request.session[self.session_key] = language.value
            broadcast_language_changed(request.session.session_key, language.value)


class RequestRouter:
    """Router collaborator for a single HTTP request.

    The route never changes during a request; ``navigate`` only records the
    target so the middleware can answer with a redirect.
    """

    def __init__(self, request):
        self._path = request.path_info
        self._changes = Observable()
        self.redirect_to = None

    def current_path(self) -> str:
        return self._path

    def navigate(self, path: str) -> None:
        self.redirect_to = path

    def subscribe(self, callback) -> Subscription:
        return self._changes.subscribe(callback)


class RouteGuardMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        auth = AuthStore()
        router = RequestRouter(request)
        guard = RouteGuard(
            auth,
            router,
            login_path=settings.MEDIXONE_LOGIN_PATH,
            public_prefixes=settings.MEDIXONE_GUARD_EXEMPT_PREFIXES,
        )
        with guard:
            try:
                user = request.user
                authenticated = user.is_authenticated
            except Exception as exc:
                logger.exception('could not resolve the request user')
                auth.fail(exc)
                # Later readers (DRF, templates) see the same anonymous user
                request.user = AnonymousUser()
            else:
                auth.resolve(user if authenticated else None)
        request.auth_store = auth
        request.route_guard = guard

        if router.redirect_to is not None:
            return redirect_to_login(request.get_full_path(), router.redirect_to)
        return self.get_response(request)
