import asyncio
from types import SimpleNamespace

import pytest

from clinic.services.auth_state import Anonymous, AuthStore, Authenticated, Loading, describe
from clinic.services.observers import Observable
from clinic.services.route_guard import GuardState, RouteGuard, guard_state_for


class FakeRouter:
    def __init__(self, path='/'):
        self.path = path
        self.calls = []
        self._changes = Observable()

    def current_path(self):
        return self.path

    def navigate(self, path):
        self.calls.append(path)

    def go(self, path):
        self.path = path
        self._changes.emit(path)

    def subscribe(self, callback):
        return self._changes.subscribe(callback)


def make_guard(path='/dashboard', **kwargs):
    auth = AuthStore()
    router = FakeRouter(path)
    guard = RouteGuard(auth, router, **kwargs).mount()
    return auth, router, guard


USER = SimpleNamespace(id='u1', is_authenticated=True)


@pytest.mark.parametrize('path', ['/', '/dashboard', '/patients/new', '/login'])
def test_no_navigation_while_loading(path):
    auth, router, guard = make_guard(path)
    router.go(path + 'x')
    auth.begin_loading()
    assert guard.state is GuardState.LOADING
    assert router.calls == []


def test_user_at_dashboard_ends_authenticated_without_redirect():
    auth, router, guard = make_guard('/dashboard')
    auth.resolve(USER)
    assert guard.state is GuardState.AUTHENTICATED
    assert router.calls == []


def test_no_user_at_patient_form_redirects_once():
    auth, router, guard = make_guard('/patients/new')
    auth.resolve(None)
    assert guard.state is GuardState.UNAUTHENTICATED
    assert router.calls == ['/login']


def test_no_user_at_login_route_does_not_navigate():
    auth, router, guard = make_guard('/login')
    auth.resolve(None)
    assert guard.state is GuardState.UNAUTHENTICATED
    assert router.calls == []


def test_public_prefix_is_not_redirected():
    auth, router, guard = make_guard('/healthz', public_prefixes=('/healthz',))
    auth.resolve(None)
    assert router.calls == []


def test_reentering_unauthenticated_while_pending_does_not_duplicate():
    auth, router, guard = make_guard('/appointments')
    auth.resolve(None)
    auth.invalidate('expired')
    auth.fail(RuntimeError('boom'))
    assert router.calls == ['/login']
    assert guard.redirect_pending


def test_reloading_auth_on_the_same_route_keeps_the_pending_redirect():
    auth, router, guard = make_guard('/dashboard')
    auth.resolve(None)
    auth.begin_loading()
    assert guard.state is GuardState.LOADING
    assert guard.redirect_pending
    auth.resolve(None)
    assert router.calls == ['/login']


def test_route_change_then_reload_redirects_once_per_route():
    auth, router, guard = make_guard('/dashboard')
    auth.resolve(None)
    router.go('/appointments')
    auth.begin_loading()
    auth.resolve(None)
    # the route change itself redirected; reloading adds nothing while pending
    assert router.calls == ['/login', '/login']


def test_route_change_while_unauthenticated_redirects_again():
    auth, router, guard = make_guard('/appointments')
    auth.resolve(None)
    router.go('/login')
    assert not guard.redirect_pending
    router.go('/dashboard')
    assert router.calls == ['/login', '/login']


def test_logout_after_authentication_redirects():
    auth, router, guard = make_guard('/dashboard')
    states = []
    guard.subscribe(lambda old, new: states.append((old, new)))
    auth.resolve(USER)
    auth.invalidate('logout')
    assert states == [
        (GuardState.LOADING, GuardState.AUTHENTICATED),
        (GuardState.AUTHENTICATED, GuardState.UNAUTHENTICATED),
    ]
    assert router.calls == ['/login']


def test_login_after_redirect_clears_pending():
    auth, router, guard = make_guard('/dashboard')
    auth.resolve(None)
    auth.resolve(USER)
    assert guard.state is GuardState.AUTHENTICATED
    assert not guard.redirect_pending


def test_resolution_after_unmount_is_ignored():
    auth, router, guard = make_guard('/patients/new')
    guard.unmount()
    auth.resolve(None)
    router.go('/dashboard')
    assert guard.state is GuardState.LOADING
    assert router.calls == []
    assert not guard.mounted


def test_unmount_from_a_state_listener_cancels_the_redirect():
    auth, router, guard = make_guard('/patients/new')
    guard.subscribe(lambda old, new: guard.unmount())
    auth.resolve(None)
    assert router.calls == []


def test_context_manager_mounts_and_unmounts():
    auth, router = AuthStore(), FakeRouter('/dashboard')
    with RouteGuard(auth, router) as guard:
        assert guard.mounted
    auth.resolve(None)
    assert router.calls == []


def test_mount_evaluates_an_already_resolved_store():
    auth, router = AuthStore(Anonymous()), FakeRouter('/dashboard')
    RouteGuard(auth, router, login_path='/signin').mount()
    assert router.calls == ['/signin']


def test_failed_collaborator_ends_unauthenticated():
    auth, router, guard = make_guard('/dashboard')

    async def broken():
        raise ConnectionError('auth service down')

    state = asyncio.run(auth.resolve_with(broken, timeout=1))
    assert state == Anonymous(reason='failure')
    assert guard.state is GuardState.UNAUTHENTICATED
    assert router.calls == ['/login']


def test_slow_collaborator_times_out():
    auth, router, guard = make_guard('/dashboard')

    async def slow():
        await asyncio.sleep(5)
        return USER

    state = asyncio.run(auth.resolve_with(slow, timeout=0.01))
    assert state == Anonymous(reason='failure')
    assert router.calls == ['/login']


def test_collaborator_answer_resolves():
    auth, router, guard = make_guard('/dashboard')

    async def answer():
        return USER

    assert asyncio.run(auth.resolve_with(answer, timeout=1)) == Authenticated(USER)
    assert auth.current_user() is USER
    assert router.calls == []


def test_state_mapping_and_description():
    assert guard_state_for(Loading()) is GuardState.LOADING
    assert guard_state_for(Authenticated(USER)) is GuardState.AUTHENTICATED
    assert guard_state_for(Anonymous('logout')) is GuardState.UNAUTHENTICATED
    assert describe(Loading()) == {'status': 'loading'}
    assert describe(Anonymous('expired')) == {'status': 'anonymous', 'reason': 'expired'}
    assert describe(Authenticated(USER))['user']['id'] == 'u1'
    assert AuthStore().is_loading()
