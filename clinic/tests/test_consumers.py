import asyncio

import pytest
from channels.auth import AuthMiddlewareStack
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.conf import settings as django_settings
from django.test import Client

from clinic.models import User
from clinic.realtime.consumers import SessionConsumer
from clinic.realtime.routing import websocket_urlpatterns
from clinic.services.session_events import user_group

pytestmark = pytest.mark.django_db(transaction=True)

application = AuthMiddlewareStack(URLRouter(websocket_urlpatterns))


@pytest.fixture(autouse=True)
async def _flush_layer():
    yield
    await get_channel_layer().flush()


@pytest.fixture
def doctor():
    return User.objects.create_user(
        username='doctor@medixone.com', email='doctor@medixone.com', password='password123',
        role=User.Role.DOCTOR,
    )


@pytest.fixture
def cookie(doctor):
    client = Client()
    client.force_login(doctor)
    return f'{django_settings.SESSION_COOKIE_NAME}={client.cookies[django_settings.SESSION_COOKIE_NAME].value}'


def connect(path='/dashboard', cookie=None, app=application):
    headers = [(b'cookie', cookie.encode())] if cookie else []
    return WebsocketCommunicator(app, f'/ws/session/?path={path}', headers=headers)


async def frames(ws, n):
    return [await ws.receive_json_from(timeout=3) for _ in range(n)]


async def test_signed_in_socket_becomes_authenticated_without_redirect(cookie, doctor):
    ws = connect('/dashboard', cookie)
    connected, _ = await ws.connect()
    assert connected
    loading, ready = await frames(ws, 2)
    assert loading['type'] == 'state' and loading['guard'] == 'LOADING'
    assert ready['guard'] == 'AUTHENTICATED'
    assert ready['auth']['user']['id'] == doctor.id
    assert ready['path'] == '/dashboard'
    assert await ws.receive_nothing()
    await ws.disconnect()


async def test_anonymous_socket_is_sent_to_login_once():
    ws = connect('/patients/new')
    await ws.connect()
    _, state, navigate = await frames(ws, 3)
    assert state['guard'] == 'UNAUTHENTICATED'
    assert navigate == {'type': 'navigate', 'path': '/login'}

    await ws.send_json_to({'type': 'route', 'path': '/login'})
    assert await ws.receive_nothing()

    await ws.send_json_to({'type': 'route', 'path': '/appointments'})
    assert await ws.receive_json_from(timeout=3) == {'type': 'navigate', 'path': '/login'}
    await ws.disconnect()


async def test_anonymous_socket_on_login_page_is_left_alone():
    ws = connect('/login')
    await ws.connect()
    _, state = await frames(ws, 2)
    assert state['guard'] == 'UNAUTHENTICATED'
    assert await ws.receive_nothing()
    await ws.disconnect()


async def test_logout_elsewhere_invalidates_the_socket(cookie, doctor):
    ws = connect('/dashboard', cookie)
    await ws.connect()
    await frames(ws, 2)

    await get_channel_layer().group_send(user_group(doctor.id), {'type': 'session.invalidated', 'reason': 'logout'})
    state, navigate = await frames(ws, 2)
    assert state['guard'] == 'UNAUTHENTICATED'
    assert state['auth'] == {'status': 'anonymous', 'reason': 'logout'}
    assert navigate['path'] == '/login'
    await ws.disconnect()


async def test_language_frames_and_errors():
    ws = connect('/login')
    await ws.connect()
    loading, _ = await frames(ws, 2)
    assert loading['language'] == 'es'

    await ws.send_json_to({'type': 'language.toggle'})
    frame = await ws.receive_json_from(timeout=3)
    assert frame['type'] == 'language'
    assert frame['language'] == 'en'
    assert [c['selected'] for c in frame['choices']] == [False, True]

    await ws.send_json_to({'type': 'language.set', 'language': 'fr'})
    error = await ws.receive_json_from(timeout=3)
    assert error['type'] == 'error'
    assert error['message'] == 'invalid_language'

    await ws.send_json_to({'type': 'language.set', 'language': 'en'})
    assert await ws.receive_nothing()
    await ws.disconnect()


async def test_malformed_frames_get_error_frames():
    ws = connect('/login')
    await ws.connect()
    await frames(ws, 2)

    await ws.send_to(text_data='not json')
    assert (await ws.receive_json_from(timeout=3))['code'] == 4000
    await ws.send_json_to(['route'])
    assert (await ws.receive_json_from(timeout=3))['code'] == 4001
    await ws.send_json_to({'type': 'dance'})
    assert (await ws.receive_json_from(timeout=3))['code'] == 4002
    await ws.send_json_to({'type': 'route', 'path': 'dashboard'})
    assert (await ws.receive_json_from(timeout=3))['code'] == 4003
    await ws.disconnect()


async def test_language_change_reaches_other_tabs_of_the_session(cookie):
    first, second = connect('/dashboard', cookie), connect('/appointments', cookie)
    await first.connect()
    await second.connect()
    await frames(first, 2)
    await frames(second, 2)

    await first.send_json_to({'type': 'language.toggle'})
    assert (await first.receive_json_from(timeout=3))['language'] == 'en'
    assert (await second.receive_json_from(timeout=3))['language'] == 'en'

    third = connect('/dashboard', cookie)
    await third.connect()
    loading = await third.receive_json_from(timeout=3)
    assert loading['language'] == 'en'
    for ws in (first, second, third):
        await ws.disconnect()


class SlowSessionConsumer(SessionConsumer):
    async def load_user(self):
        await asyncio.sleep(5)


async def test_unanswered_auth_times_out_to_login(settings):
    settings.MEDIXONE_AUTH_TIMEOUT = 0.05
    ws = connect('/dashboard', app=SlowSessionConsumer.as_asgi())
    await ws.connect()
    _, state, navigate = await frames(ws, 3)
    assert state['auth'] == {'status': 'anonymous', 'reason': 'failure'}
    assert navigate['path'] == '/login'
    await ws.disconnect()
