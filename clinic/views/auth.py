"""
Authentication views.

The login and logout pages drive the browser session; the ``/api/auth/*``
endpoints serve API clients with DRF tokens and JWT pairs.  Every attempt is
written to the audit trail.
"""
from __future__ import annotations

from django.conf import settings
from django.contrib.auth import authenticate, login, logout
from django.shortcuts import redirect
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.csrf import csrf_protect
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes, renderer_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.renderers import JSONRenderer, TemplateHTMLRenderer
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken

from clinic.serializers.auth import LoginSerializer, UserSerializer
from clinic.services.audit import client_ip, log_action
from clinic.services.auth_state import AuthStore, describe
from clinic.services.route_guard import guard_state_for
from clinic.services.session_events import broadcast_session_invalidated
from clinic.services.translations import translate

DEMO_ACCOUNTS = [
    ('Admin', 'admin@medixone.com', 'admin123'),
    ('Doctor', 'doctor@medixone.com', 'password123'),
    ('Nurse', 'nurse@medixone.com', 'password123'),
    ('Patient', 'patient@medixone.com', 'password123'),
]


def _safe_next(request, candidate: str | None) -> str:
    if candidate and url_has_allowed_host_and_scheme(
        candidate, allowed_hosts={request.get_host()}, require_https=request.is_secure()
    ):
        return candidate
    return settings.LOGIN_REDIRECT_URL


def _authenticate(request, email: str, password: str):
    user = authenticate(request, username=email, password=password)
    if user is None:
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'email': email, 'ip': client_ip(request)})
        return None
    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': client_ip(request)})
    return user


# ---------------------------------------------------------------------
# Browser session
# ---------------------------------------------------------------------
@csrf_protect
@api_view(['GET', 'POST'])
@renderer_classes([TemplateHTMLRenderer, JSONRenderer])
@permission_classes([AllowAny])
def login_page(request):
    language = request.language_store.language
    next_url = request.query_params.get('next') or request.data.get('next') or ''
    page = {'ok': True, 'error': None, 'email': '', 'next': next_url, 'demoAccounts': DEMO_ACCOUNTS}

    if request.method == 'GET':
        if request.auth_store.current_user() is not None:
            return redirect(_safe_next(request, next_url))
        return Response(page, template_name='clinic/login.html')

    s = LoginSerializer(data=request.data)
    if not s.is_valid():
        page.update(ok=False, error=translate(language, 'auth.fillAllFields'), email=request.data.get('email', ''))
        return Response(page, status=400, template_name='clinic/login.html')

    user = _authenticate(request, s.validated_data['email'], s.validated_data['password'])
    if user is None:
        page.update(ok=False, error=translate(language, 'auth.invalidCredentials'), email=s.validated_data['email'])
        return Response(page, status=400, template_name='clinic/login.html')

    login(request._request, user)
    return redirect(_safe_next(request, next_url))


@csrf_protect
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_page(request):
    user = request.user
    language = request.language_store.language
    log_action(user=user, action='logout', object_type='user', object_id=user.id,
               detail={'ip': client_ip(request)})
    logout(request._request)
    # The language preference outlives the account session
    request.session[settings.MEDIXONE_LANGUAGE_SESSION_KEY] = language.value
    broadcast_session_invalidated(user.id, reason='logout')
    return redirect(settings.MEDIXONE_LOGIN_PATH)


# ---------------------------------------------------------------------
# API clients
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def login_api(request):
    """Credential login returning a DRF token and a JWT pair."""
    s = LoginSerializer(data=request.data)
    if not s.is_valid():
        return Response({'ok': False, 'error': {'code': 'missing_fields',
                                                 'message': translate(request.language_store.language, 'auth.fillAllFields')}},
                        status=400)
    user = _authenticate(request, s.validated_data['email'], s.validated_data['password'])
    if user is None:
        return Response({'ok': False, 'error': {'code': 'invalid_credentials',
                                                 'message': translate(request.language_store.language, 'auth.invalidCredentials')}},
                        status=400)

    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return Response({
        'ok': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'user': UserSerializer(user).data,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_api(request):
    """Blacklist the given refresh token (or all of the user's) and drop the DRF token."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
            count = 1
        except TokenError:
            return Response({'ok': False, 'error': {'code': 'invalid_token', 'message': 'refresh token is invalid'}},
                            status=400)
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    Token.objects.filter(user=request.user).delete()
    log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
               detail={'blacklisted': count, 'ip': client_ip(request)})
    broadcast_session_invalidated(request.user.id, reason='logout')
    return Response({'ok': True, 'blacklisted': count})


@api_view(['GET'])
@permission_classes([AllowAny])
def session_api(request):
    """Current auth state as a tagged union, plus the guard state it maps to."""
    auth = AuthStore()
    auth.resolve(request.user)
    return Response({'ok': True, **describe(auth.state), 'guard': guard_state_for(auth.state).value})
