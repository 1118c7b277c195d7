"""
Language selector endpoints.

``/language/toggle`` is the form target of the selector rendered on every
page (including the login page, so it is exempt from the route guard).  The
``/api/language`` endpoints expose the same store to script clients.
"""
from __future__ import annotations

from django.shortcuts import redirect
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.csrf import csrf_protect
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from clinic.exceptions import InvalidLanguage
from clinic.serializers.language import LanguageChoiceSerializer, LanguageUpdateSerializer
from clinic.services.audit import log_action
from clinic.services.language_selector import LanguageSelector
from clinic.services.translations import load_catalog


def _audit(request, old, new):
    user = request.user
    if old is not new and user and user.is_authenticated:
        log_action(user=user, action='language_change', object_type='user', object_id=user.id,
                   detail={'from': old.value, 'to': new.value})


def _language_payload(store):
    return {
        'ok': True,
        'language': store.language.value,
        'choices': LanguageChoiceSerializer(LanguageSelector(store).choices(), many=True).data,
    }


@csrf_protect
@api_view(['POST'])
@permission_classes([AllowAny])
def toggle_page(request):
    """Toggle, or select ``language`` when the dropdown posted one, then go back."""
    store = request.language_store
    selector = LanguageSelector(store)
    old = store.language
    requested = request.data.get('language')
    if requested:
        try:
            selector.select(requested)
        except InvalidLanguage:
            pass
    else:
        selector.toggle()
    _audit(request, old, store.language)

    target = request.data.get('next') or request.META.get('HTTP_REFERER') or '/'
    if not url_has_allowed_host_and_scheme(target, allowed_hosts={request.get_host()}, require_https=request.is_secure()):
        target = '/'
    return redirect(target)


@api_view(['GET', 'PUT'])
@permission_classes([AllowAny])
def language_api(request):
    store = request.language_store
    if request.method == 'PUT':
        s = LanguageUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        old = store.language
        LanguageSelector(store).select(s.validated_data['language'])
        _audit(request, old, store.language)
    return Response(_language_payload(store))


@api_view(['POST'])
@permission_classes([AllowAny])
def language_toggle_api(request):
    store = request.language_store
    old = store.language
    LanguageSelector(store).toggle()
    _audit(request, old, store.language)
    return Response(_language_payload(store))


@api_view(['GET'])
@permission_classes([AllowAny])
def translations_api(request):
    language = request.language_store.language
    return Response({'ok': True, 'language': language.value, 'translations': load_catalog(language)})
