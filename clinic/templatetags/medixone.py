from django import template
from django.conf import settings

from clinic.services.translations import translate

register = template.Library()


@register.simple_tag(takes_context=True)
def t(context, key):
    """Translate a dotted catalog key into the request's language."""
    language = context.get('language') or settings.MEDIXONE_DEFAULT_LANGUAGE
    return translate(language, key)
