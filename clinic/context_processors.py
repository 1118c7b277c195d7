from django.conf import settings

from clinic.services.dashboard import navigation
from clinic.services.language import Language
from clinic.services.language_selector import LanguageSelector


def language(request):
    """Expose the active language, the selector choices and the sidebar."""
    store = getattr(request, 'language_store', None)
    if store is None:
        current = Language.parse(settings.MEDIXONE_DEFAULT_LANGUAGE)
        choices = []
    else:
        current = store.language
        choices = LanguageSelector(store).choices()
    return {
        'language': current.value,
        'language_choices': choices,
        'navigation': navigation(current, request.path_info),
    }
