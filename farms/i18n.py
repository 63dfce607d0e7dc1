"""
Multilingual name support.

Names of seasons, ponds, nursery batches and inventory items are stored as a
JSON map of language code to text, e.g. ``{"en": "Pond A", "ta": "குளம் A"}``.
Responses carry the text in the caller's language with English fallback.
"""

from django.conf import settings
from rest_framework import serializers


def supported_languages():
    return tuple(getattr(settings, 'SUPPORTED_LANGUAGES', ('en',)))


def default_language():
    return getattr(settings, 'DEFAULT_LANGUAGE', 'en')


def get_request_language(request):
    """
    Resolve the response language for a request.

    Order: the user's profile language, then the first Accept-Language tag whose full
    value or primary subtag (`ta` for `ta-IN`) is supported, then the default language.
    """
    languages = supported_languages()
    if request is None:
        return default_language()

    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated and getattr(user, 'language', None):
        return user.language

    header = request.META.get('HTTP_ACCEPT_LANGUAGE', '')
    for part in header.split(','):
        tag = part.strip().split(';')[0].strip().lower()
        for candidate in (tag, tag.split('-')[0]):
            if candidate in languages:
                return candidate

    return default_language()


def translate(value, language):
    """Pick ``language`` from a name map, falling back to English then ''."""
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get(language) or value.get('en') or ''
    return ''


def normalize_multilingual(value):
    """
    Validate a multilingual name and return it as a language map.

    A plain string becomes ``{'en': value}``. Raises ``ValidationError`` for
    empty maps, maps without a supported language, and non-string/non-map input.
    """
    languages = supported_languages()

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise serializers.ValidationError('Name cannot be empty')
        return {'en': text}

    if isinstance(value, dict):
        if not value:
            raise serializers.ValidationError('Multilingual name cannot be empty')
        if not any(key in languages for key in value):
            raise serializers.ValidationError(
                f"Multilingual name must contain at least one valid language: {', '.join(languages)}"
            )
        cleaned = {}
        for key, text in value.items():
            if not isinstance(text, str):
                raise serializers.ValidationError(f"Name for language '{key}' must be a string")
            if key in languages and text.strip():
                cleaned[key] = text.strip()
        if not cleaned:
            raise serializers.ValidationError('Multilingual name cannot be empty')
        return cleaned

    raise serializers.ValidationError('Name must be a string or multilingual object')


class MultilingualField(serializers.Field):
    """
    Serializer field for JSON language maps.

    Reads a string or map, writes the text for the request language.
    Pass ``?all_languages=true`` to receive the full map instead.
    """

    def to_internal_value(self, data):
        return normalize_multilingual(data)

    def to_representation(self, value):
        request = self.context.get('request')
        if request is not None and request.query_params.get('all_languages') == 'true':
            return value
        return translate(value, get_request_language(request))
