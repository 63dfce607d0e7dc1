"""
Unit tests for multilingual names and query parameter helpers.
"""

from types import SimpleNamespace

import pytest
from django.contrib.auth.models import AnonymousUser
from rest_framework import serializers

from farms.exceptions import FarmOperationError
from farms.filters import get_date_range, parse_date_param
from farms.i18n import get_request_language, normalize_multilingual, translate


def fake_request(user=None, accept_language=''):
    return SimpleNamespace(
        user=user or AnonymousUser(),
        META={'HTTP_ACCEPT_LANGUAGE': accept_language},
    )


class TestTranslate:

    def test_picks_language(self):
        assert translate({'en': 'Pond A', 'ta': 'குளம் A'}, 'ta') == 'குளம் A'

    def test_falls_back_to_english(self):
        assert translate({'en': 'Pond A'}, 'hi') == 'Pond A'

    @pytest.mark.parametrize('value, expected', [(None, ''), ('Pond A', 'Pond A'), ({'ta': 'x'}, ''), (42, '')])
    def test_odd_values(self, value, expected):
        assert translate(value, 'en') == expected


class TestNormalize:

    def test_plain_string(self):
        assert normalize_multilingual('  Pond A ') == {'en': 'Pond A'}

    def test_drops_unknown_and_blank_languages(self):
        assert normalize_multilingual({'en': 'Pond A', 'fr': 'Étang', 'hi': ' '}) == {'en': 'Pond A'}

    @pytest.mark.parametrize('value', ['', {}, {'fr': 'Étang'}, {'en': 3}, {'en': '  '}, 7, ['Pond A']])
    def test_rejects(self, value):
        with pytest.raises(serializers.ValidationError):
            normalize_multilingual(value)


class TestRequestLanguage:

    def test_profile_language_wins(self):
        user = SimpleNamespace(is_authenticated=True, language='kn')
        assert get_request_language(fake_request(user, 'ta')) == 'kn'

    def test_accept_language_header(self):
        assert get_request_language(fake_request(accept_language='fr-FR,te;q=0.8,en;q=0.5')) == 'te'

    @pytest.mark.parametrize('header', ['ta-IN', 'ta-IN,ta;q=0.9', 'fr-FR,TA-in;q=0.8'])
    def test_region_subtag(self, header):
        assert get_request_language(fake_request(accept_language=header)) == 'ta'

    def test_default(self):
        assert get_request_language(fake_request(accept_language='fr')) == 'en'
        assert get_request_language(None) == 'en'


class TestDateParams:

    def test_parse(self):
        assert parse_date_param('2024-03-01', 'start_date').isoformat() == '2024-03-01'
        assert parse_date_param('', 'start_date') is None

    @pytest.mark.parametrize('value', ['01/03/2024', '2024-02-30'])
    def test_invalid(self, value):
        with pytest.raises(FarmOperationError, match='Invalid start_date format. Use YYYY-MM-DD'):
            parse_date_param(value, 'start_date')

    def test_range_required(self):
        with pytest.raises(FarmOperationError, match='start_date and end_date are required'):
            get_date_range({'start_date': '2024-03-01'}, required=True)

    def test_range_order(self):
        with pytest.raises(FarmOperationError, match='start_date must be on or before end_date'):
            get_date_range({'start_date': '2024-03-02', 'end_date': '2024-03-01'})
