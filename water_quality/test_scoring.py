"""
Unit tests for water quality scoring.

Pure functions; no database needed.
"""

import pytest

from water_quality import scoring


class TestParameterScores:

    @pytest.mark.parametrize('value, expected', [
        (7.5, 25), (8.5, 25), (7.2, 15), (9.0, 15), (6.9, 5), (9.1, 5),
    ])
    def test_ph(self, value, expected):
        assert scoring.score_ph(value) == expected

    @pytest.mark.parametrize('value, expected', [(5, 25), (12, 25), (4.9, 15), (3, 15), (2.9, 5)])
    def test_dissolved_oxygen(self, value, expected):
        assert scoring.score_dissolved_oxygen(value) == expected

    @pytest.mark.parametrize('value, expected', [(26, 25), (32, 25), (20, 15), (35, 15), (19.9, 5), (36, 5)])
    def test_temperature(self, value, expected):
        assert scoring.score_temperature(value) == expected

    @pytest.mark.parametrize('value, expected', [(15, 25), (25, 25), (10, 15), (30, 15), (9, 5), (31, 5)])
    def test_salinity(self, value, expected):
        assert scoring.score_salinity(value) == expected

    def test_accepts_strings_and_decimals(self):
        from decimal import Decimal

        assert scoring.score_ph('8.0') == 25
        assert scoring.score_temperature(Decimal('28.5')) == 25


class TestQualityScore:

    def test_all_optimal(self):
        assert scoring.quality_score(8, 6, 28, 20) == 25

    def test_half_rounds_up(self):
        # 25 + 15 + 15 + 15 = 70
        assert scoring.quality_score(8, 4, 22, 12) == 18

    def test_all_poor(self):
        assert scoring.quality_score(5, 1, 40, 40) == 5

    @pytest.mark.parametrize('score, rating', [
        (25, 'Excellent'), (20, 'Excellent'), (19, 'Good'), (15, 'Good'),
        (14, 'Fair'), (10, 'Fair'), (9, 'Poor'), (5, 'Poor'), (4, 'Critical'),
    ])
    def test_rating_bands(self, score, rating):
        assert scoring.quality_rating(score) == rating


class TestAlerts:

    def test_safe_reading_has_no_alerts(self):
        assert scoring.parameter_alerts(8, 6, 28, ammonia=0.1, nitrite=0.2) == []

    def test_each_limit(self):
        alerts = scoring.parameter_alerts(6.0, 2.0, 36, ammonia=0.8, nitrite=1.5)
        assert [(a['parameter'], a['severity']) for a in alerts] == [
            ('ph', 'high'),
            ('dissolved_oxygen', 'high'),
            ('temperature', 'medium'),
            ('ammonia', 'high'),
            ('nitrite', 'medium'),
        ]

    def test_missing_optional_parameters(self):
        assert scoring.parameter_alerts(8, 6, 28) == []


def test_optimal_q_open_ended_range():
    condition = scoring.optimal_q('dissolved_oxygen')
    assert condition.children == [('dissolved_oxygen__gte', 5.0)]

    bounded = scoring.optimal_q('ph')
    assert bounded.children == [('ph__gte', 7.5), ('ph__lte', 8.5)]
