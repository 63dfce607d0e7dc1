"""
Water quality scoring.

Each of pH, dissolved oxygen, temperature and salinity scores 25 (optimal),
15 (acceptable) or 5 (poor) for shrimp culture. The reading's quality score
is the rounded mean of the four, which maps onto a rating band.
"""

import math

from django.db.models import Q

OPTIMAL = 25
ACCEPTABLE = 15
POOR = 5

OPTIMAL_RANGES = {
    'ph': (7.5, 8.5),
    'dissolved_oxygen': (5.0, None),
    'temperature': (26.0, 32.0),
    'salinity': (15.0, 25.0),
}


def _band(value, optimal, acceptable):
    low, high = optimal
    if low <= value <= high:
        return OPTIMAL
    low, high = acceptable
    if low <= value <= high:
        return ACCEPTABLE
    return POOR


def score_ph(value):
    return _band(float(value), (7.5, 8.5), (7.0, 9.0))


def score_dissolved_oxygen(value):
    value = float(value)
    if value >= 5:
        return OPTIMAL
    if value >= 3:
        return ACCEPTABLE
    return POOR


def score_temperature(value):
    return _band(float(value), (26, 32), (20, 35))


def score_salinity(value):
    return _band(float(value), (15, 25), (10, 30))


def quality_score(ph, dissolved_oxygen, temperature, salinity):
    total = (
        score_ph(ph) + score_dissolved_oxygen(dissolved_oxygen) +
        score_temperature(temperature) + score_salinity(salinity)
    )
    return math.floor(total / 4 + 0.5)


def quality_rating(score):
    if score >= 20:
        return 'Excellent'
    if score >= 15:
        return 'Good'
    if score >= 10:
        return 'Fair'
    if score >= 5:
        return 'Poor'
    return 'Critical'


def parameter_alerts(ph, dissolved_oxygen, temperature, ammonia=None, nitrite=None):
    """Return alerts for parameters outside safe limits."""
    alerts = []
    if ph is not None and (float(ph) < 6.5 or float(ph) > 9):
        alerts.append({
            'parameter': 'ph', 'value': float(ph), 'severity': 'high',
            'message': 'pH outside safe range (6.5-9.0)',
        })
    if dissolved_oxygen is not None and float(dissolved_oxygen) < 3:
        alerts.append({
            'parameter': 'dissolved_oxygen', 'value': float(dissolved_oxygen), 'severity': 'high',
            'message': 'Dissolved oxygen critically low (<3 mg/L)',
        })
    if temperature is not None and (float(temperature) < 15 or float(temperature) > 35):
        alerts.append({
            'parameter': 'temperature', 'value': float(temperature), 'severity': 'medium',
            'message': 'Temperature outside tolerable range (15-35°C)',
        })
    if ammonia is not None and float(ammonia) > 0.5:
        alerts.append({
            'parameter': 'ammonia', 'value': float(ammonia), 'severity': 'high',
            'message': 'Ammonia above 0.5 mg/L',
        })
    if nitrite is not None and float(nitrite) > 1.0:
        alerts.append({
            'parameter': 'nitrite', 'value': float(nitrite), 'severity': 'medium',
            'message': 'Nitrite above 1.0 mg/L',
        })
    return alerts


def optimal_q(parameter):
    """Q filter matching readings whose ``parameter`` lies in its optimal range."""
    low, high = OPTIMAL_RANGES[parameter]
    condition = Q(**{f"{parameter}__gte": low})
    if high is not None:
        condition &= Q(**{f"{parameter}__lte": high})
    return condition
