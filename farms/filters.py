"""
Query parameter helpers shared by the record list views.
"""

import uuid

from django.utils.dateparse import parse_date

from .exceptions import FarmOperationError


def parse_date_param(value, name):
    if not value:
        return None
    try:
        parsed = parse_date(value)
    except ValueError:
        parsed = None
    if parsed is None:
        raise FarmOperationError(f'Invalid {name} format. Use YYYY-MM-DD')
    return parsed


def get_date_range(params, required=False):
    """
    Read ``start_date``/``end_date`` from query params or a request body.

    Returns ``(start, end)``; either may be None unless ``required``.
    """
    start = parse_date_param(params.get('start_date'), 'start_date')
    end = parse_date_param(params.get('end_date'), 'end_date')

    if required and (start is None or end is None):
        raise FarmOperationError('start_date and end_date are required')
    if start and end and start > end:
        raise FarmOperationError('start_date must be on or before end_date')
    return start, end


def filter_date_range(queryset, params, field='date', required=False):
    start, end = get_date_range(params, required=required)
    if start:
        queryset = queryset.filter(**{f'{field}__gte': start})
    if end:
        queryset = queryset.filter(**{f'{field}__lte': end})
    return queryset


def filter_uuid(queryset, field, value):
    """Filter on a UUID column; malformed ids match nothing."""
    if not value:
        return queryset
    try:
        uuid.UUID(str(value))
    except ValueError:
        return queryset.none()
    return queryset.filter(**{field: value})
