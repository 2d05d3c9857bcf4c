from datetime import datetime
from numbers import Number
from django import template
from django.utils import formats, timezone
from django.utils.html import format_html

register = template.Library()

CLASSIFICATION_PALETTE = [
    'badge-blue',
    'badge-purple',
    'badge-green',
    'badge-orange',
    'badge-pink',
]


def _is_number(value):
    return isinstance(value, Number) and not isinstance(value, bool)


@register.filter
def classification_badge_class(label):
    code_sum = sum(ord(ch) for ch in str(label)) if label else 0
    return CLASSIFICATION_PALETTE[code_sum % len(CLASSIFICATION_PALETTE)]


@register.filter
def confidence_tier(value):
    if not _is_number(value):
        return ''
    if value >= 0.8:
        return 'high'
    if value >= 0.6:
        return 'medium'
    return 'low'


@register.filter
def confidence_percent(value):
    if not _is_number(value):
        return ''
    return f'{value * 100:.1f}%'


@register.filter
def format_timestamp(value):
    if not value:
        return ''
    try:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return value
    if timezone.is_aware(parsed):
        parsed = timezone.localtime(parsed)
    return formats.date_format(parsed, 'SHORT_DATETIME_FORMAT')


@register.filter
def column_label(name):
    name = str(name)
    return name[:1].upper() + name[1:]


@register.simple_tag
def render_cell(column, value):
    if column == 'classification' and value:
        return format_html('<span class="badge {}">{}</span>', classification_badge_class(value), value)
    if column == 'confidence' and _is_number(value):
        return format_html(
            '<span class="badge confidence-{}">{}</span>', confidence_tier(value), confidence_percent(value)
        )
    if column == 'timestamp' and value:
        return format_html('<span title="{}">{}</span>', value, format_timestamp(value))
    text = '' if value is None else str(value)
    return format_html('<div class="text-truncate" title="{}">{}</div>', text, text)


@register.simple_tag
def page_query(table, number):
    return table.page_query(number)
