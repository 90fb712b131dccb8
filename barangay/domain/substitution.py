# barangay/domain/substitution.py
"""Fills ``{{placeholder}}`` tokens in a layout with values from a resident record.

``substitute`` is pure and total: it copies the layout, rewrites only the labels
of text items and never fails on missing or malformed record fields.
"""
import copy
import re
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from barangay.domain.layout import LayoutEditor, LayoutItem, is_image_key

MISSING_AGE = "N/A"

Resolver = Callable[[Mapping[str, Any], date], str]


def parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        # "2000-05-01" and "2000-05-01T00:00:00.000Z" both start with the date
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def calculate_age(birth: date, today: date) -> int:
    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _field(name: str) -> Resolver:
    return lambda record, today: _text(record.get(name))


def _full_name(record, today):
    return f"{_text(record.get('firstName'))} {_text(record.get('lastName'))}".strip()


def _birth_date(record, today):
    birth = parse_date(record.get("birthDate"))
    if birth is None:
        return _text(record.get("birthDate"))
    return birth.isoformat()


def _age(record, today):
    birth = parse_date(record.get("birthDate"))
    if birth is None or birth > today:
        return MISSING_AGE
    return str(calculate_age(birth, today))


# token -> (designer label, resolver)
PLACEHOLDERS: Dict[str, tuple] = {
    "{{fullName}}": ("Full Name", _full_name),
    "{{firstName}}": ("First Name", _field("firstName")),
    "{{lastName}}": ("Last Name", _field("lastName")),
    "{{purok}}": ("Address/Purok", _field("purok")),
    "{{houseNumber}}": ("House Number", _field("houseNumber")),
    "{{phoneNumber}}": ("Phone Number", _field("phoneNumber")),
    "{{birthDate}}": ("Birth Date", _birth_date),
    "{{age}}": ("Age", _age),
    "{{civilStatus}}": ("Civil Status", _field("civilStatus")),
    "{{dateToday}}": ("Date Today", lambda record, today: today.isoformat()),
}

PLACEHOLDER_CATALOG: List[Dict[str, str]] = [
    {"label": label, "token": token} for token, (label, _) in PLACEHOLDERS.items()
]

_TOKEN_PATTERN = re.compile(
    "|".join(re.escape(token) for token in sorted(PLACEHOLDERS, key=len, reverse=True))
)


def _today(now: Union[date, datetime, None]) -> date:
    if now is None:
        return date.today()
    if isinstance(now, datetime):
        return now.date()
    return now


def resolve_placeholders(record: Optional[Mapping[str, Any]], now=None) -> Dict[str, str]:
    today = _today(now)
    record = record or {}
    return {token: resolver(record, today) for token, (_, resolver) in PLACEHOLDERS.items()}


def fill_text(text: str, values: Mapping[str, str]) -> str:
    # one pass over the original text, inserted values are never scanned again
    return _TOKEN_PATTERN.sub(lambda match: values[match.group(0)], text)


def substitute(layout, record: Optional[Mapping[str, Any]], now=None) -> Dict[str, Dict[str, Any]]:
    if isinstance(layout, LayoutEditor):
        layout = layout.to_settings()

    result: Dict[str, Any] = {}
    for key, item in (layout or {}).items():
        result[key] = item.to_settings() if isinstance(item, LayoutItem) else copy.deepcopy(item)

    values = resolve_placeholders(record, now)
    for key, item in result.items():
        if is_image_key(key) or not isinstance(item, dict):
            continue
        label = item.get("label")
        if isinstance(label, str) and label:
            item["label"] = fill_text(label, values)
    return result
