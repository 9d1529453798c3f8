"""Lookups for class-card schedule rows: weekdays, lesson times, subjects.

Like the year-group resolver, every lookup map here is built per import from
the current table contents and passed in explicitly.
"""
import re
from datetime import time

# Sunday is 0, matching ClassSchedule.DAY_CHOICES
DAY_NAMES = ('sunday', 'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday')

CLOCK = r'(\d{1,2})[:.](\d{2})\s*([ap]\.?m\.?)?'
TIME_RANGE = re.compile(rf'^{CLOCK}\s*(?:-|\u2013|to)\s*{CLOCK}$', re.IGNORECASE)
YEAR_IN_TITLE = re.compile(r'\bY(?:ear)?\s*(\d+)', re.IGNORECASE)
YEAR_TOKEN = re.compile(r'\bY(?:ear)?\s*\d+\w*', re.IGNORECASE)
MATHS_ALIASES = ('mathematics', 'maths')


def day_number(name):
    """``"Monday"``, ``"mon"`` or ``"Tues"`` to 0-6; None when unrecognised."""
    name = (name or '').strip().lower()
    if len(name) < 3:
        return None
    for number, day in enumerate(DAY_NAMES):
        if day.startswith(name):
            return number
    return None


def _clock(hour, minute, meridiem):
    hour, minute = int(hour), int(minute)
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12 + (12 if meridiem.lower().startswith('p') else 0)
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def parse_time_range(text):
    """Parse ``"09:00 - 10:00"`` (or ``"9.00am to 10.00am"``) into a ``(start, end)`` pair.

    Returns None when the text is not a range or the lesson does not end after it starts.
    """
    match = TIME_RANGE.match((text or '').strip())
    if not match:
        return None
    start = _clock(*match.group(1, 2, 3))
    end = _clock(*match.group(4, 5, 6))
    if start is None or end is None or end <= start:
        return None
    return start, end


def year_group_from_title(title):
    """``"Y10 Chemistry"`` -> ``"year 10"``; empty when the title names no year."""
    match = YEAR_IN_TITLE.search(title or '')
    return f'year {match.group(1)}' if match else ''


def extract_subject(title, class_subject=''):
    """The export's subject column when filled, else the class title without its year."""
    if class_subject and class_subject.strip():
        return class_subject.strip()
    return ' '.join(YEAR_TOKEN.sub(' ', title or '').split()).strip(' -/:')


def build_subject_lookup(subjects):
    """Build a lowercase name -> id map from ``(id, name)`` pairs; the first id per name wins."""
    lookup = {}
    for subject_id, name in subjects:
        key = name.strip().lower()
        lookup.setdefault(key, subject_id)
        if 'math' in key:
            for alias in MATHS_ALIASES:
                lookup.setdefault(alias, subject_id)
    return lookup


def resolve_subject(name, lookup):
    """Exact match first, then the first entry either containing or contained in ``name``."""
    name = (name or '').strip().lower()
    if not name:
        return None
    if name in lookup:
        return lookup[name]
    for known, subject_id in lookup.items():
        if known in name or name in known:
            return subject_id
    return None
