"""Year-group label resolution for student imports.

Exports label year groups inconsistently ("Year 10", "Y10", "Y10 Maths").
``build_lookup`` turns the current year-group table into a lowercase
name -> id map, and ``resolve_year_group`` matches a label against it exactly.
The map is built per import; nothing here is cached.
"""
import re

Y_NUMBER = re.compile(r'Y(\d+)', re.IGNORECASE)


def build_lookup(year_groups):
    """Build the lookup from ``(id, name)`` pairs.

    Names containing ``Y<digits>`` also get a ``year <digits>`` alias.
    """
    lookup = {}
    for year_group_id, name in year_groups:
        lookup[name.lower()] = year_group_id
        match = Y_NUMBER.search(name)
        if match:
            lookup[f'year {match.group(1)}'] = year_group_id
    return lookup


def extract_year_group(label):
    label = (label or '').strip()
    match = Y_NUMBER.search(label)
    if match:
        return f'year {match.group(1)}'
    return label


def resolve_year_group(label, lookup):
    """Return ``(extracted_label, year_group_id)``; the id is None when nothing matches."""
    extracted = extract_year_group(label)
    if not extracted:
        return extracted, None
    return extracted, lookup.get(extracted.lower())


def unresolved_message(label, extracted):
    message = f'Year group not found: "{extracted}"'
    if extracted != (label or '').strip():
        message += f' (from "{label}")'
    return message
