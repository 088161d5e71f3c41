from typing import Iterable, List, Mapping, Sequence


def matches(row: Mapping, term: str, fields: Sequence[str]) -> bool:
    """True if any of the fields contains term, ignoring case. Missing fields never match."""
    needle = term.lower()
    for field in fields:
        value = row.get(field)
        if value is not None and needle in str(value).lower():
            return True
    return False


def filter_rows(rows: Iterable[Mapping], term: str, fields: Sequence[str]) -> List[Mapping]:
    """Client-side search: rows whose fields contain term. An empty term keeps every row."""
    rows = list(rows)
    if not term:
        return rows
    return [row for row in rows if matches(row, term, fields)]
