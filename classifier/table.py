import copy
import math
from functools import cmp_to_key
from urllib.parse import urlencode

ASC = 'asc'
DESC = 'desc'
PAGE_SIZE = 10


def _text(value):
    return '' if value is None else str(value)


def _missing(record, column):
    return record.get(column) is None


def _compare_values(a, b):
    try:
        if a < b:
            return -1
        if a > b:
            return 1
        return 0
    except TypeError:
        a, b = _text(a), _text(b)
        return (a > b) - (a < b)


class ResultsTable:
    """Search, sort and pagination over a list of flat result records.

    The controller is rebuilt from query parameters on every request, so all
    navigation methods only adjust its own fields; ``query_string`` turns the
    resulting state back into link parameters.
    """

    def __init__(self, records, search='', sort_column=None, sort_direction=ASC, page=1, page_size=PAGE_SIZE):
        self.records = list(records)
        self.sort_column = sort_column or None
        self.sort_direction = DESC if sort_direction == DESC else ASC
        self.page_size = max(1, int(page_size))
        self.set_search(search)
        self.go_to_page(page)

    @property
    def columns(self):
        seen = {}
        for record in self.records:
            for key in record:
                seen.setdefault(key, None)
        return list(seen)

    @property
    def filtered_records(self):
        if not self.search:
            return list(self.records)
        term = self.search.lower()
        return [r for r in self.records if any(term in _text(v).lower() for v in r.values())]

    @property
    def sorted_records(self):
        records = self.filtered_records
        column = self.sort_column
        if not column:
            return records
        descending = self.sort_direction == DESC

        def compare(a, b):
            a_missing, b_missing = _missing(a, column), _missing(b, column)
            if a_missing and b_missing:
                return 0
            # Missing values go last in either direction.
            if a_missing:
                return 1
            if b_missing:
                return -1
            result = _compare_values(a[column], b[column])
            return -result if descending else result

        return sorted(records, key=cmp_to_key(compare))

    @property
    def total_count(self):
        return len(self.filtered_records)

    @property
    def total_pages(self):
        return math.ceil(self.total_count / self.page_size)

    @property
    def start_index(self):
        return (self.page - 1) * self.page_size

    @property
    def end_index(self):
        return min(self.start_index + self.page_size, self.total_count)

    @property
    def page_records(self):
        return self.sorted_records[self.start_index:self.start_index + self.page_size]

    @property
    def page_rows(self):
        columns = self.columns
        return [[(c, r.get(c)) for c in columns] for r in self.page_records]

    @property
    def headers(self):
        return [
            {
                'column': c,
                'query': self.sort_query(c),
                'direction': self.sort_direction if c == self.sort_column else None,
            }
            for c in self.columns
        ]

    @property
    def has_previous(self):
        return self.page > 1

    @property
    def has_next(self):
        return self.page < self.total_pages

    def set_search(self, term):
        self.search = term or ''
        self.page = 1

    def sort_by(self, column):
        if self.sort_column == column:
            self.sort_direction = ASC if self.sort_direction == DESC else DESC
        else:
            self.sort_column = column
            self.sort_direction = ASC

    def go_to_page(self, page):
        try:
            page = int(page)
        except (TypeError, ValueError):
            page = 1
        self.page = min(max(1, page), max(1, self.total_pages))

    def next_page(self):
        self.go_to_page(self.page + 1)

    def previous_page(self):
        self.go_to_page(self.page - 1)

    def page_numbers(self):
        """Page buttons to show, with ``None`` standing for an ellipsis."""
        total, current = self.total_pages, self.page
        if total < 1:
            return []

        def visible(n):
            if total <= 5:
                return True
            if current <= 3:
                return n <= 5
            if current >= total - 2:
                return n >= total - 4
            return abs(n - current) <= 1

        numbers = [1]
        if current > 3 and total > 5:
            numbers.append(None)
        numbers.extend(n for n in range(2, total) if visible(n))
        if current < total - 2 and total > 5:
            numbers.append(None)
        if total > 1:
            numbers.append(total)
        return numbers

    def query_string(self, **overrides):
        params = {'q': self.search, 'sort': self.sort_column or '', 'dir': self.sort_direction, 'page': self.page}
        params.update(overrides)
        return urlencode({k: v for k, v in params.items() if v not in ('', None)})

    def sort_query(self, column):
        toggled = copy.copy(self)
        toggled.sort_by(column)
        return toggled.query_string()

    def page_query(self, page):
        moved = copy.copy(self)
        moved.go_to_page(page)
        return moved.query_string()

    @property
    def previous_query(self):
        moved = copy.copy(self)
        moved.previous_page()
        return moved.query_string()

    @property
    def next_query(self):
        moved = copy.copy(self)
        moved.next_page()
        return moved.query_string()
