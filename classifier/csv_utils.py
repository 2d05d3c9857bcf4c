import time
from .models import ParsedCsv


def decode_upload(raw):
    try:
        return raw.decode('utf-8-sig')
    except UnicodeDecodeError:
        return raw.decode('latin-1')


def _clean_cell(cell):
    return cell.strip().replace('"', '')


def parse_csv(text):
    """Lenient comma-split parse of ``text`` into a :class:`ParsedCsv`.

    Blank lines are dropped and the first remaining line is the header.
    Quotes are stripped from every cell and never protect a comma, so
    ``"a,b"`` becomes two cells. Short lines are padded with empty strings
    and extra cells are dropped.
    """
    lines = [line for line in text.split('\n') if line.strip()]
    if not lines:
        return ParsedCsv()

    headers = [_clean_cell(h) for h in lines[0].split(',')]
    # A repeated header keeps its first position; the later value wins.
    columns = list(dict.fromkeys(headers))

    rows = []
    for line in lines[1:]:
        values = [_clean_cell(v) for v in line.split(',')]
        row = {}
        for index, header in enumerate(headers):
            row[header] = values[index] if index < len(values) else ''
        rows.append(row)
    return ParsedCsv(columns=columns, rows=rows)


def _format_value(value):
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str) and ',' in value:
        # Embedded quotes are not escaped; parse_csv strips them on the way back.
        return f'"{value}"'
    return str(value)


def encode_csv(records):
    if not records:
        return ''
    headers = list(records[0].keys())
    lines = [','.join(headers)]
    for record in records:
        lines.append(','.join(_format_value(record.get(h)) for h in headers))
    return '\n'.join(lines)


def export_filename(now=None):
    millis = int((time.time() if now is None else now) * 1000)
    return f'classification_results_{millis}.csv'
