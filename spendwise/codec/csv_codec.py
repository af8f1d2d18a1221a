"""
CSV Codec for Expense Collections

Encodes a collection into the interchange CSV format and decodes text
back into expenses plus a list of problems.

FORMAT (bit-exact):
    id,date,amount,category,description,tags
    <id>,<date>,<amount>,<category>,<description-or-quoted>,<tag1;tag2;...>

DESIGN DECISION: Only `description` is ever quoted, and only when it
contains a comma or a double quote. Files exported by earlier versions
of the app follow exactly this rule, so the encoder does not grow a
general CSV quoting scheme. This is also why the stdlib `csv` module is
not used here: it would quote and unescape every field.

Decoding is line-oriented and never raises for bad data:
- File-level problems (no data, missing columns) return no records.
- Row-level problems drop only the offending line.
The caller decides whether a partially valid file is acceptable.
"""

import re
from typing import Iterable, Optional

from spendwise.audit.logger import get_logger
from spendwise.models.expense import (
    UNCATEGORIZED,
    Expense,
    is_valid_date,
    parse_amount,
)
from spendwise.models.reports import (
    CsvProblem,
    CsvProblemKind,
    DecodeResult,
    ImportFilterResult,
)


HEADERS: tuple[str, ...] = ("id", "date", "amount", "category", "description", "tags")

FIELD_SEPARATOR = ","
TAG_SEPARATOR = ";"
QUOTE = '"'

_LINE_BREAK = re.compile(r"\r?\n")

logger = get_logger(__name__)


class _RowRejected(Exception):
    """Internal signal: the current row failed a validation check."""

    def __init__(self, kind: CsvProblemKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


# =============================================================================
# ENCODE
# =============================================================================

def escape_description(description: str) -> str:
    """Quote a description if it contains a separator or a quote."""
    if FIELD_SEPARATOR in description or QUOTE in description:
        return QUOTE + description.replace(QUOTE, QUOTE * 2) + QUOTE
    return description


def encode_row(expense: Expense) -> str:
    return FIELD_SEPARATOR.join([
        expense.id,
        expense.date,
        str(expense.amount),
        expense.category,
        escape_description(expense.description),
        TAG_SEPARATOR.join(expense.tags),
    ])


def encode_expenses(expenses: Iterable[Expense]) -> str:
    """
    Serialize expenses to CSV text.

    Rows are joined with "\\n" and there is no trailing newline.
    """
    lines = [FIELD_SEPARATOR.join(HEADERS)]
    multiline_ids = []
    for expense in expenses:
        if _LINE_BREAK.search(expense.description):
            multiline_ids.append(expense.id)
        lines.append(encode_row(expense))

    if multiline_ids:
        # These rows split in two and will not import back
        logger.warning("csv_multiline_descriptions", expense_ids=multiline_ids)
    return "\n".join(lines)


# =============================================================================
# DECODE
# =============================================================================

def split_row(line: str) -> list[str]:
    """
    Split one CSV line on commas that are outside double quotes.

    Quote characters are kept in the fields; only the description
    field is unescaped later.
    """
    fields = []
    current = []
    in_quotes = False

    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
            current.append(char)
        elif char == FIELD_SEPARATOR and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)

    fields.append("".join(current))
    return fields


def unescape_description(raw: str) -> str:
    """
    Unwrap a quoted description; unquoted text is returned untouched.

    Padding outside the quotes is dropped, padding of a plain
    description is part of its value.
    """
    quoted = raw.strip()
    if len(quoted) >= 2 and quoted.startswith(QUOTE) and quoted.endswith(QUOTE):
        return quoted[1:-1].replace(QUOTE * 2, QUOTE)
    return raw


def parse_tags(raw: str) -> list[str]:
    return [tag.strip() for tag in raw.split(TAG_SEPARATOR) if tag.strip()]


def _file_problem(kind: CsvProblemKind, message: str) -> DecodeResult:
    return DecodeResult(
        expenses=[],
        problems=[CsvProblem(kind=kind, message=message)],
    )


def _parse_header(line: str) -> list[str]:
    # Spreadsheet exports often prepend a byte order mark
    return [name.strip() for name in line.lstrip("\ufeff").strip().split(FIELD_SEPARATOR)]


def _decode_row(
    fields: list[str],
    column_count: int,
    index: dict[str, int],
) -> Expense:
    """
    Validate one split row and build the Expense.

    Checks run in a fixed order and the first failure wins.
    """
    if len(fields) < column_count:
        raise _RowRejected(CsvProblemKind.INSUFFICIENT_COLUMNS, "Insufficient columns")

    expense_id = fields[index["id"]].strip()
    date = fields[index["date"]].strip()
    amount_text = fields[index["amount"]].strip()
    category = fields[index["category"]].strip()
    description = fields[index["description"]]
    tags_text = fields[index["tags"]].strip()

    if not expense_id:
        raise _RowRejected(CsvProblemKind.MISSING_ID, "Missing ID")

    if not is_valid_date(date):
        raise _RowRejected(
            CsvProblemKind.INVALID_DATE,
            "Invalid Date format (YYYY-MM-DD required)",
        )

    amount = parse_amount(amount_text)
    if amount is None or amount < 0:
        raise _RowRejected(CsvProblemKind.INVALID_AMOUNT, "Invalid Amount")

    return Expense(
        id=expense_id,
        date=date,
        amount=amount,
        category=category or UNCATEGORIZED,
        description=unescape_description(description),
        tags=parse_tags(tags_text),
    )


def decode_expenses(text: str) -> DecodeResult:
    """
    Parse CSV text into expenses and problems.

    Returns every row that validated, even when other rows did not.
    Line numbers in problems are 1-based with the header on line 1.
    """
    lines = _LINE_BREAK.split(text)
    if len(lines) < 2:
        return _file_problem(
            CsvProblemKind.EMPTY_OR_HEADERLESS_FILE,
            "File is empty or missing headers",
        )

    headers = _parse_header(lines[0])
    missing = [name for name in HEADERS if name not in headers]
    if missing:
        return _file_problem(
            CsvProblemKind.MISSING_REQUIRED_COLUMNS,
            f"Missing required columns: {', '.join(missing)}",
        )

    index = {name: headers.index(name) for name in HEADERS}
    expenses = []
    problems = []

    for line_number, raw_line in enumerate(lines[1:], start=2):
        line = raw_line.strip()
        if not line:
            continue

        try:
            expenses.append(_decode_row(split_row(line), len(headers), index))
        except _RowRejected as e:
            problems.append(CsvProblem(kind=e.kind, line=line_number, message=e.message))

    logger.debug(
        "csv_decoded",
        row_count=len(expenses),
        problem_count=len(problems),
    )
    return DecodeResult(expenses=expenses, problems=problems)


def filter_new_expenses(
    text: str,
    existing: Optional[Iterable[Expense]] = None,
) -> ImportFilterResult:
    """
    Decode CSV text and keep only rows whose id is not already known.

    This is a read-only filter, not a merge: a known id is excluded no
    matter whether its other fields changed.
    """
    decoded = decode_expenses(text)
    existing_ids = {expense.id for expense in existing or ()}
    new_expenses = [e for e in decoded.expenses if e.id not in existing_ids]

    return ImportFilterResult(
        new_expenses=new_expenses,
        count=len(new_expenses),
        error_count=len(decoded.problems),
        problems=decoded.problems,
    )
