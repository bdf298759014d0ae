"""
Input parsing for the PoisePMS core.

Every function takes either the raw text typed at the console or an already
typed value, and returns the typed value or raises ValidationError/ParseError.
None of them prompt or loop; re-prompting is the menu's job.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from errors import ParseError, ValidationError

_DIGITS = re.compile(r"[0-9]+")
_PENNY = Decimal("0.01")
# Largest rowid SQLite can store
MAX_ID = 2 ** 63 - 1


def is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def require_text(value, field):
    """Non-blank text, stripped"""
    if is_blank(value):
        raise ValidationError(f"{field} cannot be left blank. Please enter a value.", field)
    return str(value).strip()


def optional_text(value):
    return "" if value is None else str(value).strip()


def parse_money(value, field="amount"):
    """Parse a GBP amount into a Decimal with two decimal places"""
    if isinstance(value, bool):
        raise ParseError(f"Invalid entry for {field}. Please enter a numeric value.", field)
    if isinstance(value, Decimal):
        amount = value
    else:
        text = str(value).strip() if value is not None else ""
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise ParseError(f"Invalid entry for {field}. Please enter a numeric value.", field) from None
    if not amount.is_finite():
        raise ParseError(f"Invalid entry for {field}. Please enter a numeric value.", field)
    try:
        return amount.quantize(_PENNY, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # more digits than the decimal context can hold
        raise ParseError(f"Invalid entry for {field}. The amount is too large.", field) from None


def parse_date(value, field="date"):
    """Parse a YYYY-MM-DD calendar date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip() if value is not None else ""
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        raise ParseError(
            f"Invalid date format for {field}. Please enter the date in YYYY-MM-DD format.", field
        ) from None


def parse_optional_date(value, field="date"):
    """Like parse_date but blank means no date (None)"""
    if is_blank(value):
        return None
    return parse_date(value, field)


def parse_boolean(value, field="finalised"):
    """Strictly 'true' or 'false' (any case)"""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower() if value is not None else ""
    if text == "true":
        return True
    if text == "false":
        return False
    raise ParseError(f"Invalid entry for {field}. Please enter 'true' or 'false'.", field)


def parse_id(value, field="ID"):
    """A positive integer id, written without sign or leading zeros"""
    if isinstance(value, bool):
        raise ParseError(f"Invalid entry for {field}. IDs are numeric values only.", field)
    if isinstance(value, int):
        record_id = value
    else:
        text = str(value).strip() if value is not None else ""
        if not _DIGITS.fullmatch(text) or (len(text) > 1 and text.startswith("0")):
            raise ParseError(f"Invalid entry for {field}. IDs are numeric values only.", field)
        record_id = int(text)
    if not 1 <= record_id <= MAX_ID:
        raise ParseError(f"Invalid entry for {field}. IDs run from 1 to {MAX_ID}.", field)
    return record_id


def parse_optional_id(value, field="ID"):
    """Blank means 'leave unchanged' and comes back as None"""
    if is_blank(value):
        return None
    return parse_id(value, field)


def parse_menu_choice(text, minimum, maximum):
    """Validate a menu selection between minimum and maximum (inclusive)"""
    text = (text or "").strip()
    # digits only, and no leading zeros except the literal "0"
    if not _DIGITS.fullmatch(text) or (len(text) > 1 and text.startswith("0")):
        raise ParseError("Invalid input. Please enter a number.", "choice")
    choice = int(text)
    if not minimum <= choice <= maximum:
        raise ValidationError("Invalid choice. Please enter a number from the menu.", "choice")
    return choice
