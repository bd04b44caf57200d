# =============================================================================
# lib/phone.py - Brazilian Phone Helpers
# =============================================================================
# Phones are stored as typed by the user (usually "(11) 98888-7777").
# Validation only looks at the digits: DDD (2) + mobile number (9) = 11.
# =============================================================================

import re

PHONE_DIGITS = 11

# Input mask in the react-input-mask notation (9 = any digit)
PHONE_MASK = "(99) 99999-9999"

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_digits(value: str | None) -> str:
    """Strip everything that isn't a digit."""
    return _NON_DIGITS.sub("", value or "")


def is_valid_phone(value: str | None) -> bool:
    """A phone is valid when its digit-only form has exactly 11 digits."""
    return len(normalize_digits(value)) == PHONE_DIGITS


def mask_for(value: str | None) -> str:
    """
    Input mask for a phone field.

    The mask is fixed; the value is ignored.
    """
    return PHONE_MASK


def format_phone(value: str | None) -> str:
    """
    Apply the phone mask to the digits of `value`.

    Stops at the first mask slot that has no digit left, so partial
    input gives a partial mask: "119" -> "(11) 9".
    """
    digits = normalize_digits(value)
    if not digits:
        return ""

    out = []
    it = iter(digits)
    pending = ""
    for ch in mask_for(value):
        if ch == "9":
            d = next(it, None)
            if d is None:
                break
            out.append(pending + d)
            pending = ""
        else:
            pending += ch
    return "".join(out)
