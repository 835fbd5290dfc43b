"""
Spell out a cheque amount for the printed cheque face.

Example: 2021.05 -> "Two Thousand Twenty-One Dollars and Five Cents"
"""

from decimal import Decimal

from app.core.config import get_settings
from app.core.exceptions import ValidationError
from app.models.cheque import to_amount

ONES = ["Zero", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
TEENS = [
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen",
    "Sixteen", "Seventeen", "Eighteen", "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]
SCALES = ["", "Thousand", "Million"]


def _chunk_to_words(n: int) -> str:
    if n < 10:
        return ONES[n]
    if n < 20:
        return TEENS[n - 10]
    if n < 100:
        tens, ones = divmod(n, 10)
        return TENS[tens] if ones == 0 else f"{TENS[tens]}-{ONES[ones]}"
    hundreds, rest = divmod(n, 100)
    if rest == 0:
        return f"{ONES[hundreds]} Hundred"
    return f"{ONES[hundreds]} Hundred and {_chunk_to_words(rest)}"


def number_to_words(n: int) -> str:
    if n == 0:
        return ONES[0]
    words = []
    scale = 0
    while n > 0:
        n, chunk = divmod(n, 1000)
        if chunk:
            words.insert(0, f"{_chunk_to_words(chunk)} {SCALES[scale]}".strip())
        scale += 1
    return " ".join(words)


def amount_in_words(amount) -> str:
    settings = get_settings()
    amount = to_amount(amount)
    if amount < 0:
        raise ValidationError("Negative amounts are not allowed", field="amount")
    if amount > settings.MAX_CHEQUE_AMOUNT:
        raise ValidationError(
            f"Amount exceeds the limit of {settings.MAX_CHEQUE_AMOUNT:,.2f}", field="amount"
        )
    if amount != amount.quantize(Decimal("0.01")):
        raise ValidationError("Amount has more than two decimal places", field="amount")

    whole = int(amount)
    cents = int((amount - whole) * 100)
    unit = settings.CURRENCY_NAME if whole == 1 else f"{settings.CURRENCY_NAME}s"
    subunit = settings.CURRENCY_SUBUNIT_NAME if cents == 1 else f"{settings.CURRENCY_SUBUNIT_NAME}s"
    return f"{number_to_words(whole)} {unit} and {number_to_words(cents)} {subunit}"
