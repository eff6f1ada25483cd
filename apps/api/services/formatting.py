from decimal import Decimal, ROUND_HALF_UP

CURRENCY_SYMBOL = "₦"
CENTS = Decimal("0.01")

_ONES = ["", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine"]
_TEENS = ["ten", "eleven", "twelve", "thirteen", "fourteen", "fifteen",
          "sixteen", "seventeen", "eighteen", "nineteen"]
_TENS = ["", "", "twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety"]
_SCALES = ["", "thousand", "million", "billion", "trillion"]


def _money(amount) -> Decimal:
    return Decimal(str(amount or 0)).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_currency(amount) -> str:
    """Render an amount as naira with thousands separators, e.g. ₦1,234.56."""
    value = _money(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(value):,.2f}"


def _chunk_words(n: int) -> str:
    if n == 0:
        return ""
    if n < 10:
        return _ONES[n]
    if n < 20:
        return _TEENS[n - 10]
    if n < 100:
        t, o = divmod(n, 10)
        return _TENS[t] + (f"-{_ONES[o]}" if o else "")
    h, rest = divmod(n, 100)
    words = f"{_ONES[h]} hundred"
    if rest:
        words += f" and {_chunk_words(rest)}"
    return words


def integer_to_words(n: int) -> str:
    if n == 0:
        return "zero"
    if n < 0:
        return "minus " + integer_to_words(-n)
    parts = []
    scale = 0
    while n > 0:
        n, chunk = divmod(n, 1000)
        if chunk:
            label = _SCALES[scale] if scale < len(_SCALES) else f"10^{scale * 3}"
            parts.append(f"{_chunk_words(chunk)} {label}".strip())
        scale += 1
    return " ".join(reversed(parts))


def amount_in_words(amount) -> str:
    """
    Spell out a naira amount the way it is printed on vouchers and receipts,
    e.g. 1234.56 -> "One thousand two hundred and thirty-four naira and
    Fifty-six kobo only".
    """
    value = _money(amount)
    if value == 0:
        return "zero naira only"
    naira = int(value)
    kobo = int((abs(value) - abs(naira)) * 100)

    text = f"{integer_to_words(naira).capitalize()} naira"
    if kobo:
        text += f" and {integer_to_words(kobo).capitalize()} kobo"
    return text + " only"
