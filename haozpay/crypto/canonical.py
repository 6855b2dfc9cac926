"""Canonical sign string + SHA-256 hex digest."""
import math
from decimal import Decimal
from typing import Mapping, Optional, Union

from haozpay.common.utils import sha256_hex


ParamValue = Optional[Union[str, int, float, bool]]

SIGN_FIELD = "sign"


def _format_float(value: float) -> str:
    """
    Render a float the way the platform's reference SDK does.

    Shortest round-trip digits; exponent form when the decimal exponent
    is below -4 or at least 6 (0.02 -> "0.02", 100.0 -> "100",
    1e6 -> "1e+06", 1.5e-7 -> "1.5e-07").
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    sign, digit_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    # value == 0.<digits> * 10**point
    point = len(digits) + exponent
    exp = point - 1
    prefix = "-" if sign else ""

    if exp < -4 or exp >= 6:
        mantissa = digits[0]
        if len(digits) > 1:
            mantissa += "." + digits[1:]
        return f"{prefix}{mantissa}e{'-' if exp < 0 else '+'}{abs(exp):02d}"

    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return f"{prefix}{digits}{'0' * (point - len(digits))}"
    return f"{prefix}{digits[:point]}.{digits[point:]}"


def render_value(value: ParamValue) -> str:
    """
    Render one parameter value as text.

    Raises:
        TypeError: If the value is not str, int, float or bool
    """
    # bool first: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return value
    raise TypeError(f"unsupported parameter value type: {type(value).__name__}")


def build_sign_string(params: Optional[Mapping[str, ParamValue]]) -> str:
    """
    Build the canonical string that gets hashed and signed.

    Entries with key "sign", a None value, or a blank rendering are
    dropped. The rest are sorted by key (byte order) and joined as
    key=value with "&". Nothing is escaped: "&" and "=" inside values
    pass through as-is.

    Args:
        params: Parameter name -> value

    Returns:
        Canonical string ("" for empty input)
    """
    if not params:
        return ""

    pairs = []
    for key in sorted(params, key=lambda k: k.encode("utf-8")):
        value = params[key]
        if key == SIGN_FIELD or value is None:
            continue
        try:
            text = render_value(value)
        except TypeError as e:
            raise TypeError(f"parameter {key!r}: {e}") from e
        if not text.strip():
            continue
        pairs.append(f"{key}={text}")

    return "&".join(pairs)


def digest_hex(sign_string: str) -> str:
    """SHA-256 of the UTF-8 sign string as 64 lowercase hex chars."""
    return sha256_hex(sign_string.encode("utf-8"))
