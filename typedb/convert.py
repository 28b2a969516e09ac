"""Conversion of database values to Python values and back."""

from __future__ import annotations

import base64
import dataclasses
import json
import math
import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"[0-9]+")

_TRUE_WORDS = frozenset({"t", "true", "1"})
_FALSE_WORDS = frozenset({"f", "false", "0"})

_TIME_LAYOUTS = (
    re.compile(
        r"(?P<y>[0-9]{4})-(?P<mo>[0-9]{2})-(?P<d>[0-9]{2})T"
        r"(?P<h>[0-9]{2}):(?P<mi>[0-9]{2}):(?P<s>[0-9]{2})"
        r"(?:\.(?P<frac>[0-9]+))?(?P<tz>Z|[+-][0-9]{2}:[0-9]{2})"
    ),
    re.compile(
        r"(?P<y>[0-9]{4})-(?P<mo>[0-9]{2})-(?P<d>[0-9]{2}) "
        r"(?P<h>[0-9]{2}):(?P<mi>[0-9]{2}):(?P<s>[0-9]{2})"
        r"(?:\.(?P<frac>[0-9]+))?"
    ),
    re.compile(r"(?P<y>[0-9]{4})-(?P<mo>[0-9]{2})-(?P<d>[0-9]{2})"),
)


# --- formatting -----------------------------------------------------------


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    sign, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = "".join(map(str, digit_tuple))
    point = len(digits) + exponent
    digits = digits.rstrip("0")
    prefix = "-" if sign else ""
    power = point - 1
    if power < -4 or power >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        exp_sign = "-" if power < 0 else "+"
        return f"{prefix}{mantissa}e{exp_sign}{abs(power):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return f"{prefix}{digits}{'0' * (point - len(digits))}"
    return f"{prefix}{digits[:point]}.{digits[point:]}"


def _format_value(value: Any) -> str:
    """Render a value the way a generic value formatter prints it."""
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return "[" + " ".join(str(byte) for byte in value) + "]"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_format_value(item) for item in value) + "]"
    if isinstance(value, dict):
        pairs = sorted(
            ((_format_value(k), _format_value(v)) for k, v in value.items()),
            key=lambda pair: pair[0],
        )
        return "map[" + " ".join(f"{k}:{v}" for k, v in pairs) + "]"
    return str(value)


def _format_rfc3339(moment: datetime) -> str:
    text = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}T"
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset()
    if not offset:
        return text + "Z"
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


# --- integers --------------------------------------------------------------


def _wrap(number: int, bits: int, signed: bool) -> int:
    number &= (1 << bits) - 1
    if signed and number >= 1 << (bits - 1):
        number -= 1 << bits
    return number


def _truncate(value: float) -> int:
    if not math.isfinite(value):
        raise ValueError(f"typedb: cannot convert {value!r} to an integer")
    return math.trunc(value)


def _parse_signed(text: str, bits: int) -> int:
    if not _SIGNED_RE.fullmatch(text):
        raise ValueError(f"typedb: parsing {text!r}: invalid syntax")
    number = int(text)
    limit = 1 << (bits - 1)
    if not -limit <= number < limit:
        raise ValueError(f"typedb: parsing {text!r}: value out of range")
    return number


def _parse_unsigned(text: str, bits: int) -> int:
    if not _UNSIGNED_RE.fullmatch(text):
        raise ValueError(f"typedb: parsing {text!r}: invalid syntax")
    number = int(text)
    if number >= 1 << bits:
        raise ValueError(f"typedb: parsing {text!r}: value out of range")
    return number


def _to_signed(value: Any, bits: int) -> int:
    if isinstance(value, bool):
        return _parse_signed(_format_value(value), bits)
    if isinstance(value, int):
        return _wrap(value, bits, True)
    if isinstance(value, float):
        return _wrap(_truncate(value), bits, True)
    if isinstance(value, str):
        return _parse_signed(value, bits)
    return _parse_signed(_format_value(value), bits)


def _to_unsigned(value: Any, bits: int, kind: str) -> int:
    if isinstance(value, bool):
        return _parse_unsigned(_format_value(value), bits)
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"typedb: cannot convert negative int to {kind}")
        return _wrap(value, bits, False)
    if isinstance(value, float):
        if value < 0:
            raise ValueError(f"typedb: cannot convert negative float to {kind}")
        return _wrap(_truncate(value), bits, False)
    if isinstance(value, str):
        return _parse_unsigned(value, bits)
    return _parse_unsigned(_format_value(value), bits)


def to_int(value: Any) -> int:
    """Convert a value to a 64-bit signed integer."""
    return _to_signed(value, 64)


def to_int64(value: Any) -> int:
    """Convert a value to a 64-bit signed integer."""
    return _to_signed(value, 64)


def to_int32(value: Any) -> int:
    """Convert a value to a 32-bit signed integer; numbers wrap, strings are range-checked."""
    return _to_signed(value, 32)


def to_uint(value: Any) -> int:
    """Convert a value to a 64-bit unsigned integer."""
    return _to_unsigned(value, 64, "uint")


def to_uint32(value: Any) -> int:
    """Convert a value to a 32-bit unsigned integer."""
    return _to_unsigned(value, 32, "uint32")


def to_uint64(value: Any) -> int:
    """Convert a value to a 64-bit unsigned integer (e.g. an unsigned BIGINT sent as text)."""
    return _to_unsigned(value, 64, "uint64")


# --- scalars ---------------------------------------------------------------


def to_bool(value: Any) -> bool:
    """Convert a value to a boolean, accepting t/true/1 and f/false/0 in any case."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    text = value if isinstance(value, str) else _format_value(value)
    word = text.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"typedb: parsing {text!r}: invalid boolean")


def to_str(value: Any) -> str:
    """Render a value as text; None becomes the empty string."""
    if value is None:
        return ""
    return _format_value(value)


def parse_time(text: str) -> datetime:
    """Parse a timestamp in one of the common SQL and RFC 3339 layouts."""
    if text == "":
        return ZERO_TIME
    for layout in _TIME_LAYOUTS:
        match = layout.fullmatch(text)
        if match is None:
            continue
        try:
            return _build_time(match.groupdict())
        except ValueError:
            continue
    raise ValueError(f"typedb: unable to parse time: {text!r}")


def _build_time(parts: dict[str, str | None]) -> datetime:
    fraction = parts.get("frac") or ""
    microsecond = int((fraction + "000000")[:6])
    zone = parts.get("tz")
    if zone is None or zone == "Z":
        tzinfo = timezone.utc
    else:
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        if minutes >= 60:
            raise ValueError("bad zone offset")
        offset = timedelta(hours=hours, minutes=minutes)
        tzinfo = timezone(-offset if zone[0] == "-" else offset)
    return datetime(
        int(parts["y"]),
        int(parts["mo"]),
        int(parts["d"]),
        int(parts.get("h") or 0),
        int(parts.get("mi") or 0),
        int(parts.get("s") or 0),
        microsecond,
        tzinfo=tzinfo,
    )


def to_time(value: Any) -> datetime:
    """Convert a datetime, string or bytes value to a datetime."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return parse_time(value)
    if isinstance(value, (bytes, bytearray)):
        return parse_time(bytes(value).decode("utf-8", errors="replace"))
    return parse_time(_format_value(value))


# --- collections -----------------------------------------------------------


def _convert_each(items: Any, convert: Callable[[Any], Any]) -> list:
    result = []
    for index, item in enumerate(items):
        try:
            result.append(convert(item))
        except ValueError as exc:
            raise ValueError(f"element {index}: {exc}") from exc
    return result


def _array_parts(text: str) -> list[str]:
    body = text.strip("{}")
    if not body:
        return []
    return [part.strip() for part in body.split(",")]


def to_int_list(value: Any) -> list[int]:
    """Convert a sequence or an array literal such as "{1,2,3}" to a list of ints."""
    if isinstance(value, (list, tuple)):
        return _convert_each(value, to_int)
    if isinstance(value, str):
        return _convert_each(_array_parts(value), lambda part: _parse_signed(part, 64))
    raise TypeError(f"typedb: unsupported type for int array: {type(value).__name__}")


def to_str_list(value: Any) -> list[str]:
    """Convert a sequence or an array literal such as "{a,b,c}" to a list of strings."""
    if isinstance(value, (list, tuple)):
        return [to_str(item) for item in value]
    if isinstance(value, str):
        return _array_parts(value)
    raise TypeError(f"typedb: unsupported type for string array: {type(value).__name__}")


def _load_json(value: str | bytes | bytearray) -> Any:
    return json.loads(bytes(value) if isinstance(value, bytearray) else value)


def to_json_object(value: Any) -> dict[str, Any] | None:
    """Convert a dict or a JSON text holding an object to a dict; JSON null gives None."""
    if isinstance(value, dict):
        return value
    if isinstance(value, (str, bytes, bytearray)):
        result = _load_json(value)
        if result is None or isinstance(result, dict):
            return result
        raise ValueError(f"typedb: JSON value is not an object: {type(result).__name__}")
    raise TypeError(f"typedb: unsupported type for JSONB: {type(value).__name__}")


def to_str_map(value: Any) -> dict[str, str] | None:
    """Convert a dict or a JSON object of strings to a dict of strings."""
    if isinstance(value, dict):
        return {to_str(key): to_str(item) for key, item in value.items()}
    if isinstance(value, (str, bytes, bytearray)):
        result = _load_json(value)
        if result is None:
            return None
        if not isinstance(result, dict):
            raise ValueError(f"typedb: JSON value is not an object: {type(result).__name__}")
        converted = {}
        for key, item in result.items():
            if item is None:
                converted[key] = ""
            elif isinstance(item, str):
                converted[key] = item
            else:
                raise ValueError(f"typedb: JSON value for {key!r} is not a string")
        return converted
    raise TypeError(f"typedb: unsupported type for map: {type(value).__name__}")


# --- serialization ---------------------------------------------------------


def _json_default(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return _format_rfc3339(obj)
    if isinstance(obj, (bytes, bytearray)):
        return base64.b64encode(bytes(obj)).decode("ascii")
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    raise TypeError(f"unsupported type: {type(obj).__name__}")


def _escape_html(text: str) -> str:
    return (
        text.replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


def serialize_json(value: Any) -> Any:
    """Serialize a value to compact JSON text; strings and bytes are returned unchanged."""
    if value is None:
        return None
    if isinstance(value, (str, bytes, bytearray)):
        return value
    try:
        text = json.dumps(
            value,
            default=_json_default,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as exc:
        raise TypeError(f"typedb: failed to marshal JSONB: {exc}") from exc
    return _escape_html(text)


def serialize_int_array(value: Any) -> str:
    """Serialize a sequence of integers to an array literal such as "{1,2,3}"."""
    if value is None:
        return "{}"
    if isinstance(value, (bytes, bytearray)):
        numbers = list(value)
    elif isinstance(value, (list, tuple)):
        numbers = _convert_each(value, to_int)
    else:
        raise TypeError(
            f"typedb: unsupported type for int array serialization: {type(value).__name__}"
        )
    return "{" + ",".join(str(number) for number in numbers) + "}"


def _quote_array_element(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    if any(char in escaped for char in ',"{}\\'):
        return f'"{escaped}"'
    return escaped


def serialize_string_array(value: Any) -> str:
    """Serialize a sequence of strings to an array literal, quoting where needed."""
    if value is None:
        return "{}"
    if not isinstance(value, (list, tuple)):
        raise TypeError(
            f"typedb: unsupported type for string array serialization: {type(value).__name__}"
        )
    return "{" + ",".join(_quote_array_element(to_str(item)) for item in value) + "}"


def serialize(value: Any) -> Any:
    """Convert a value to a form a database driver accepts.

    Scalars, bytes and datetimes pass through; dicts become JSON; lists of
    ints (including the empty list) and lists of strings become array
    literals; anything else becomes JSON.
    """
    if value is None:
        return None
    if isinstance(value, (bool, int, float, str, bytes, bytearray, datetime)):
        return value
    if isinstance(value, dict):
        return serialize_json(value)
    if isinstance(value, (list, tuple)):
        if all(isinstance(item, int) and not isinstance(item, bool) for item in value):
            return serialize_int_array(value)
        if all(isinstance(item, str) for item in value):
            return serialize_string_array(value)
    return serialize_json(value)