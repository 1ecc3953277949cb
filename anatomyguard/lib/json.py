from __future__ import annotations

import base64
import datetime
import decimal
import enum
import functools
import json as pyjson
import pathlib
import typing as t

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]


# encoders
def encode_bytes(obj: bytes) -> str:
    return base64.b64encode(obj).decode("utf8")


def encode_datetime(obj: datetime.datetime | datetime.date) -> str:
    return obj.isoformat()


def encode_decimal(obj: decimal.Decimal) -> int | float:
    # marks are exact decimals internally but plain numbers on the wire
    if obj == obj.to_integral_value():
        return int(obj)
    return float(obj)


def encode_enum(obj: enum.Enum) -> JSONValue:
    return obj.value


def encode_path(obj: pathlib.Path) -> str:
    return str(obj)


def encode_pydantic(obj: t.Any) -> JSONValue:
    return obj.model_dump(mode="json")


def encode_set(obj: set[t.Any] | frozenset[t.Any]) -> list[t.Any]:
    return list(obj)


@functools.cache
def _encoder_map() -> dict[type, t.Callable[[t.Any], JSONValue]]:
    return {
        bytes: encode_bytes,
        datetime.date: encode_datetime,
        datetime.datetime: encode_datetime,
        decimal.Decimal: encode_decimal,
        enum.Enum: encode_enum,
        frozenset: encode_set,
        pathlib.Path: encode_path,
        set: encode_set,
    }


# stdlib-compatible JSON encoder
class JSONEncoder(pyjson.JSONEncoder):
    def get_encoders(self) -> dict[type, t.Callable[[t.Any], JSONValue]]:
        return _encoder_map()

    def default(self, o: t.Any) -> JSONValue:
        if hasattr(o, "model_dump"):
            return encode_pydantic(o)

        encoders = self.get_encoders()
        for tp in encoders:
            if isinstance(o, tp):
                return encoders[tp](o)

        return pyjson.JSONEncoder.default(self, o)


def dumps(
    obj: t.Any,
    *,
    ensure_ascii: bool = True,
    allow_nan: bool = True,
    cls: type[pyjson.JSONEncoder] = JSONEncoder,
    indent: int | str | None = None,
    separators: tuple[str, str] | None = None,
    sort_keys: bool = False,
    **kw: t.Any,
) -> str:
    return pyjson.dumps(
        obj,
        ensure_ascii=ensure_ascii,
        allow_nan=allow_nan,
        cls=cls,
        indent=indent,
        separators=separators,
        sort_keys=sort_keys,
        **kw,
    )


def _reject_constant(name: str) -> t.NoReturn:
    raise ValueError(f"non-finite number {name} is not valid JSON")


def loads(s: str | bytes | bytearray, *, exact: bool = False, **kw: t.Any) -> JSONValue:
    """Parse JSON text.

    With ``exact``, fractional numbers are parsed as :class:`decimal.Decimal`
    instead of ``float`` and the non-standard constants ``NaN`` and
    ``Infinity`` are rejected.
    """
    if exact:
        kw.setdefault("parse_float", decimal.Decimal)
        kw.setdefault("parse_constant", _reject_constant)
    return pyjson.loads(s, **kw)
