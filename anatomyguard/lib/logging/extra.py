import importlib
import json
import logging
import string
import sys
import textwrap
import typing as t

import pygments
from pygments.formatters import Terminal256Formatter
from pygments.lexers.data import JsonLexer  # pyright: ignore [reportMissingTypeStubs]
from pygments.style import Style

from .json import JSONEncoder
from .style import LogStyle

# attributes every LogRecord carries; anything else arrived through `extra=`
ReservedKeys = frozenset(logging.makeLogRecord({}).__dict__) | {"asctime", "message", "color_message"}


def _resolve(spec: str | type[logging.Formatter]) -> type[logging.Formatter]:
    if not isinstance(spec, str):
        return spec
    module_name, _, attr = spec.rpartition(".")
    return getattr(importlib.import_module(module_name), attr)


class ExtraFormatter(logging.Formatter):
    """Wraps a base formatter and appends the record's `extra` fields as JSON.

    Multi-line messages are re-indented to line up under the first line, and
    the JSON is syntax-highlighted when the handler writes to a TTY.
    """

    def __init__(
        self,
        base: str | type[logging.Formatter],
        format: str | None = None,
        datefmt: str | None = None,
        indent: bool = True,
        pyg_style: t.Type[Style] = LogStyle,
        style: t.Literal["%", "{", "$"] = "%",
        validate: bool = True,
        *,
        defaults: t.Any = None,
        **kwargs: t.Any,
    ):
        base_cls = _resolve(base)
        self.base = base_cls(format, datefmt=datefmt, style=style, validate=validate, defaults=defaults, **kwargs)
        self.pyg_style = pyg_style
        self.indent = indent
        self.colorize = not kwargs.get("no_color", False)

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if "\n" in msg:
            formatted = self.base.format(record)
            idx = formatted.find(msg)
            indent = " " * len([c for c in formatted[:idx] if c in string.printable])
            line, *lines = msg.splitlines()
            body = textwrap.indent("\n".join(lines), prefix=indent)
            record.msg = record.message = f"{line}\n{body}"
            record.args = None
        message = self.base.format(record)

        d = record.__dict__
        extra = {k: d[k] for k in d.keys() - ReservedKeys}
        if not extra:
            return message

        js = json.dumps(extra, sort_keys=True, indent=(4 if self.indent else None), cls=JSONEncoder)
        if self.colorize and _stderr_is_tty():
            hl = pygments.highlight  # pyright: ignore [reportUnknownMemberType, reportUnknownVariableType]
            js = hl(js, JsonLexer(), Terminal256Formatter(style=self.pyg_style), None)
        return message + " " + js.strip()

    def __getattr__(self, name: str) -> t.Any:
        return getattr(self.base, name)


def _stderr_is_tty() -> bool:
    # the formatter has no reference to its handler; the console handler writes to stderr
    isatty = getattr(sys.stderr, "isatty", None)
    return bool(isatty and isatty())
