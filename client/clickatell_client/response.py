"""
Response parsing for the Clickatell HTTP API

The gateway answers with plain text. A failure looks like::

    ERR: 001, Authentication error

and a success is one line per result, each a list of ``KEY: value`` pairs::

    ID: 3f2a9b
    ID: 7c01d4 To: 4477791234567
"""

import re
from typing import Dict, Iterator, List, Mapping, Optional, Sequence

ERROR_PATTERN = re.compile(r"^ERR:\s*(\d+)\s*,?\s*(.*)$", re.DOTALL)

# A key followed by a colon, then everything up to the next key or the end of the line
PAIR_PATTERN = re.compile(r"([A-Za-z0-9_]+):\s*(.*?)\s*,?\s*(?=[A-Za-z0-9_]+:|$)")


class ClickatellError(Exception):
    """Base class for errors raised by the client library"""


class GatewayError(ClickatellError):
    """The gateway reported a failure"""

    def __init__(self, code: str, message: str, recipient: Optional[str] = None):
        super().__init__(f"{code}: {message}" if code else message)
        self.code = code
        self.message = message
        # Set when the failure belongs to one recipient of a bulk send
        self.recipient = recipient

    @classmethod
    def parse(cls, text: str) -> "GatewayError":
        """
        Build an error from an ``ERR: <code>, <message>`` body.

        Text that does not follow that shape is kept whole as the message
        with an empty code.
        """
        text = text.strip()
        match = ERROR_PATTERN.match(text)
        if match is None:
            return cls("", text)
        return cls(match.group(1), match.group(2).strip())


class MalformedResponseError(ClickatellError):
    """The body is neither an error nor ``KEY: value`` text"""

    def __init__(self, message: str, body: str = ""):
        super().__init__(message)
        self.body = body


class ParsedResponse:
    """Base of the two response shapes, :class:`Single` and :class:`Bulk`"""

    is_bulk = False

    def entries(self) -> List[Dict[str, str]]:
        raise NotImplementedError


class Single(ParsedResponse, Mapping[str, str]):
    """A reply made of one line of fields"""

    def __init__(self, fields: Mapping[str, str]):
        self._fields = dict(fields)

    def entries(self) -> List[Dict[str, str]]:
        return [dict(self._fields)]

    def __getitem__(self, key: str) -> str:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Single({self._fields!r})"


class Bulk(ParsedResponse, Sequence[Dict[str, str]]):
    """A reply with one line of fields per result, as sent for multiple recipients"""

    is_bulk = True

    def __init__(self, mappings):
        self._mappings = [dict(m) for m in mappings]

    def entries(self) -> List[Dict[str, str]]:
        return [dict(m) for m in self._mappings]

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [dict(m) for m in self._mappings[index]]
        return dict(self._mappings[index])

    def __len__(self) -> int:
        return len(self._mappings)

    def __eq__(self, other) -> bool:
        if isinstance(other, Bulk):
            return self._mappings == other._mappings
        return NotImplemented

    def __repr__(self) -> str:
        return f"Bulk({self._mappings!r})"


def _body_of(raw) -> str:
    if raw is None:
        return ""
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        return raw
    return getattr(raw, "text", "") or ""


def parse_line(line: str) -> Dict[str, str]:
    """Parse one ``KEY: value[, KEY: value]*`` line into an ordered dict"""
    fields = {}
    for key, value in PAIR_PATTERN.findall(line.strip()):
        fields[key] = value
    if not fields:
        raise MalformedResponseError(f"Unrecognised response line: {line!r}", line)
    return fields


def parse(raw) -> ParsedResponse:
    """
    Parse a gateway reply.

    Args:
        raw: Body text, or an HTTP response object with a ``text`` attribute

    Returns:
        ParsedResponse: :class:`Single` for one line, :class:`Bulk` for several

    Raises:
        GatewayError: the body is an ``ERR:`` reply
        MalformedResponseError: a line holds no ``KEY: value`` pair
    """
    body = _body_of(raw)
    if body.lstrip().startswith("ERR:"):
        raise GatewayError.parse(body)

    lines = [line for line in body.splitlines() if line.strip()]
    if not lines:
        return Single({})

    results = [parse_line(line) for line in lines]
    if len(results) == 1:
        return Single(results[0])
    return Bulk(results)
