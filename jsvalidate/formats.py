"""Checkers for the ``format`` keyword.

Supported formats: date-time (RFC 3339), email (RFC 5322 mailbox), hostname
(RFC 1035 / RFC 3696), ipv4, ipv6 and uri. Any other format tag is rejected.
"""

import datetime
import ipaddress
import re
from email.utils import parseaddr
from urllib.parse import urlparse

from jsvalidate import constants
from jsvalidate.errors import (InvalidDateTimeError, InvalidEmailError, InvalidFormatError,
                               InvalidHostnameError, InvalidIPv4Error, InvalidIPv6Error,
                               InvalidURIError)

_DATETIME_REGEX = re.compile(
    r'^(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(\.\d+)?([Zz]|[+\-](\d{2}):(\d{2}))$'
)
_PERCENT_ESCAPE_REGEX = re.compile(r'%(?![0-9A-Fa-f]{2})')
_IPV4_CHARS = frozenset('0123456789.')
_IPV6_CHARS = frozenset('0123456789:')


def is_date_time(s: str) -> bool:
    m = _DATETIME_REGEX.match(s)
    if not m:
        return False
    year, month, day, hour, minute, second = (int(g) for g in m.groups()[:6])
    try:
        datetime.datetime(year, month, day, hour, minute, second)
    except ValueError:
        return False
    if m.group(9) is not None:
        if int(m.group(9)) > 23 or int(m.group(10)) > 59:
            return False
    return True


def is_email(s: str) -> bool:
    _, addr = parseaddr(s)
    if not addr or any(c.isspace() for c in addr):
        return False
    local, at, domain = addr.rpartition('@')
    if not at or not local or not domain:
        return False
    text = s.strip()
    if '<' not in text:
        # a bare address must be the whole string, not a fragment parseaddr salvaged
        return text == addr
    # display-name <addr>: the angle brackets close the string and enclose exactly addr
    display, _, rest = text.rpartition('<')
    if not rest.endswith('>') or rest[:-1] != addr:
        return False
    return '>' not in display


def is_domain_name(s: str) -> bool:
    """Domain name syntax of RFC 1035 as relaxed by RFC 3696."""
    if len(s) == 0 or len(s) > 255:
        return False

    last = '.'
    ok = False  # ok once we've seen a letter
    partlen = 0
    for c in s:
        if 'a' <= c <= 'z' or 'A' <= c <= 'Z' or c == '_':
            ok = True
            partlen += 1
        elif '0' <= c <= '9':
            partlen += 1
        elif c == '-':
            # byte before dash cannot be dot
            if last == '.':
                return False
            partlen += 1
        elif c == '.':
            # byte before dot cannot be dot or dash
            if last in ('.', '-'):
                return False
            if partlen > 63 or partlen == 0:
                return False
            partlen = 0
        else:
            return False
        last = c
    if last == '-' or partlen > 63:
        return False
    return ok


def is_ipv4(s: str) -> bool:
    if not s or any(c not in _IPV4_CHARS for c in s):
        return False
    try:
        ipaddress.IPv4Address(s)
    except ValueError:
        return False
    return True


def is_ipv6(s: str) -> bool:
    if not s or any(c not in _IPV6_CHARS for c in s):
        return False
    try:
        ipaddress.IPv6Address(s)
    except ValueError:
        return False
    return True


def is_uri_reference(s: str) -> bool:
    if any(ord(c) <= 0x20 or ord(c) == 0x7f for c in s):
        return False
    if _PERCENT_ESCAPE_REGEX.search(s):
        return False
    try:
        # port is parsed lazily and raises ValueError when out of range
        urlparse(s).port
    except ValueError:
        return False
    return True


_CHECKERS = {
    constants.FORMAT_DATE_TIME: (is_date_time, InvalidDateTimeError),
    constants.FORMAT_EMAIL: (is_email, InvalidEmailError),
    constants.FORMAT_HOSTNAME: (is_domain_name, InvalidHostnameError),
    constants.FORMAT_IPV4: (is_ipv4, InvalidIPv4Error),
    constants.FORMAT_IPV6: (is_ipv6, InvalidIPv6Error),
    constants.FORMAT_URI: (is_uri_reference, InvalidURIError),
}


def check_format(value: str, format_name: str, path: str = "#") -> None:
    """Checks a string against a format tag.

    Raises:
        InvalidFormatError: If the format is unknown, or a subclass of it if the value does not conform
    """
    checker = _CHECKERS.get(format_name)
    if checker is None:
        raise InvalidFormatError(value, format_name, path=path)
    is_valid, error = checker
    if not is_valid(value):
        raise error(value, path)
