"""
License key generation.

Keys are drawn from a configurable alphabet with the operating system's
CSPRNG and optionally prefixed, e.g. ACME-x7Qp2LmZ9aBc.
"""

import secrets
import string

from core.domain.exceptions import InvalidCharsetRangeError, RandomSourceError

DEFAULT_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
DEFAULT_SEPARATOR = "-"
DEFAULT_KEY_LENGTH = 12


def parse_charset(spec: str) -> str:
    """
    Expand a charset specification into an alphabet.

    The charset string is a comma-separated list of tokens. A three
    character token of the form X-Y expands to every character from X to Y
    inclusive; any other token is taken literally. Duplicates are kept, so
    a character listed twice is drawn twice as often.

    Args:
        spec: Charset specification (e.g. "A-Z,0-9" or "a-f,xyz")

    Returns:
        Alphabet string; the default alphabet when spec is empty

    Raises:
        InvalidCharsetRangeError: If a range runs backwards
    """
    if not spec:
        return DEFAULT_ALPHABET

    parts = []
    for token in spec.split(","):
        if len(token) == 3 and token[1] == "-":
            start, end = token[0], token[2]
            if start > end:
                raise InvalidCharsetRangeError(f"Invalid charset range: {token}")
            parts.append("".join(chr(c) for c in range(ord(start), ord(end) + 1)))
        else:
            parts.append(token)
    return "".join(parts)


def generate_license_key(
    prefix: str = "",
    length: int = DEFAULT_KEY_LENGTH,
    separator: str = DEFAULT_SEPARATOR,
    alphabet: str = DEFAULT_ALPHABET,
) -> str:
    """
    Generate a license key in format: PREFIX<separator>RANDOM.

    Args:
        prefix: Key prefix; omitted together with the separator when empty
        length: Number of random characters (non-positive means default)
        separator: Separator between prefix and random part (empty means "-")
        alphabet: Characters to draw from (empty means default alphabet)

    Returns:
        Generated license key string

    Raises:
        RandomSourceError: If the secure random source fails
    """
    if length <= 0:
        length = DEFAULT_KEY_LENGTH
    if not separator:
        separator = DEFAULT_SEPARATOR
    if not alphabet:
        alphabet = DEFAULT_ALPHABET

    try:
        random_part = "".join(secrets.choice(alphabet) for _ in range(length))
    except OSError as exc:
        raise RandomSourceError(f"Secure random source unavailable: {exc}") from exc

    if prefix:
        return f"{prefix}{separator}{random_part}"
    return random_part
