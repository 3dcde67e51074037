"""Session identifiers and their public short codes.

A session is identified internally by a UUID and publicly by a base58 short
code. "Play again" derives the next session from the current short code with
a UUIDv5 in the URL namespace, so every participant lands in the same new
session without asking the server.
"""

from __future__ import annotations

from uuid import NAMESPACE_URL, UUID, uuid4, uuid5

import shortuuid

from fakeartist.exceptions import InvalidSessionCodeError

FLICKR_BASE58 = "123456789abcdefghijkmnopqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ"

# Alphabet order is significant: browser clients encode with this exact ordering.
_translator = shortuuid.ShortUUID(alphabet=FLICKR_BASE58, dont_sort_alphabet=True)


def encode_session_id(session_id: UUID) -> str:
    """Encode a session UUID as its short code."""
    return _translator.encode(session_id)


def decode_session_code(code: str) -> UUID:
    """Decode a short code back to the session UUID.

    Raises:
        InvalidSessionCodeError: If the code contains characters outside the
            alphabet or does not fit in 128 bits.
    """
    if not code:
        raise InvalidSessionCodeError(code)
    try:
        return _translator.decode(code)
    except ValueError as exc:
        raise InvalidSessionCodeError(code) from exc


def next_session_id(session_id: UUID) -> UUID:
    """Derive the "play again" session from the current one."""
    return uuid5(NAMESPACE_URL, encode_session_id(session_id))


def next_session_code(code: str) -> str:
    """Short code of the "play again" session for ``code``."""
    return encode_session_id(next_session_id(decode_session_code(code)))


def new_session_code() -> str:
    """Short code for a brand new random session."""
    return encode_session_id(uuid4())
