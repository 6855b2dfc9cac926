"""Helpers: base64, sha256 hex, millisecond clock."""
import base64
import binascii
import hashlib
import time


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")


def b64d(s: str) -> bytes:
    """
    Strict standard-alphabet base64 decode.

    CR/LF are ignored, any other non-alphabet character or bad padding
    raises binascii.Error.
    """
    s = s.replace("\r", "").replace("\n", "")
    try:
        return base64.b64decode(s, validate=True)
    except binascii.Error:
        raise
    except ValueError as e:
        # non-ASCII str input
        raise binascii.Error(str(e)) from e


def now_ms() -> int:
    return int(time.time() * 1000)


def sha256_hex(b: bytes) -> str:
    return hashlib.sha256(b).hexdigest()
