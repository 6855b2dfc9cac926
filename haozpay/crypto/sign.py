"""
Raw RSA sign/verify over the hex SHA-256 digest.

This is NOT RSASSA-PKCS1-v1_5. The platform pads the ASCII hex digest
itself (no DigestInfo) into a Type-1 block and raises it to the private
exponent; verification raises the signature to the public exponent and
compares the result with the hex digest directly. Library sign()/verify()
calls produce different bytes and are rejected by the platform.
"""
import binascii
from typing import Mapping, Optional

from haozpay.common.errors import (
    PayloadTooLargeError,
    SignatureFormatError,
    SignatureMismatchError,
    SignatureTooLargeError,
)
from haozpay.common.utils import b64d, b64e
from haozpay.crypto.canonical import ParamValue, build_sign_string, digest_hex
from haozpay.crypto.keys import RsaKeyMaterial, load_private_key, load_public_key


# 00 01 + at least 8 bytes of FF + 00
PADDING_OVERHEAD = 11
MIN_PS_LENGTH = 8


def pad_type1(payload: bytes, k: int) -> bytes:
    """
    Build the k-byte block 00 01 FF..FF 00 <payload>.

    Raises:
        PayloadTooLargeError: If len(payload) > k - 11
    """
    if len(payload) > k - PADDING_OVERHEAD:
        raise PayloadTooLargeError(
            f"payload of {len(payload)} bytes exceeds the {k - PADDING_OVERHEAD} byte "
            f"limit of a {k * 8}-bit key"
        )
    ps_len = k - 3 - len(payload)
    return b"\x00\x01" + b"\xff" * ps_len + b"\x00" + payload


def _strip_type1(block: bytes) -> Optional[bytes]:
    """Remove a leading 01 FF..FF 00 prefix (leading 00 already dropped by int conversion)."""
    if not block.startswith(b"\x01"):
        return None
    sep = block.find(b"\x00", 1)
    if sep < 0:
        return None
    ps = block[1:sep]
    if len(ps) < MIN_PS_LENGTH or ps.strip(b"\xff"):
        return None
    return block[sep + 1:]


def sign_digest(digest: str, private_key: RsaKeyMaterial) -> str:
    """
    Sign a hex digest with the raw private-key operation.

    Args:
        digest: 64-char lowercase hex SHA-256 digest
        private_key: Private key material (N, D)

    Returns:
        Base64 of the k-byte signature block

    Raises:
        PayloadTooLargeError: If the key is too small for the padded digest
    """
    k = private_key.byte_length
    block = pad_type1(digest.encode("utf-8"), k)

    m = int.from_bytes(block, byteorder="big")
    c = pow(m, private_key.exponent, private_key.modulus)

    return b64e(c.to_bytes(k, byteorder="big"))


def verify_digest(
    digest: str,
    signature: str,
    public_key: RsaKeyMaterial,
    unpad: bool = False
) -> None:
    """
    Verify a base64 signature against a hex digest.

    The recovered integer's minimal big-endian bytes are compared with the
    digest text as-is, which is what the platform does. A block produced
    by sign_digest() still carries its 01 FF..FF 00 prefix and therefore
    does not match unless unpad=True.

    Args:
        digest: 64-char lowercase hex SHA-256 digest
        signature: Base64 signature
        public_key: Public key material (N, E)
        unpad: Strip a Type-1 padding prefix before comparing

    Raises:
        SignatureFormatError: If the signature is not valid base64
        SignatureTooLargeError: If the signature integer is >= N
        SignatureMismatchError: If the recovered block differs from the digest
    """
    try:
        sig_bytes = b64d(signature)
    except binascii.Error as e:
        raise SignatureFormatError(f"signature is not valid base64: {e}") from e

    c = int.from_bytes(sig_bytes, byteorder="big")
    if c >= public_key.modulus:
        raise SignatureTooLargeError("signature representative out of range")

    m = pow(c, public_key.exponent, public_key.modulus)
    recovered = m.to_bytes((m.bit_length() + 7) // 8, byteorder="big")

    if unpad:
        recovered = _strip_type1(recovered)
        if recovered is None:
            raise SignatureMismatchError("signature block has no valid type 1 padding")

    if recovered != digest.encode("utf-8"):
        raise SignatureMismatchError("signature verification failed: hash mismatch")


def generate_sign(params: Mapping[str, ParamValue], private_key_text: str) -> str:
    """
    Sign a parameter set with a merchant private key.

    Args:
        params: Request parameters (a "sign" entry is ignored)
        private_key_text: PEM or bare base64 private key

    Returns:
        Base64 signature for the "sign" field
    """
    digest = digest_hex(build_sign_string(params))
    return sign_digest(digest, load_private_key(private_key_text))


def verify_sign(
    params: Mapping[str, ParamValue],
    signature: str,
    public_key_text: str,
    unpad: bool = False
) -> None:
    """
    Verify a callback's parameters against its signature.

    Args:
        params: Callback parameters (a "sign" entry is ignored)
        signature: Base64 signature
        public_key_text: Platform public key, PEM or bare base64
        unpad: See verify_digest()

    Raises:
        KeyFormatError: If the public key cannot be loaded
        InvalidSignatureError: Subclass describing why the signature was rejected
    """
    digest = digest_hex(build_sign_string(params))
    verify_digest(digest, signature, load_public_key(public_key_text), unpad=unpad)
