"""Signing errors and the transport-level SDK error."""


class HaozPayError(Exception):
    """Base class for every error raised by this package."""
    pass


class CryptoError(HaozPayError):
    """Signing or verification could not be carried out."""
    pass


class KeyFormatError(CryptoError):
    """Key text is not valid PEM/base64, or does not hold an RSA key."""
    pass


class PayloadTooLargeError(CryptoError):
    """Digest does not fit the key's PKCS#1 v1.5 padding budget."""
    pass


class InvalidSignatureError(CryptoError):
    """Signature was checked and rejected. Callers should reject the callback."""
    pass


class SignatureFormatError(InvalidSignatureError):
    """Signature is missing or is not valid base64."""
    pass


class SignatureTooLargeError(InvalidSignatureError):
    """Signature integer is not smaller than the modulus."""
    pass


class SignatureMismatchError(InvalidSignatureError):
    """Recovered block does not match the expected digest."""
    pass


# SDK error codes
INVALID_REQUEST = 40001
INVALID_RESPONSE = 40002
SIGN_ERROR = 40003
NETWORK_ERROR = 50001


class SDKError(HaozPayError):
    """
    Error reported by the payment platform or raised by the HTTP adapter.

    Attributes:
        code: Platform or SDK error code
        message: Human readable description
        status_code: HTTP status (0 when no response was received)
        request_id: Platform request id, when the platform returned one
    """

    def __init__(self, code: int, message: str, status_code: int = 0, request_id: str = ""):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.request_id = request_id
        super().__init__(str(self))

    def __str__(self) -> str:
        text = f"haozpay error {self.code}: {self.message}"
        if self.status_code:
            text += f" (http {self.status_code})"
        if self.request_id:
            text += f" [request_id={self.request_id}]"
        return text
