"""SDK configuration from the environment (.env supported)."""
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

DEFAULT_BASE_URL = "https://api.haozpay.com"


class HaozPayConfig(BaseModel):
    """Merchant settings used by HaozPayClient."""

    merchant_no: str
    base_url: str = DEFAULT_BASE_URL
    private_key: Optional[str] = None  # merchant private key, PEM or bare base64
    platform_public_key: Optional[str] = None  # for callback verification
    timeout: float = 10.0
    debug: bool = False

    @field_validator("merchant_no")
    @classmethod
    def _merchant_no_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("merchant_no must not be blank")
        return value.strip()

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def _read_key(value_var: str, path_var: str) -> Optional[str]:
    """Key text from value_var, else from the file named by path_var."""
    value = os.getenv(value_var)
    if value:
        # single-line .env values carry escaped newlines
        return value.replace("\\n", "\n")

    path = os.getenv(path_var)
    if path:
        with open(path, "r") as f:
            return f.read()
    return None


def load_config() -> HaozPayConfig:
    """
    Build the configuration from HAOZPAY_* environment variables.

    Reads a .env file first, if present. Keys may be given inline
    (HAOZPAY_PRIVATE_KEY, HAOZPAY_PLATFORM_PUBLIC_KEY) or as file paths
    (HAOZPAY_PRIVATE_KEY_PATH, HAOZPAY_PLATFORM_PUBLIC_KEY_PATH).

    Raises:
        pydantic.ValidationError: If HAOZPAY_MERCHANT_NO is missing or a value is invalid
    """
    load_dotenv()

    data = {
        "merchant_no": os.getenv("HAOZPAY_MERCHANT_NO", ""),
        "base_url": os.getenv("HAOZPAY_BASE_URL", DEFAULT_BASE_URL),
        "private_key": _read_key("HAOZPAY_PRIVATE_KEY", "HAOZPAY_PRIVATE_KEY_PATH"),
        "platform_public_key": _read_key(
            "HAOZPAY_PLATFORM_PUBLIC_KEY", "HAOZPAY_PLATFORM_PUBLIC_KEY_PATH"
        ),
        "timeout": os.getenv("HAOZPAY_TIMEOUT", "10.0"),
        "debug": os.getenv("HAOZPAY_DEBUG", "false"),
    }
    return HaozPayConfig(**data)
