"""Pytest configuration and fixtures"""
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from haozpay.common.utils import b64e
from haozpay.crypto.keys import RsaKeyMaterial


def _pem_body(pem: str) -> str:
    """Base64 body of a PEM block, markers and newlines removed."""
    return "".join(pem.strip().splitlines()[1:-1])


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def pkcs1_pem(rsa_key) -> str:
    return rsa_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture(scope="session")
def pkcs8_pem(rsa_key) -> str:
    return rsa_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture(scope="session")
def public_pem(rsa_key) -> str:
    return rsa_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


@pytest.fixture(scope="session")
def other_public_pem(other_rsa_key) -> str:
    return other_rsa_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


@pytest.fixture(scope="session")
def pkcs1_body(pkcs1_pem) -> str:
    return _pem_body(pkcs1_pem)


@pytest.fixture(scope="session")
def pkcs8_body(pkcs8_pem) -> str:
    return _pem_body(pkcs8_pem)


@pytest.fixture(scope="session")
def public_body(public_pem) -> str:
    return _pem_body(public_pem)


@pytest.fixture(scope="session")
def ec_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def private_material(rsa_key) -> RsaKeyMaterial:
    numbers = rsa_key.private_numbers()
    return RsaKeyMaterial(modulus=numbers.public_numbers.n, exponent=numbers.d, is_private=True)


@pytest.fixture(scope="session")
def public_material(rsa_key) -> RsaKeyMaterial:
    numbers = rsa_key.public_key().public_numbers()
    return RsaKeyMaterial(modulus=numbers.n, exponent=numbers.e)


@pytest.fixture(scope="session")
def platform_sign(private_material):
    """
    Sign a hex digest the way callbacks arrive from the platform:
    the digest text itself, unpadded, raised to D.
    """
    def _sign(digest: str) -> str:
        k = private_material.byte_length
        m = int.from_bytes(digest.encode("utf-8"), byteorder="big")
        c = pow(m, private_material.exponent, private_material.modulus)
        return b64e(c.to_bytes(k, byteorder="big"))
    return _sign


@pytest.fixture
def sample_digest() -> str:
    return "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08"
