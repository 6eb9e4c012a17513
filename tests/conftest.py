"""
Shared fixtures: key material generated on the fly with cryptography
"""

import datetime

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import dsa, ec, rsa
from cryptography.x509.oid import NameOID

from httpsig_sdk import HttpRequest, HttpResponse


def private_pem(key) -> str:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    ).decode('ascii')


def public_pem(key) -> str:
    return key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    ).decode('ascii')


def self_signed_certificate_pem(private_key) -> str:
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "httpsig test")])
    now = datetime.datetime.now(datetime.timezone.utc)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .sign(private_key, hashes.SHA256())
    )
    return certificate.public_bytes(serialization.Encoding.PEM).decode('ascii')


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def dsa_key():
    return dsa.generate_private_key(key_size=2048)


@pytest.fixture(scope="session")
def rsa_private_pem(rsa_key):
    return private_pem(rsa_key)


@pytest.fixture(scope="session")
def rsa_public_pem(rsa_key):
    return public_pem(rsa_key)


@pytest.fixture(scope="session")
def rsa_certificate_pem(rsa_key):
    return self_signed_certificate_pem(rsa_key)


@pytest.fixture(scope="session")
def other_rsa_private_pem(other_rsa_key):
    return private_pem(other_rsa_key)


@pytest.fixture(scope="session")
def ec_private_pem(ec_key):
    return private_pem(ec_key)


@pytest.fixture(scope="session")
def ec_public_pem(ec_key):
    return public_pem(ec_key)


@pytest.fixture(scope="session")
def dsa_private_pem(dsa_key):
    return private_pem(dsa_key)


@pytest.fixture(scope="session")
def dsa_public_pem(dsa_key):
    return public_pem(dsa_key)


@pytest.fixture
def request_message():
    """POST request carrying the headers most tests sign."""
    return HttpRequest(
        method="POST",
        url="https://example.com/foo?param=value&pet=dog",
        headers=[
            ("Host", "example.com"),
            ("Date", "Thu, 05 Jan 2014 21:31:40 GMT"),
            ("Content-Type", "application/json"),
        ],
        body=b'{"hello": "world"}',
    )


@pytest.fixture
def response_message():
    return HttpResponse(
        status_code=200,
        headers={"Date": "Thu, 05 Jan 2014 21:31:40 GMT", "Content-Type": "text/plain"},
        body=b"ok",
    )
