"""
Tests for body digests
"""

import base64
import hashlib

import pytest

from httpsig_sdk import HttpRequest
from httpsig_sdk.exceptions import DigestError
from httpsig_sdk.signing import BodyDigest, HeaderList


class TestBodyDigest:
    """Test digest computation and validation"""

    @pytest.mark.parametrize("spec,hash_name,prefix", [
        ("sha", "sha1", "SHA"),
        ("SHA-1", "sha1", "SHA"),
        ("sha256", "sha256", "SHA-256"),
        ("SHA-256", "sha256", "SHA-256"),
        ("sha-512", "sha512", "SHA-512"),
    ])
    def test_spec_normalization(self, spec, hash_name, prefix):
        digest = BodyDigest.from_hash_name(spec)
        assert digest.hash_name == hash_name
        assert digest.prefix == prefix

    def test_default_is_sha256(self):
        assert BodyDigest().hash_name == "sha256"
        assert BodyDigest("").hash_name == "sha256"

    @pytest.mark.parametrize("spec", ["md5", "sha384", "SHA-384"])
    def test_unsupported_spec(self, spec):
        with pytest.raises(DigestError, match="not a valid Digest algorithm"):
            BodyDigest(spec)

    def test_header_value(self):
        expected = base64.b64encode(hashlib.sha256(b"hello").digest()).decode()
        assert BodyDigest("sha256").digest_header_value(b"hello") == f"SHA-256={expected}"

    @pytest.mark.parametrize("body", [b"", b"hello", b"\x00\xff" * 100])
    def test_set_digest_header_is_valid(self, body):
        """Every body, including the empty one, validates after setting the header"""
        digest = BodyDigest("sha512")
        message = digest.set_digest_header(HttpRequest(method="POST", url="/", body=body))
        assert digest.is_valid(message)
        assert len(message.get_header("Digest")) == 1

    def test_set_digest_header_replaces_existing(self):
        message = HttpRequest(method="POST", url="/", headers={"Digest": "SHA=stale"}, body=b"x")
        message = BodyDigest().set_digest_header(message)
        assert message.get_header("digest") == [BodyDigest().digest_header_value(b"x")]

    def test_is_valid_detects_changes(self):
        digest = BodyDigest()
        message = digest.set_digest_header(HttpRequest(method="POST", url="/", body=b"original"))
        assert not digest.is_valid(message.with_body(b"tampered"))
        assert not digest.is_valid(message.without_header("Digest"))

    def test_from_header_value(self):
        assert BodyDigest.from_header_value("SHA-512=abc=").hash_name == "sha512"
        with pytest.raises(DigestError, match="correctly formatted"):
            BodyDigest.from_header_value("no-separator")
        with pytest.raises(DigestError, match="not a valid algorithm"):
            BodyDigest.from_header_value("MD5=abc")

    def test_from_message(self):
        message = HttpRequest(method="POST", url="/", headers={"Digest": "SHA=abc"})
        assert BodyDigest.from_message(message).hash_name == "sha1"
        with pytest.raises(DigestError, match="No Digest header"):
            BodyDigest.from_message(HttpRequest(method="POST", url="/"))

    def test_put_digest_in_header_list(self):
        header_list = BodyDigest.put_digest_in_header_list(HeaderList(["date"], explicit=False))
        assert header_list.names == ["date", "digest"]
        assert header_list.explicit
