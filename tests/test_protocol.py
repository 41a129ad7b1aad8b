# pylint: disable=missing-module-docstring,redefined-outer-name
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import typing

import pytest

import pubkeyutils
from pubkeyutils import protocol
from pubkeyutils.errors import InvalidParameters
from pubkeyutils.errors import MissingParameter
from pubkeyutils.errors import RangeError
from pubkeyutils.errors import UnsupportedKind
from pubkeyutils.errors import UnsupportedOperation
from pubkeyutils.octets import integer_to_octets
from pubkeyutils.octets import octets_to_integer

TOY = "toy-xor"


class ToyOptions(typing.NamedTuple):
    secret: int
    width: int = 8


class ToyPublicKey(protocol.PublicKey):
    kind = TOY

    def __init__(self, secret: int) -> None:
        self.secret = secret

    def _components(self) -> tuple:
        return (self.secret,)

    def verify(self, message: bytes, signature: bytes) -> bool:
        return signature == bytes(b ^ self.secret for b in message)


class ToyPrivateKey(ToyPublicKey, protocol.PrivateKey):
    kind = TOY

    def sign(self, message: bytes) -> bytes:
        return bytes(b ^ self.secret for b in message)


class ToyAlgorithm:

    def make_public_key(self, **options):
        return ToyPublicKey(protocol.parse_options(ToyOptions, options).secret)

    def make_private_key(self, **options):
        return ToyPrivateKey(protocol.parse_options(ToyOptions, options).secret)

    def make_signature(self, *, t: int, n_bits: int = 8) -> bytes:
        return integer_to_octets(t, n_bits)

    def destructure_signature(self, signature: bytes) -> dict[str, int]:
        return {"t": octets_to_integer(signature), "n_bits": len(signature) * 8}


@pytest.fixture
def toy():
    protocol.register(TOY)(ToyAlgorithm)
    yield TOY
    protocol.unregister(TOY)


def test_builtin_kinds_registered():
    kinds = protocol.registered_kinds()
    for kind in pubkeyutils.KeyKind:
        assert kind in kinds


def test_kind_tags_accept_strings():
    assert protocol.get_algorithm("rsa") is protocol.get_algorithm(pubkeyutils.KeyKind.RSA)


def test_unknown_kind():
    with pytest.raises(UnsupportedKind):
        pubkeyutils.make_public_key("nope", y=1)
    with pytest.raises(UnsupportedKind):
        pubkeyutils.generate_key_pair("nope", 2048)
    with pytest.raises(UnsupportedKind):
        pubkeyutils.destructure_signature("nope", b"\x01")
    with pytest.raises(LookupError):
        protocol.get_algorithm("nope")


def test_registered_kind_dispatch(toy, payload):
    priv = pubkeyutils.make_private_key(toy, secret=0x5a)
    pub = pubkeyutils.make_public_key(toy, secret=0x5a)
    sig = pubkeyutils.sign_message(priv, payload)
    assert pubkeyutils.verify_signature(pub, payload, sig)
    assert not pubkeyutils.verify_signature(pub, payload + b"!", sig)
    assert pubkeyutils.make_signature(toy, t=258, n_bits=16) == b"\x01\x02"
    assert pubkeyutils.destructure_signature(toy, b"\x01\x02") == {"t": 258, "n_bits": 16}


def test_registered_kind_lacks_capabilities(toy):
    with pytest.raises(UnsupportedOperation):
        pubkeyutils.generate_key_pair(toy, 8)
    with pytest.raises(UnsupportedOperation):
        pubkeyutils.make_message(toy, c=1)
    with pytest.raises(NotImplementedError):
        pubkeyutils.destructure_message(toy, b"\x01")


def test_unregister(toy):
    protocol.unregister(toy)
    assert toy not in protocol.registered_kinds()
    with pytest.raises(UnsupportedKind):
        pubkeyutils.make_public_key(toy, secret=1)


def test_register_replacement_warns(toy, caplog):
    with caplog.at_level(logging.WARNING, logger="pubkeyutils.protocol"):
        protocol.register(toy)(ToyAlgorithm)
    assert "Replacing algorithm" in caplog.text


def test_parse_options():
    assert protocol.parse_options(ToyOptions, {"secret": 3}) == ToyOptions(3, 8)
    with pytest.raises(InvalidParameters, match="Unrecognized options"):
        protocol.parse_options(ToyOptions, {"secret": 3, "salt": 4})
    with pytest.raises(MissingParameter, match="secret"):
        protocol.parse_options(ToyOptions, {"width": 4})


def test_unknown_option_rejected(toy):
    with pytest.raises(InvalidParameters):
        pubkeyutils.make_private_key(toy, secret=1, pepper=2)


def test_capability_follows_key_variant(toy, payload):
    pub = pubkeyutils.make_public_key(toy, secret=1)
    with pytest.raises(UnsupportedOperation):
        pubkeyutils.sign_message(pub, payload)
    with pytest.raises(UnsupportedOperation):
        pubkeyutils.encrypt_message(pub, payload)
    with pytest.raises(UnsupportedOperation):
        pubkeyutils.decrypt_message(pub, payload)
    with pytest.raises(UnsupportedOperation):
        pubkeyutils.diffie_hellman(pub, pub)


def test_message_range(toy, payload):
    priv = pubkeyutils.make_private_key(toy, secret=7)
    pub = priv
    sig = pubkeyutils.sign_message(priv, payload, 4, 9)
    assert sig == pubkeyutils.sign_message(priv, payload[4:9])
    assert pubkeyutils.verify_signature(pub, payload, sig, 4, 9)
    assert not pubkeyutils.verify_signature(pub, payload, sig, 4, 10)


@pytest.mark.parametrize("start,end", [(-1, None), (0, 10**6), (9, 4)])
def test_message_range_validated(toy, payload, start, end):
    priv = pubkeyutils.make_private_key(toy, secret=7)
    with pytest.raises(RangeError):
        pubkeyutils.sign_message(priv, payload, start, end)
    with pytest.raises(RangeError):
        pubkeyutils.verify_signature(priv, payload, b"", start, end)


def test_keys_compare_by_value(toy):
    a = pubkeyutils.make_public_key(toy, secret=9)
    b = pubkeyutils.make_public_key(toy, secret=9)
    c = pubkeyutils.make_public_key(toy, secret=10)
    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert a != pubkeyutils.make_private_key(toy, secret=9)


def test_keys_refuse_reassignment(toy):
    key = pubkeyutils.make_public_key(toy, secret=9)
    keyed = {key: "toy"}
    with pytest.raises(AttributeError, match="reassigned"):
        key.secret = 10
    with pytest.raises(AttributeError, match="deleted"):
        del key.secret
    assert key.secret == 9
    assert keyed[pubkeyutils.make_public_key(toy, secret=9)] == "toy"
