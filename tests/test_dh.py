# pylint: disable=missing-module-docstring,redefined-outer-name
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from cryptography.hazmat.primitives.asymmetric import dh
import pytest

import pubkeyutils
from pubkeyutils import KeyKind
from pubkeyutils import MODP_2048
from pubkeyutils.errors import IncompatibleParameters
from pubkeyutils.errors import InvalidParameters
from pubkeyutils.errors import MissingParameter
from pubkeyutils.errors import UnsupportedOperation
from pubkeyutils.octets import integer_to_octets
from pubkeyutils.octets import octets_to_integer


@pytest.fixture(scope="module")
def alice():
    return pubkeyutils.generate_key_pair(KeyKind.DH, group=MODP_2048)


@pytest.fixture(scope="module")
def bob():
    return pubkeyutils.generate_key_pair(KeyKind.DH, 2048, group=MODP_2048)


def test_key_pair(alice):
    priv, pub = alice
    assert priv.public_key == pub
    assert pub.group is MODP_2048
    assert 0 < priv.x < MODP_2048.q
    assert MODP_2048.contains(pub.y)


def test_shared_secret_symmetric(alice, bob):
    secret = pubkeyutils.diffie_hellman(alice[0], bob[1])
    assert secret == pubkeyutils.diffie_hellman(bob[0], alice[1])
    assert len(secret) == 256
    assert octets_to_integer(secret) == pow(bob[1].y, alice[0].x, MODP_2048.p)


def test_shared_secret_interop(dl_group):
    p, q, g = dl_group
    parameters = dh.DHParameterNumbers(p, g, q).parameters()
    crypto_priv = parameters.generate_private_key()
    crypto_y = crypto_priv.public_key().public_numbers().y
    priv, pub = pubkeyutils.generate_key_pair(KeyKind.DH, group=dl_group)
    peer = pubkeyutils.make_public_key(KeyKind.DH, y=crypto_y, group=dl_group)
    ours = pubkeyutils.diffie_hellman(priv, peer)
    crypto_pub = dh.DHPublicNumbers(pub.y, parameters.parameter_numbers()).public_key()
    theirs = crypto_priv.exchange(crypto_pub)
    assert octets_to_integer(ours) == octets_to_integer(theirs)


def test_different_groups_rejected(alice, dl_group):
    other_priv, other_pub = pubkeyutils.generate_key_pair(KeyKind.DH, group=dl_group)
    with pytest.raises(IncompatibleParameters):
        pubkeyutils.diffie_hellman(alice[0], other_pub)
    with pytest.raises(IncompatibleParameters):
        pubkeyutils.diffie_hellman(other_priv, alice[1])


def test_peer_key_from_octets(alice, bob):
    triple = tuple(integer_to_octets(v) for v in MODP_2048)
    peer = pubkeyutils.make_public_key(KeyKind.DH, y=integer_to_octets(bob[1].y), group=triple)
    assert peer == bob[1]
    assert pubkeyutils.diffie_hellman(alice[0], peer) == pubkeyutils.diffie_hellman(bob[0], alice[1])
    with pytest.raises(InvalidParameters, match="triple"):
        pubkeyutils.make_public_key(KeyKind.DH, y=bob[1].y, group=triple + (b"\x02",))


def test_other_family_rejected(alice, dl_group):
    dsa_pub = pubkeyutils.generate_key_pair(KeyKind.DSA, 2048, group=dl_group)[1]
    elgamal_pub = pubkeyutils.make_public_key(KeyKind.ELGAMAL, y=alice[1].y, group=MODP_2048)
    with pytest.raises(IncompatibleParameters):
        pubkeyutils.diffie_hellman(alice[0], dsa_pub)
    with pytest.raises(IncompatibleParameters):
        pubkeyutils.diffie_hellman(alice[0], elgamal_pub)
    with pytest.raises(ValueError):
        pubkeyutils.diffie_hellman(alice[0], elgamal_pub)


def test_invalid_peer_value(alice):
    forged = type(alice[1])(MODP_2048, MODP_2048.p - 1)
    with pytest.raises(InvalidParameters):
        pubkeyutils.diffie_hellman(alice[0], forged)
    forged = type(alice[1])(MODP_2048, 1)
    with pytest.raises(InvalidParameters):
        pubkeyutils.diffie_hellman(alice[0], forged)


def test_make_public_key_rejects_non_members():
    with pytest.raises(InvalidParameters):
        pubkeyutils.make_public_key(KeyKind.DH, y=MODP_2048.p - 1, group=MODP_2048)
    with pytest.raises(InvalidParameters):
        pubkeyutils.make_public_key(KeyKind.DH, y=0, group=MODP_2048)


def test_public_key_cannot_exchange(alice, bob):
    with pytest.raises(UnsupportedOperation):
        pubkeyutils.diffie_hellman(alice[1], bob[1])
    with pytest.raises(UnsupportedOperation):
        pubkeyutils.sign_message(alice[0], b"Hi there!")
    with pytest.raises(UnsupportedOperation):
        pubkeyutils.make_signature(KeyKind.DH, r=1, s=1)


def test_generate_requires_bits_or_group():
    with pytest.raises(MissingParameter):
        pubkeyutils.generate_key_pair(KeyKind.DH)


def test_generate_group_size_mismatch():
    with pytest.raises(InvalidParameters):
        pubkeyutils.generate_key_pair(KeyKind.DH, 3072, group=MODP_2048)


def test_generate_fresh_group_mocked(mocker, dl_group):
    mocked = mocker.patch("pubkeyutils.keygen.generate_dl_group", return_value=tuple(dl_group))
    priv, pub = pubkeyutils.generate_key_pair(KeyKind.DH, 2048)
    mocked.assert_called_once_with(2048, None)
    assert pub.group == dl_group
    peer_priv, peer_pub = pubkeyutils.generate_key_pair(KeyKind.DH, group=pub.group)
    assert pubkeyutils.diffie_hellman(priv, peer_pub) == pubkeyutils.diffie_hellman(peer_priv, pub)
