# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import hashlib

import pytest

from pubkeyutils import padding

hash_names = list(padding.HASH_TLL)


@pytest.mark.parametrize("hashf", hash_names)
def test_hash_message(hashf, payload):
    assert padding.hash_message(payload, hashf) == hashlib.new(hashf, payload).digest()


def test_hash_message_unknown():
    with pytest.raises(ValueError, match="Unsupported hash function"):
        padding.hash_message(b"", "md5")


def test_xorbytes():
    assert padding.xorbytes(b"\x0f\xf0", b"\xff\xff") == b"\xf0\x0f"
    with pytest.raises(ValueError):
        padding.xorbytes(b"\x00", b"\x00\x00")


@pytest.mark.parametrize("hashf", hash_names)
@pytest.mark.parametrize("masklen", [0, 1, 31, 32, 33, 100, 255])
def test_mgf1(hashf, masklen):
    blocks = b"".join(hashlib.new(hashf, b"seed" + cnt.to_bytes(4, "big")).digest() for cnt in range(8))
    assert padding.mgf1(b"seed", masklen, hashf) == blocks[:masklen]


def test_mgf1_counter():
    mask = padding.mgf1(b"", 64, "sha256")
    assert mask[32:] == hashlib.sha256(b"\x00\x00\x00\x01").digest()


def test_mgf1_too_long(mocker):
    mocker.patch.dict(padding.HASH_TLL, {"sha256": (hashlib.sha256, None, 1, 0)})
    with pytest.raises(ValueError, match="Mask too long"):
        padding.mgf1(b"seed", 2**32 + 1, "sha256")


@pytest.mark.parametrize("hashf", hash_names)
@pytest.mark.parametrize("label", [b"", b"CORRECT_LABEL"])
def test_oaep_round_trip(hashf, label, payload):
    em = padding.oaep_encode(payload, 256, label, hashf)
    assert len(em) == 256
    assert em[0] == 0
    assert padding.oaep_decode(em, 256, label, hashf) == payload
    assert padding.oaep_encode(payload, 256, label, hashf) != em


def test_oaep_empty_and_maximal():
    hlen = padding.HASH_TLL["sha384"][2]
    for message in (b"", b"A" * (256 - 2 * hlen - 2)):
        assert padding.oaep_decode(padding.oaep_encode(message, 256), 256) == message
    with pytest.raises(ValueError, match="Message too long"):
        padding.oaep_encode(b"A" * (256 - 2 * hlen - 1), 256)


def test_oaep_label_mismatch(payload):
    em = padding.oaep_encode(payload, 256, b"CORRECT_LABEL")
    with pytest.raises(RuntimeError, match="Decryption error."):
        padding.oaep_decode(em, 256, b"INCORRECT_LABEL")


@pytest.mark.parametrize("idx", [0, 1, 48, 49, 100, 255])
def test_oaep_corruption(idx, payload):
    em = bytearray(padding.oaep_encode(payload, 256))
    em[idx] ^= 0x01
    with pytest.raises(RuntimeError):
        padding.oaep_decode(bytes(em), 256)


def test_oaep_length_checks(payload):
    em = padding.oaep_encode(payload, 256)
    with pytest.raises(RuntimeError, match="expected length"):
        padding.oaep_decode(em[1:], 256)
    with pytest.raises(RuntimeError, match="too short"):
        padding.oaep_decode(b"\x00" * 64, 64, hashf="sha512")


@pytest.mark.parametrize("hashf", hash_names)
def test_emsa_pkcs1_v15(hashf, payload):
    em = padding.emsa_pkcs1_v15_encode(payload, 256, hashf)
    assert len(em) == 256
    assert em[:2] == b"\x00\x01"
    assert em.endswith(hashlib.new(hashf, payload).digest())
    assert padding.emsa_pkcs1_v15_matches(em, payload)
    assert not padding.emsa_pkcs1_v15_matches(em, payload[:-1])


def test_emsa_pkcs1_v15_known_prefix(payload):
    # DigestInfo prefix for SHA-256 from RFC 8017 section 9.2, note 1.
    prefix = bytes.fromhex("3031300d060960864801650304020105000420")
    em = padding.emsa_pkcs1_v15_encode(payload, 128, "sha256")
    assert em[-(len(prefix) + 32):-32] == prefix


def test_emsa_pkcs1_v15_small_key(payload):
    with pytest.raises(ValueError, match="Hash function too large"):
        padding.emsa_pkcs1_v15_encode(payload, 64, "sha512")


@pytest.mark.parametrize("mangle", [
    lambda em: b"\x00\x02" + em[2:],
    lambda em: em[:2] + b"\xfe" + em[3:],
    lambda em: em[:2] + b"\xff" * (len(em) - 2),
    lambda em: b"\x00\x01" + b"\xff" * 4 + b"\x00" + em[-(len(em) - 7):],
    lambda em: em + b"\x00",
    lambda em: em[:-1],
])
def test_emsa_pkcs1_v15_rejects(mangle, payload):
    em = padding.emsa_pkcs1_v15_encode(payload, 256, "sha256")
    assert not padding.emsa_pkcs1_v15_matches(mangle(em), payload)
