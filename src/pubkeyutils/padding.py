"""Message encodings from PKCS#1 v2.2 (RFC 8017) used by the RSA family.

Provides EME-OAEP for encryption and EMSA-PKCS1-v1_5 for signatures. The DigestInfo structure of the latter is
produced and parsed with pyasn1, everything else is plain octet manipulation.

Typical usage example:

    em = oaep_encode(b"Hi there!", 256)
    m = oaep_decode(em, 256)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import hashlib
from math import ceil
from secrets import token_bytes

from pyasn1 import error
from pyasn1.codec.der import decoder
from pyasn1.codec.der import encoder
from pyasn1.type import univ
from pyasn1_modules import rfc8017

from pubkeyutils.octets import integer_to_octets

# name: (hash constructor, DigestInfo OID, digest length, label length cap)
HASH_TLL = {
    "sha256": (hashlib.sha256, rfc8017.id_sha256, 32, 2**61 - 1),
    "sha384": (hashlib.sha384, rfc8017.id_sha384, 48, 2**125 - 1),
    "sha512": (hashlib.sha512, rfc8017.id_sha512, 64, 2**125 - 1),
}

HASH_OID = {oid: name for name, (_, oid, _, _) in HASH_TLL.items()}


def hash_message(message: bytes, hashf: str) -> bytes:
    """Digests `message` with the named hash function.

    Raises:
        ValueError: If `hashf` is not one of `HASH_TLL`.
    """
    try:
        fun = HASH_TLL[hashf][0]
    except KeyError:
        raise ValueError(f"Unsupported hash function: {hashf}") from None
    return fun(message).digest()


def xorbytes(a: bytes, b: bytes) -> bytes:
    """XORs two octet strings of equal length."""
    return bytes(x ^ y for x, y in zip(a, b, strict=True))


def mgf1(mgfseed: bytes, masklen: int, hashf: str = "sha384") -> bytes:
    """MGF1 mask generation function, RFC 8017 Appendix B.2.1.

    Args:
        mgfseed: Seed the mask is derived from.
        masklen: Length of the mask in octets.
        hashf: Hash function (sha256, sha384 or sha512).

    Returns:
        The mask, `masklen` octets long.

    Raises:
        ValueError: If the mask is too long for the hash function.
    """
    fun, _, hlen, _ = HASH_TLL[hashf]
    if masklen > 2**32 * hlen:
        raise ValueError("Mask too long for the specified hash function")
    t = b"".join(fun(mgfseed + integer_to_octets(cnt, 32)).digest() for cnt in range(ceil(masklen / hlen)))
    return t[:masklen]


def oaep_encode(message: bytes, k: int, label: bytes = b"", hashf: str = "sha384") -> bytes:
    """EME-OAEP encoding, RFC 8017 section 7.1.1 step 2.

    Args:
        message: The message to encode.
        k: Length of the modulus in octets.
        label: Optional label bound to the message.
        hashf: Hash function (sha256, sha384 or sha512).

    Returns:
        The encoded message, `k` octets long.

    Raises:
        ValueError: If label or message is too long for the hash function.
    """
    fun, _, hlen, hcap = HASH_TLL[hashf]
    if len(label) > hcap:
        raise ValueError("Label too long for the specified hash function")
    if len(message) > k - 2 * (hlen + 1):
        raise ValueError("Message too long for the specified hash function")
    ps = b"\x00" * (k - len(message) - 2 * (hlen + 1))
    db = fun(label).digest() + ps + b"\x01" + message
    seed = token_bytes(hlen)
    masked_db = xorbytes(db, mgf1(seed, k - hlen - 1, hashf))
    masked_seed = xorbytes(seed, mgf1(masked_db, hlen, hashf))
    return b"\x00" + masked_seed + masked_db


def oaep_decode(em: bytes, k: int, label: bytes = b"", hashf: str = "sha384") -> bytes:
    """EME-OAEP decoding, RFC 8017 section 7.1.2 step 3.

    Every check runs before a failure is reported, and all failures share one message.

    Args:
        em: The encoded message, `k` octets long.
        k: Length of the modulus in octets.
        label: The label the message was encoded with.
        hashf: Hash function (sha256, sha384 or sha512).

    Returns:
        The decoded message.

    Raises:
        RuntimeError: If decoding fails.
    """
    fun, _, hlen, hcap = HASH_TLL[hashf]
    if len(label) > hcap:
        raise RuntimeError("Label too long for the specified hash function")
    if len(em) != k:
        raise RuntimeError("Message does not match expected length.")
    if k < 2 * (hlen + 1):
        raise RuntimeError("Message too short for the specified hash function")
    masked_seed = em[1:hlen + 1]
    masked_db = em[hlen + 1:]
    seed = xorbytes(masked_seed, mgf1(masked_db, hlen, hashf))
    db = xorbytes(masked_db, mgf1(seed, k - hlen - 1, hashf))
    valid = em[0] == 0 and db[:hlen] == fun(label).digest()
    marker = None
    for idx in range(hlen, len(db)):
        if marker is None and db[idx] == 1:
            marker = idx
        elif marker is None and db[idx] != 0:
            valid = False
    if marker is None or not valid:
        raise RuntimeError("Decryption error.")
    return db[marker + 1:]


def emsa_pkcs1_v15_encode(message: bytes, k: int, hashf: str = "sha384") -> bytes:
    """EMSA-PKCS1-v1_5 encoding, RFC 8017 section 9.2.

    Args:
        message: The message to digest and encode.
        k: Length of the modulus in octets.
        hashf: Hash function (sha256, sha384 or sha512).

    Returns:
        The encoded message, `k` octets long.

    Raises:
        ValueError: If the DigestInfo does not fit the modulus.
    """
    _, ident, _, _ = HASH_TLL[hashf]
    algid = rfc8017.DigestAlgorithm()
    algid["algorithm"] = ident
    algid["parameters"] = univ.Null("")
    payload = rfc8017.DigestInfo()
    payload["digestAlgorithm"] = algid
    payload["digest"] = hash_message(message, hashf)
    encoded = encoder.encode(payload)
    if k < len(encoded) + 11:
        raise ValueError("Hash function too large for current key.")
    return b"\x00\x01" + b"\xff" * (k - len(encoded) - 3) + b"\x00" + encoded


def emsa_pkcs1_v15_matches(em: bytes, message: bytes, hashf: str | None = None) -> bool:
    """Checks an EMSA-PKCS1-v1_5 encoded message against `message`.

    The hash function is taken from the DigestInfo, so any function of `HASH_TLL` is accepted unless `hashf` pins
    one down.

    Args:
        em: The encoded message recovered from a signature.
        message: The message the signature should cover.
        hashf: The hash function the DigestInfo must name. Defaults to any.

    Returns:
        True if `em` is a well-formed encoding of `message`, False otherwise.
    """
    if em[0:2] != b"\x00\x01":
        return False
    try:
        sep = em.index(b"\x00", 2)
    except ValueError:
        return False
    ps = em[2:sep]
    if len(ps) < 8 or any(b != 0xff for b in ps):
        return False
    try:
        payload, rest = decoder.decode(em[sep + 1:], asn1Spec=rfc8017.DigestInfo())
        named = HASH_OID[payload["digestAlgorithm"]["algorithm"]]
    except (error.PyAsn1Error, KeyError):
        return False
    if rest or hashf not in (None, named):
        return False
    return hash_message(message, named) == bytes(payload["digest"])
