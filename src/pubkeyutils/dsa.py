"""DSA keys (FIPS 186) and their registration under `KeyKind.DSA`.

Messages are hashed with `hashf` and the digest truncated to the bit length of `q`. A signature is `r || s`, each
half written at the byte width of `q`.

Typical usage example:

    priv, pub = generate_key_pair(KeyKind.DSA, 2048)
    sig = sign_message(priv, b"Hi there!")
    verify_signature(pub, b"Hi there!", sig)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import typing

from pubkeyutils import groupkeys
from pubkeyutils import keygen
from pubkeyutils import padding
from pubkeyutils.errors import InvalidParameters
from pubkeyutils.errors import MalformedSignature
from pubkeyutils.errors import MissingParameter
from pubkeyutils.group import DiscreteLogarithmGroup
from pubkeyutils.octets import octets_to_integer
from pubkeyutils.protocol import KeyKind
from pubkeyutils.protocol import parse_options
from pubkeyutils.protocol import register

DEFAULT_HASH = "sha256"


class DSASignatureComponents(typing.NamedTuple):
    r: groupkeys.Integerish
    s: groupkeys.Integerish
    n_bits: int


def digest_representative(message: bytes, hashf: str, q: int) -> int:
    """The leftmost `min(N, outlen)` bits of the digest of `message`, N being the bit length of `q`.

    Raises:
        InvalidParameters: If `hashf` is unknown.
    """
    try:
        digest = padding.hash_message(message, hashf)
    except ValueError as exc:
        raise InvalidParameters(str(exc)) from exc
    return octets_to_integer(digest) >> max(0, len(digest) * 8 - q.bit_length())


def _width(group: DiscreteLogarithmGroup) -> int:
    return (group.q.bit_length() + 7) // 8


class DSAPublicKey(groupkeys.GroupPublicKey):
    kind = KeyKind.DSA

    def verify(self, message: bytes, signature: bytes, hashf: str = DEFAULT_HASH) -> bool:
        """Checks a DSA signature over `message`.

        Raises:
            MalformedSignature: If `signature` is not two halves of the byte width of `q`.
        """
        p, q, g = self.group
        r, s = groupkeys.decode_pair(signature, MalformedSignature, _width(self.group))
        if not (0 < r < q and 0 < s < q):
            return False
        z = digest_representative(message, hashf, q)
        w = pow(s, -1, q)
        v = (pow(g, z * w % q, p) * pow(self.y, r * w % q, p)) % p % q
        return v == r


class DSAPrivateKey(groupkeys.GroupPrivateKey):
    kind = KeyKind.DSA
    public_class = DSAPublicKey

    def sign(self, message: bytes, hashf: str = DEFAULT_HASH) -> bytes:
        """Signs `message`, drawing a fresh per-message secret."""
        p, q, g = self.group
        z = digest_representative(message, hashf, q)
        while True:
            k = keygen.random_exponent(q)
            r = pow(g, k, p) % q
            if r == 0:
                continue
            s = pow(k, -1, q) * (z + self.x * r) % q
            if s != 0:
                return groupkeys.encode_pair(r, s, q.bit_length())


@register(KeyKind.DSA)
class DSAAlgorithm:
    """Key factory, key-pair generator and signature codec of the DSA family."""

    def make_public_key(self, **options) -> DSAPublicKey:
        return groupkeys.make_public(DSAPublicKey, options)

    def make_private_key(self, **options) -> DSAPrivateKey:
        return groupkeys.make_private(DSAPrivateKey, options)

    def generate_key_pair(self, num_bits: int | None, **options) -> tuple[DSAPrivateKey, DSAPublicKey]:
        if num_bits is None:
            raise MissingParameter("DSA key generation requires num_bits.")
        return groupkeys.generate_pair(DSAPrivateKey, num_bits, options)

    def make_signature(self, **components) -> bytes:
        comps = parse_options(DSASignatureComponents, components)
        return groupkeys.encode_pair(comps.r, comps.s, comps.n_bits)

    def destructure_signature(self, signature: bytes) -> dict[str, int]:
        return groupkeys.decode_components(signature, ("r", "s"), MalformedSignature)
