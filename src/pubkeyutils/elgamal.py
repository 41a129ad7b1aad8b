"""ElGamal keys and their registration under `KeyKind.ELGAMAL`.

Encryption works on the big-endian representative `m < p` of the message: `c1 = g^k`, `c2 = m * y^k mod p`, written
as `c1 || c2` at the byte width of `p`. Signatures live in the order-`q` subgroup: `r = g^k mod p` and
`s = k^-1 (H(m) - x r) mod q`, written as `r || s` at the byte width of `p`.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import typing

from pubkeyutils import groupkeys
from pubkeyutils import keygen
from pubkeyutils.dsa import digest_representative
from pubkeyutils.errors import InvalidParameters
from pubkeyutils.errors import MalformedMessage
from pubkeyutils.errors import MalformedSignature
from pubkeyutils.errors import MissingParameter
from pubkeyutils.group import DiscreteLogarithmGroup
from pubkeyutils.octets import integer_to_octets
from pubkeyutils.octets import octets_to_integer
from pubkeyutils.protocol import KeyKind
from pubkeyutils.protocol import parse_options
from pubkeyutils.protocol import register

DEFAULT_HASH = "sha256"


class ElGamalSignatureComponents(typing.NamedTuple):
    r: groupkeys.Integerish
    s: groupkeys.Integerish
    n_bits: int


class ElGamalMessageComponents(typing.NamedTuple):
    c1: groupkeys.Integerish
    c2: groupkeys.Integerish
    n_bits: int


def _width(group: DiscreteLogarithmGroup) -> int:
    return (group.n_bits + 7) // 8


class ElGamalPublicKey(groupkeys.GroupPublicKey):
    kind = KeyKind.ELGAMAL

    def encrypt(self, message: bytes) -> bytes:
        """Encrypts `message`, whose big-endian representative must be below `p`.

        Raises:
            InvalidParameters: If the representative is out of range.
        """
        p, q, g = self.group
        m = octets_to_integer(message)
        if m >= p:
            raise InvalidParameters("Message representative must be in range [0, p-1]")
        k = keygen.random_exponent(q)
        return groupkeys.encode_pair(pow(g, k, p), m * pow(self.y, k, p) % p, p.bit_length())

    def verify(self, message: bytes, signature: bytes, hashf: str = DEFAULT_HASH) -> bool:
        """Checks an ElGamal signature over `message`.

        Raises:
            MalformedSignature: If `signature` is not two halves of the byte width of `p`.
        """
        p, q, g = self.group
        r, s = groupkeys.decode_pair(signature, MalformedSignature, _width(self.group))
        if not (0 < r < p and 0 < s < q):
            return False
        z = digest_representative(message, hashf, q) % q
        return pow(g, z, p) == pow(self.y, r, p) * pow(r, s, p) % p


class ElGamalPrivateKey(groupkeys.GroupPrivateKey):
    kind = KeyKind.ELGAMAL
    public_class = ElGamalPublicKey

    def decrypt(self, message: bytes) -> bytes:
        """Recovers the representative of an ElGamal ciphertext, at the byte width of `p`.

        Raises:
            MalformedMessage: If `message` is not two in-range halves of the byte width of `p`.
        """
        p = self.group.p
        c1, c2 = groupkeys.decode_pair(message, MalformedMessage, _width(self.group))
        if not (0 < c1 < p and c2 < p):
            raise MalformedMessage("ElGamal ciphertext components out of range.")
        m = c2 * pow(pow(c1, self.x, p), -1, p) % p
        return integer_to_octets(m, p.bit_length())

    def sign(self, message: bytes, hashf: str = DEFAULT_HASH) -> bytes:
        """Signs `message`, drawing a fresh per-message secret."""
        p, q, g = self.group
        z = digest_representative(message, hashf, q) % q
        while True:
            k = keygen.random_exponent(q)
            r = pow(g, k, p)
            s = pow(k, -1, q) * (z - self.x * r) % q
            if s != 0:
                return groupkeys.encode_pair(r, s, p.bit_length())


@register(KeyKind.ELGAMAL)
class ElGamalAlgorithm:
    """Key factory, key-pair generator, signature and message codecs of the ElGamal family."""

    def make_public_key(self, **options) -> ElGamalPublicKey:
        return groupkeys.make_public(ElGamalPublicKey, options)

    def make_private_key(self, **options) -> ElGamalPrivateKey:
        return groupkeys.make_private(ElGamalPrivateKey, options)

    def generate_key_pair(self, num_bits: int | None, **options) -> tuple[ElGamalPrivateKey, ElGamalPublicKey]:
        if num_bits is None:
            raise MissingParameter("ElGamal key generation requires num_bits.")
        return groupkeys.generate_pair(ElGamalPrivateKey, num_bits, options)

    def make_signature(self, **components) -> bytes:
        comps = parse_options(ElGamalSignatureComponents, components)
        return groupkeys.encode_pair(comps.r, comps.s, comps.n_bits)

    def destructure_signature(self, signature: bytes) -> dict[str, int]:
        return groupkeys.decode_components(signature, ("r", "s"), MalformedSignature)

    def make_message(self, **components) -> bytes:
        comps = parse_options(ElGamalMessageComponents, components)
        return groupkeys.encode_pair(comps.c1, comps.c2, comps.n_bits)

    def destructure_message(self, message: bytes) -> dict[str, int]:
        return groupkeys.decode_components(message, ("c1", "c2"), MalformedMessage)
