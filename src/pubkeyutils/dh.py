"""Finite-field Diffie-Hellman keys and their registration under `KeyKind.DH`.

Typical usage example:

    a_priv, a_pub = generate_key_pair(KeyKind.DH, group=MODP_2048)
    b_priv, b_pub = generate_key_pair(KeyKind.DH, group=MODP_2048)
    diffie_hellman(a_priv, b_pub) == diffie_hellman(b_priv, a_pub)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from pubkeyutils import groupkeys
from pubkeyutils.errors import IncompatibleParameters
from pubkeyutils.errors import InvalidParameters
from pubkeyutils.octets import integer_to_octets
from pubkeyutils.protocol import KeyKind
from pubkeyutils.protocol import PublicKey
from pubkeyutils.protocol import register


class DHPublicKey(groupkeys.GroupPublicKey):
    kind = KeyKind.DH


class DHPrivateKey(groupkeys.GroupPrivateKey):
    kind = KeyKind.DH
    public_class = DHPublicKey

    def exchange(self, public_key: PublicKey) -> bytes:
        """Computes `peer_y ^ x mod p`, written at the byte width of `p`.

        Raises:
            IncompatibleParameters: If `public_key` is not a DH key over the same group.
            InvalidParameters: If the peer value lies outside the subgroup.
        """
        if not isinstance(public_key, DHPublicKey):
            raise IncompatibleParameters(f"Cannot exchange keys with {type(public_key).__name__}.")
        if public_key.group != self.group:
            raise IncompatibleParameters("Keys belong to different groups.")
        p = self.group.p
        if not (1 < public_key.y < p - 1 and self.group.contains(public_key.y)):
            raise InvalidParameters("Peer public value is not a member of the subgroup.")
        return integer_to_octets(pow(public_key.y, self.x, p), p.bit_length())


@register(KeyKind.DH)
class DHAlgorithm:
    """Key factory and key-pair generator of the Diffie-Hellman family."""

    def make_public_key(self, **options) -> DHPublicKey:
        return groupkeys.make_public(DHPublicKey, options)

    def make_private_key(self, **options) -> DHPrivateKey:
        return groupkeys.make_private(DHPrivateKey, options)

    def generate_key_pair(self, num_bits: int | None, **options) -> tuple[DHPrivateKey, DHPublicKey]:
        return groupkeys.generate_pair(DHPrivateKey, num_bits, options)
