"""Discrete-logarithm domain parameters shared by DSA, ElGamal and Diffie-Hellman keys.

A group is a plain immutable value: keys generated from the same parameters hold the same instance (or an equal one)
and never modify it.

Typical usage example:

    group = DiscreteLogarithmGroup.from_parameters(p, q, g)
    group.n_bits
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import typing

from pubkeyutils.errors import InvalidParameters
from pubkeyutils.octets import maybe_integerize


class DiscreteLogarithmGroup(typing.NamedTuple):
    """The `(p, q, g)` triple defining a cyclic subgroup of order `q` modulo `p`.

    Attributes:
        p: The prime modulus.
        q: The prime order of the subgroup, dividing `p - 1`.
        g: Generator of the subgroup, `1 < g < p`.
    """
    p: int
    q: int
    g: int

    @classmethod
    def from_parameters(cls, p: int | bytes, q: int | bytes, g: int | bytes) -> "DiscreteLogarithmGroup":
        """Builds and validates a group from integers or big-endian octets.

        Args:
            p: The prime modulus.
            q: The subgroup order.
            g: The subgroup generator.

        Returns:
            A validated group.

        Raises:
            InvalidParameters: If the triple violates the group invariants.
        """
        group = cls(maybe_integerize(p), maybe_integerize(q), maybe_integerize(g))
        group.validate()
        return group

    @property
    def n_bits(self) -> int:
        """Bit length of the modulus, the encoding width of group elements."""
        return self.p.bit_length()

    def validate(self) -> None:
        """Checks the structural invariants of the group.

        Primality of `p` and `q` is not tested here, as it is far more expensive than the rest combined.

        Raises:
            InvalidParameters: If any invariant does not hold.
        """
        if self.p < 3 or self.q < 2:
            raise InvalidParameters("Group modulus and order are too small.")
        if not 1 < self.g < self.p:
            raise InvalidParameters("Generator must be in range (1, p).")
        if (self.p - 1) % self.q != 0:
            raise InvalidParameters("Subgroup order does not divide p - 1.")
        if pow(self.g, self.q, self.p) != 1:
            raise InvalidParameters("Generator does not generate a subgroup of order q.")

    def contains(self, element: int) -> bool:
        """Whether `element` is a non-trivial member of the order-`q` subgroup."""
        return 1 < element < self.p and pow(element, self.q, self.p) == 1


# RFC 3526, 2048-bit MODP Group (id 14). Safe prime, so q = (p - 1) / 2.
_MODP_2048_P = int(
    """
            FFFFFFFF FFFFFFFF C90FDAA2 2168C234 C4C6628B 80DC1CD1
            29024E08 8A67CC74 020BBEA6 3B139B22 514A0879 8E3404DD
            EF9519B3 CD3A431B 302B0A6D F25F1437 4FE1356D 6D51C245
            E485B576 625E7EC6 F44C42E9 A637ED6B 0BFF5CB6 F406B7ED
            EE386BFB 5A899FA5 AE9F2411 7C4B1FE6 49286651 ECE45B3D
            C2007CB8 A163BF05 98DA4836 1C55D39A 69163FA8 FD24CF5F
            83655D23 DCA3AD96 1C62F356 208552BB 9ED52907 7096966D
            670C354E 4ABC9804 F1746C08 CA18217C 32905E46 2E36CE3B
            E39E772C 180E8603 9B2783A2 EC07A28F B5C55DF0 6F4C52C9
            DE2BCBF6 95581718 3995497C EA956AE5 15D22618 98FA0510
            15728E5A 8AACAA68 FFFFFFFF FFFFFFFF
    """.replace(" ", "").replace("\n", ""), 16)
MODP_2048 = DiscreteLogarithmGroup(_MODP_2048_P, (_MODP_2048_P - 1) // 2, 2)
