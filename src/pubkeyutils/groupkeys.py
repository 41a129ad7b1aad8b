"""Keys over a discrete-logarithm group, shared by the DSA, ElGamal and Diffie-Hellman families.

A public key is a group and `y = g^x mod p`; the private key adds the secret exponent `x`. Options name the group
either as a whole (`group=`, a `DiscreteLogarithmGroup` or a `(p, q, g)` triple of integers or octets) or through its
parameters (`p=`, `q=`, `g=`).
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import typing

from pubkeyutils import keygen
from pubkeyutils.errors import InvalidParameters
from pubkeyutils.errors import MissingParameter
from pubkeyutils.group import DiscreteLogarithmGroup
from pubkeyutils.octets import integer_to_octets
from pubkeyutils.octets import maybe_integerize
from pubkeyutils.octets import octets_to_integer
from pubkeyutils.protocol import parse_options
from pubkeyutils.protocol import PrivateKey
from pubkeyutils.protocol import PublicKey

Integerish = int | bytes


class GroupPublicOptions(typing.NamedTuple):
    y: Integerish
    group: DiscreteLogarithmGroup | tuple[Integerish, Integerish, Integerish] | None = None
    p: Integerish | None = None
    q: Integerish | None = None
    g: Integerish | None = None


class GroupPrivateOptions(typing.NamedTuple):
    x: Integerish
    y: Integerish | None = None
    group: DiscreteLogarithmGroup | tuple[Integerish, Integerish, Integerish] | None = None
    p: Integerish | None = None
    q: Integerish | None = None
    g: Integerish | None = None


class GroupGenerateOptions(typing.NamedTuple):
    group: DiscreteLogarithmGroup | tuple[Integerish, Integerish, Integerish] | None = None
    q_bits: int | None = None


class GroupPublicKey(PublicKey):
    """Public half of a group key pair.

    Attributes:
        group: The domain parameters.
        y: The public value `g^x mod p`.
    """

    def __init__(self, group: DiscreteLogarithmGroup, y: int) -> None:
        self.group = group
        self.y = y

    def _components(self) -> tuple:
        return self.group, self.y

    def __repr__(self) -> str:
        return f"{type(self).__name__}(bits={self.group.n_bits})"


class GroupPrivateKey(PrivateKey):
    """Private half of a group key pair.

    Attributes:
        group: The domain parameters.
        x: The secret exponent.
        y: The public value `g^x mod p`.
    """
    public_class: type[GroupPublicKey] = GroupPublicKey

    def __init__(self, group: DiscreteLogarithmGroup, x: int, y: int | None = None) -> None:
        self.group = group
        self.x = x
        self.y = pow(group.g, x, group.p) if y is None else y

    def _components(self) -> tuple:
        return self.group, self.x, self.y

    def __repr__(self) -> str:
        return f"{type(self).__name__}(bits={self.group.n_bits})"

    @property
    def public_key(self) -> GroupPublicKey:
        """The matching public key, sharing this key's group."""
        return self.public_class(self.group, self.y)


def _as_group(value: typing.Sequence[Integerish]) -> DiscreteLogarithmGroup:
    if isinstance(value, DiscreteLogarithmGroup):
        value.validate()
        return value
    if len(value) != 3:
        raise InvalidParameters("A group is given as the triple (p, q, g).")
    return DiscreteLogarithmGroup.from_parameters(*value)


def _resolve_group(opts: GroupPublicOptions | GroupPrivateOptions) -> DiscreteLogarithmGroup:
    explicit = {"p": opts.p, "q": opts.q, "g": opts.g}
    if opts.group is not None:
        if any(v is not None for v in explicit.values()):
            raise InvalidParameters("Give either group or p, q and g, not both.")
        return _as_group(opts.group)
    missing = [name for name, value in explicit.items() if value is None]
    if missing:
        raise MissingParameter(f"Missing group parameters: {', '.join(missing)}")
    return DiscreteLogarithmGroup.from_parameters(opts.p, opts.q, opts.g)


def make_public(cls: type[GroupPublicKey], options: dict) -> GroupPublicKey:
    """Builds a validated public key of class `cls` from keyword options."""
    opts = parse_options(GroupPublicOptions, options)
    group = _resolve_group(opts)
    y = maybe_integerize(opts.y)
    if not group.contains(y):
        raise InvalidParameters("Public value is not a member of the group.")
    return cls(group, y)


def make_private(cls: type[GroupPrivateKey], options: dict) -> GroupPrivateKey:
    """Builds a validated private key of class `cls` from keyword options."""
    opts = parse_options(GroupPrivateOptions, options)
    group = _resolve_group(opts)
    x = maybe_integerize(opts.x)
    if not 0 < x < group.q:
        raise InvalidParameters("Secret exponent must be in range (0, q).")
    key = cls(group, x)
    if opts.y is not None and maybe_integerize(opts.y) != key.y:
        raise InvalidParameters("Public value does not match the secret exponent.")
    return key


def generate_pair(cls: type[GroupPrivateKey],
                  num_bits: int | None,
                  options: dict) -> tuple[GroupPrivateKey, GroupPublicKey]:
    """Generates a key pair of class `cls`, drawing a fresh group unless one is supplied.

    Raises:
        MissingParameter: If neither `num_bits` nor a group is available.
        InvalidParameters: If the supplied group does not have `num_bits` bits.
    """
    opts = parse_options(GroupGenerateOptions, options)
    if opts.group is not None:
        group = _as_group(opts.group)
        if num_bits is not None and group.n_bits != num_bits:
            raise InvalidParameters(f"Group modulus has {group.n_bits} bits, {num_bits} requested.")
    elif num_bits is None:
        raise MissingParameter("Key generation requires num_bits or a group.")
    else:
        group = DiscreteLogarithmGroup(*keygen.generate_dl_group(num_bits, opts.q_bits))
    priv = cls(group, keygen.random_exponent(group.q))
    return priv, priv.public_key


def encode_pair(first: Integerish, second: Integerish, n_bits: int) -> bytes:
    """Writes two integers back to back, each `n_bits` wide.

    Args:
        first: The leading integer.
        second: The trailing integer.
        n_bits: Width of each half in bits.

    Returns:
        The concatenated octets.

    Raises:
        InvalidParameters: If `n_bits` is not positive.
    """
    if n_bits <= 0:
        raise InvalidParameters("n_bits must be positive.")
    return integer_to_octets(maybe_integerize(first), n_bits) + integer_to_octets(maybe_integerize(second), n_bits)


def decode_pair(data: bytes, error: type[Exception], width: int | None = None) -> tuple[int, int]:
    """Splits octets written by `encode_pair` back into two integers.

    Args:
        data: The concatenated octets.
        error: Exception raised when the layout does not fit.
        width: Expected octet width of each half. Defaults to half of `data`.

    Returns:
        The two integers.
    """
    if not data or len(data) % 2:
        raise error("Expected two halves of equal, non-zero length.")
    half = len(data) // 2
    if width is not None and half != width:
        raise error(f"Expected two halves of {width} octets, got {half}.")
    return octets_to_integer(data, 0, half), octets_to_integer(data, half)


def decode_components(data: bytes, names: tuple[str, str], error: type[Exception]) -> dict[str, int]:
    """Splits `data` into two named components plus the `n_bits` that writes them back identically."""
    first, second = decode_pair(data, error)
    return {names[0]: first, names[1]: second, "n_bits": len(data) * 4}
