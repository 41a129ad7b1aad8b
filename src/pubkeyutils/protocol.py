"""Algorithm-neutral key protocol: kind tags, capabilities, the algorithm registry and the dispatching operations.

Two dispatch routes exist. Operations that build something from scratch (keys, key pairs, signatures, messages) take
an explicit kind tag and look the algorithm up in the registry, since no key may be at hand yet. Operations on a live
key (sign, verify, encrypt, decrypt, exchange) dispatch on the key itself, which knows its family and parameters.

Typical usage example:

    priv, pub = generate_key_pair(KeyKind.DSA, 2048)
    sig = sign_message(priv, b"Hi there!")
    verify_signature(pub, b"Hi there!", sig)
    destructure_signature(KeyKind.DSA, sig)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import enum
import logging
import typing

from pubkeyutils.errors import InvalidParameters
from pubkeyutils.errors import MissingParameter
from pubkeyutils.errors import UnsupportedKind
from pubkeyutils.errors import UnsupportedOperation
from pubkeyutils.octets import check_range

_log = logging.getLogger(__name__)


class KeyKind(str, enum.Enum):
    """Tags of the algorithm families shipped with the package.

    The registry accepts any string, so further families may use their own tags.
    """
    RSA = "rsa"
    DSA = "dsa"
    ELGAMAL = "elgamal"
    DH = "dh"


class Key:
    """Common base of public and private keys.

    Keys are values: they compare and hash by their components. Each attribute is assigned once, in `__init__`, and
    can be neither reassigned nor deleted afterwards.

    Attributes:
        kind: The tag of the algorithm family, set by each concrete class.
    """
    kind: str

    def __setattr__(self, name: str, value: typing.Any) -> None:
        if name in self.__dict__:
            raise AttributeError(f"{type(self).__name__}.{name} cannot be reassigned.")
        super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__}.{name} cannot be deleted.")

    def _components(self) -> tuple:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._components() == other._components()

    def __hash__(self) -> int:
        return hash((type(self), self._components()))


class PublicKey(Key):
    """Base class of public keys."""


class PrivateKey(Key):
    """Base class of private keys."""


@typing.runtime_checkable
class Signer(typing.Protocol):
    def sign(self, message: bytes, **options) -> bytes:
        ...


@typing.runtime_checkable
class Verifier(typing.Protocol):
    def verify(self, message: bytes, signature: bytes, **options) -> bool:
        ...


@typing.runtime_checkable
class Encryptor(typing.Protocol):
    def encrypt(self, message: bytes, **options) -> bytes:
        ...


@typing.runtime_checkable
class Decryptor(typing.Protocol):
    def decrypt(self, message: bytes, **options) -> bytes:
        ...


@typing.runtime_checkable
class KeyExchangeParticipant(typing.Protocol):
    def exchange(self, public_key: PublicKey) -> bytes:
        ...


@typing.runtime_checkable
class KeyFactory(typing.Protocol):
    def make_public_key(self, **options) -> PublicKey:
        ...

    def make_private_key(self, **options) -> PrivateKey:
        ...


@typing.runtime_checkable
class KeyPairGenerator(typing.Protocol):
    def generate_key_pair(self, num_bits: int | None, **options) -> tuple[PrivateKey, PublicKey]:
        ...


@typing.runtime_checkable
class SignatureCodec(typing.Protocol):
    def make_signature(self, **components) -> bytes:
        ...

    def destructure_signature(self, signature: bytes) -> dict[str, int]:
        ...


@typing.runtime_checkable
class MessageCodec(typing.Protocol):
    def make_message(self, **components) -> bytes:
        ...

    def destructure_message(self, message: bytes) -> dict[str, int]:
        ...


_REGISTRY: dict[str, object] = {}

T = typing.TypeVar("T")
OptionsT = typing.TypeVar("OptionsT", bound=tuple)


def register(kind: str) -> typing.Callable[[type[T]], type[T]]:
    """Class decorator registering an algorithm bundle under `kind`.

    The class is instantiated without arguments and should implement whichever of `KeyFactory`, `KeyPairGenerator`,
    `SignatureCodec` and `MessageCodec` the family supports. Registering an existing kind replaces its bundle.

    Args:
        kind: The tag the bundle answers to.

    Returns:
        The decorator, which hands the class back unchanged.
    """

    def decorator(cls: type[T]) -> type[T]:
        if kind in _REGISTRY:
            _log.warning("Replacing algorithm registered for kind %r with %s.", kind, cls.__name__)
        _REGISTRY[kind] = cls()
        _log.debug("Registered %s for kind %r.", cls.__name__, kind)
        return cls

    return decorator


def unregister(kind: str) -> None:
    """Removes the bundle registered under `kind`, if any."""
    if _REGISTRY.pop(kind, None) is not None:
        _log.debug("Unregistered kind %r.", kind)


def registered_kinds() -> list[str]:
    """Lists the kinds currently registered."""
    return list(_REGISTRY)


def get_algorithm(kind: str) -> object:
    """Looks up the bundle registered for `kind`.

    Raises:
        UnsupportedKind: If nothing is registered for `kind`.
    """
    try:
        return _REGISTRY[kind]
    except KeyError:
        raise UnsupportedKind(f"No algorithm registered for kind {kind!r}.") from None


def _capability(kind: str, protocol: type[T], operation: str) -> T:
    algorithm = get_algorithm(kind)
    if not isinstance(algorithm, protocol):
        raise UnsupportedOperation(f"Kind {kind!r} does not support {operation}.")
    return algorithm


def parse_options(options_type: type[OptionsT], options: dict[str, typing.Any]) -> OptionsT:
    """Builds a per-kind options structure from keyword options.

    Args:
        options_type: A `typing.NamedTuple` enumerating the recognized options.
        options: The keyword options as supplied by the caller.

    Returns:
        The populated structure.

    Raises:
        InvalidParameters: If an option is not recognized.
        MissingParameter: If a required option is absent.
    """
    unknown = set(options) - set(options_type._fields)
    if unknown:
        raise InvalidParameters(f"Unrecognized options for {options_type.__name__}: {', '.join(sorted(unknown))}")
    missing = [f for f in options_type._fields if f not in options and f not in options_type._field_defaults]
    if missing:
        raise MissingParameter(f"Missing options for {options_type.__name__}: {', '.join(missing)}")
    return options_type(**options)


def make_public_key(kind: str, **options) -> PublicKey:
    """Builds a public key of `kind` purely from `options`."""
    return _capability(kind, KeyFactory, "key construction").make_public_key(**options)


def make_private_key(kind: str, **options) -> PrivateKey:
    """Builds a private key of `kind` purely from `options`."""
    return _capability(kind, KeyFactory, "key construction").make_private_key(**options)


def generate_key_pair(kind: str, num_bits: int | None = None, **options) -> tuple[PrivateKey, PublicKey]:
    """Generates a fresh key pair of `kind`.

    Args:
        kind: The algorithm family.
        num_bits: The modulus size. Mandatory for families whose security derives from it.
        **options: Family specific generation options.

    Returns:
        The pair `(private_key, public_key)`, private key first.

    Raises:
        UnsupportedKind: If nothing is registered for `kind`.
        MissingParameter: If `num_bits` is required and absent.
    """
    return _capability(kind, KeyPairGenerator, "key generation").generate_key_pair(num_bits, **options)


def _require(key: Key, protocol: type[T], operation: str) -> T:
    if not isinstance(key, protocol):
        raise UnsupportedOperation(f"{type(key).__name__} does not support {operation}.")
    return key


def sign_message(key: PrivateKey, message: bytes, start: int = 0, end: int | None = None, **options) -> bytes:
    """Signs `message[start:end]` with `key`.

    Raises:
        RangeError: If `start`/`end` lie outside `message`.
        UnsupportedOperation: If `key` cannot sign.
    """
    signer = _require(key, Signer, "signing")
    start, end = check_range(message, start, end)
    return signer.sign(bytes(message[start:end]), **options)


def verify_signature(key: PublicKey,
                     message: bytes,
                     signature: bytes,
                     start: int = 0,
                     end: int | None = None,
                     **options) -> bool:
    """Checks `signature` over `message[start:end]` against `key`.

    Returns:
        True if the signature is valid, False if it is well-formed but does not match.

    Raises:
        MalformedSignature: If `signature` cannot be parsed for the key's kind.
        RangeError: If `start`/`end` lie outside `message`.
        UnsupportedOperation: If `key` cannot verify.
    """
    verifier = _require(key, Verifier, "verification")
    start, end = check_range(message, start, end)
    return verifier.verify(bytes(message[start:end]), bytes(signature), **options)


def encrypt_message(key: PublicKey, message: bytes, start: int = 0, end: int | None = None, **options) -> bytes:
    """Encrypts `message[start:end]` with `key` into a fresh buffer."""
    encryptor = _require(key, Encryptor, "encryption")
    start, end = check_range(message, start, end)
    return encryptor.encrypt(bytes(message[start:end]), **options)


def decrypt_message(key: PrivateKey, message: bytes, start: int = 0, end: int | None = None, **options) -> bytes:
    """Decrypts `message[start:end]` with `key` into a fresh buffer."""
    decryptor = _require(key, Decryptor, "decryption")
    start, end = check_range(message, start, end)
    return decryptor.decrypt(bytes(message[start:end]), **options)


def diffie_hellman(private_key: PrivateKey, public_key: PublicKey) -> bytes:
    """Derives the shared secret of `private_key` and the peer's `public_key`.

    The result is symmetric: both parties obtain the same octets.

    Raises:
        IncompatibleParameters: If the keys do not share their parameters.
        UnsupportedOperation: If `private_key` cannot take part in a key exchange.
    """
    return _require(private_key, KeyExchangeParticipant, "key exchange").exchange(public_key)


def make_signature(kind: str, **components) -> bytes:
    """Encodes a signature of `kind` from its named integer components.

    The components are those `destructure_signature` returns, `n_bits` included, so a decoded signature encodes back
    to the same octets.

    Raises:
        MissingParameter: If a component is absent.
        InvalidParameters: If a component is not recognized for `kind`.
    """
    return _capability(kind, SignatureCodec, "signature encoding").make_signature(**components)


def destructure_signature(kind: str, signature: bytes) -> dict[str, int]:
    """Decodes a signature of `kind` into its named integer components.

    Raises:
        MalformedSignature: If the octets do not match the layout of `kind`.
    """
    return _capability(kind, SignatureCodec, "signature decoding").destructure_signature(bytes(signature))


def make_message(kind: str, **components) -> bytes:
    """Encodes an encrypted message of `kind` from its named integer components.

    Raises:
        MissingParameter: If a component is absent.
        InvalidParameters: If a component is not recognized for `kind`.
    """
    return _capability(kind, MessageCodec, "message encoding").make_message(**components)


def destructure_message(kind: str, message: bytes) -> dict[str, int]:
    """Decodes an encrypted message of `kind` into its named integer components.

    Raises:
        MalformedMessage: If the octets do not match the layout of `kind`.
    """
    return _capability(kind, MessageCodec, "message decoding").destructure_message(bytes(message))
