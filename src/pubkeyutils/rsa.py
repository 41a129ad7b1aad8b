"""RSA keys and their registration under `KeyKind.RSA`.

Signatures default to RSASSA-PKCS1-v1_5 and encryption to RSAES-OAEP. The textbook variants stay reachable through
`raw=True` and `oaep=False`. Signatures and ciphertexts are single integers written at the byte width of the modulus.

Typical usage example:

    priv, pub = generate_key_pair(KeyKind.RSA, 3072)
    c = encrypt_message(pub, b"Hi there!")
    r = decrypt_message(priv, c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import typing
import warnings

from pubkeyutils import keygen
from pubkeyutils import padding
from pubkeyutils.errors import InvalidParameters
from pubkeyutils.errors import MalformedMessage
from pubkeyutils.errors import MalformedSignature
from pubkeyutils.errors import MissingParameter
from pubkeyutils.octets import integer_to_octets
from pubkeyutils.octets import maybe_integerize
from pubkeyutils.octets import octets_to_integer
from pubkeyutils.protocol import KeyKind
from pubkeyutils.protocol import parse_options
from pubkeyutils.protocol import PrivateKey
from pubkeyutils.protocol import PublicKey
from pubkeyutils.protocol import register

DEFAULT_HASH = "sha384"
DEFAULT_PUBLIC_EXPONENT = 65537


class RSAPublicOptions(typing.NamedTuple):
    modulus: int | bytes
    exponent: int | bytes


class RSAPrivateOptions(typing.NamedTuple):
    modulus: int | bytes
    exponent: int | bytes
    public_exponent: int | bytes
    p: int | bytes | None = None
    q: int | bytes | None = None


class RSAGenerateOptions(typing.NamedTuple):
    public_exponent: int = DEFAULT_PUBLIC_EXPONENT


class RSASignatureComponents(typing.NamedTuple):
    s: int | bytes
    n_bits: int


class RSAMessageComponents(typing.NamedTuple):
    c: int | bytes
    n_bits: int


def _check_hash(hashf: str) -> None:
    if hashf not in padding.HASH_TLL:
        raise InvalidParameters(f"Unsupported hash function: {hashf}")


class _RSAKeyMixin:
    """Core RSA primitive shared by both halves of the pair.

    Attributes:
        modulus: The modulus of the key pair.
        exponent: The exponent of the key, public or private.
        bsize: Length of the modulus in octets.
    """
    modulus: int
    exponent: int
    bsize: int

    def _setup(self, modulus: int, exponent: int) -> None:
        self.modulus = modulus
        self.exponent = exponent
        self.bsize = (modulus.bit_length() + 7) // 8

    def c_rsa(self, message: int) -> int:
        """Performs the RSA primitive `message ^ exponent mod modulus`.

        Raises:
            InvalidParameters: If the representative is out of range for the key.
        """
        if not 0 <= message < self.modulus:
            raise InvalidParameters("Message representative must be in range [0, mod-1]")
        return pow(message, self.exponent, self.modulus)


class RSAPublicKey(_RSAKeyMixin, PublicKey):
    """RSA public key: a modulus and a public exponent."""
    kind = KeyKind.RSA

    def __init__(self, modulus: int, exponent: int) -> None:
        self._setup(modulus, exponent)

    def _components(self) -> tuple:
        return self.modulus, self.exponent

    def __repr__(self) -> str:
        return f"RSAPublicKey(bits={self.modulus.bit_length()}, exponent={self.exponent})"

    def encrypt(self, message: bytes, oaep: bool = True, label: bytes = b"", hashf: str = DEFAULT_HASH) -> bytes:
        """Encrypts `message` into a ciphertext of `bsize` octets.

        Args:
            message: The message to encrypt.
            oaep: Use RSAES-OAEP. Defaults to True. If False, performs raw RSA on the big-endian representative.
                Warning! Unsecure!
            label: Optional OAEP label, checked during decryption.
            hashf: OAEP hash function (sha256, sha384 or sha512).

        Returns:
            The ciphertext.

        Raises:
            InvalidParameters: If the options are inconsistent or the message does not fit.
        """
        if not oaep:
            warnings.warn("Raw RSA encryption is unsecure! Please use with care.", RuntimeWarning)
            if label:
                raise InvalidParameters("Label cannot be used with raw encryption.")
            em = octets_to_integer(message)
        else:
            _check_hash(hashf)
            try:
                em = octets_to_integer(padding.oaep_encode(message, self.bsize, label, hashf))
            except ValueError as exc:
                raise InvalidParameters(str(exc)) from exc
        return integer_to_octets(self.c_rsa(em), self.bsize * 8)

    def verify(self, message: bytes, signature: bytes, raw: bool = False, hashf: str | None = None) -> bool:
        """Checks an RSA signature over `message`.

        Args:
            message: The signed message.
            signature: The signature, exactly `bsize` octets.
            raw: The signature is textbook RSA over the big-endian representative of `message`.
                Otherwise RSASSA-PKCS1-v1_5 with the hash named in the DigestInfo. Defaults to False.
            hashf: Hash function the DigestInfo has to name. Defaults to whichever of `HASH_TLL` it names.

        Returns:
            True if the signature matches, False otherwise.

        Raises:
            InvalidParameters: If `hashf` is unknown.
            MalformedSignature: If the signature length differs from the modulus length.
        """
        if hashf is not None:
            _check_hash(hashf)
        if len(signature) != self.bsize:
            raise MalformedSignature(f"RSA signature must be {self.bsize} octets long.")
        s = octets_to_integer(signature)
        if s >= self.modulus:
            return False
        recovered = self.c_rsa(s)
        if raw:
            return recovered == octets_to_integer(message)
        return padding.emsa_pkcs1_v15_matches(integer_to_octets(recovered, self.bsize * 8), message, hashf)


class RSAPrivateKey(_RSAKeyMixin, PrivateKey):
    """RSA private key, with CRT acceleration when the primes are known.

    Attributes:
        public_key: The matching public key.
        p: Private prime 1, or None.
        q: Private prime 2, or None.
        exp1: CRT component dmp1, or None.
        exp2: CRT component dmq1, or None.
        coeff: CRT component iqmp, or None.
    """
    kind = KeyKind.RSA

    def __init__(self,
                 modulus: int,
                 exponent: int,
                 public_exponent: int,
                 p: int | None = None,
                 q: int | None = None) -> None:
        self._setup(modulus, exponent)
        self.public_key = RSAPublicKey(modulus, public_exponent)
        if p and q:
            exp1, exp2, coeff = exponent % (p - 1), exponent % (q - 1), pow(q, -1, p)
        else:
            p = q = exp1 = exp2 = coeff = None
        self.p: int | None = p
        self.q: int | None = q
        self.exp1: int | None = exp1
        self.exp2: int | None = exp2
        self.coeff: int | None = coeff

    def _components(self) -> tuple:
        return self.modulus, self.exponent, self.public_key.exponent, self.p, self.q

    def __repr__(self) -> str:
        return f"RSAPrivateKey(bits={self.modulus.bit_length()}, crt={self.p is not None})"

    def c_rsa(self, message: int) -> int:
        """Performs the private RSA primitive, through the CRT when possible."""
        if not self.p or not self.q:
            return super().c_rsa(message)
        if not 0 <= message < self.modulus:
            raise InvalidParameters("Message representative must be in range [0, mod-1]")
        m_1 = pow(message, self.exp1, self.p)
        m_2 = pow(message, self.exp2, self.q)
        h = ((m_1 - m_2) * self.coeff) % self.p
        return m_2 + self.q * h

    def sign(self, message: bytes, hashf: str = DEFAULT_HASH, raw: bool = False) -> bytes:
        """Signs `message`.

        Args:
            message: The message to sign.
            hashf: Hash function for RSASSA-PKCS1-v1_5 (sha256, sha384 or sha512).
            raw: Sign the big-endian representative of `message` directly. Defaults to False.

        Returns:
            The signature, `bsize` octets long.

        Raises:
            InvalidParameters: If the hash function is unknown or does not fit the key.
        """
        if raw:
            em = octets_to_integer(message)
        else:
            _check_hash(hashf)
            try:
                em = octets_to_integer(padding.emsa_pkcs1_v15_encode(message, self.bsize, hashf))
            except ValueError as exc:
                raise InvalidParameters(str(exc)) from exc
        return integer_to_octets(self.c_rsa(em), self.bsize * 8)

    def decrypt(self, message: bytes, oaep: bool = True, label: bytes = b"", hashf: str = DEFAULT_HASH) -> bytes:
        """Decrypts a ciphertext of `bsize` octets.

        Args:
            message: The ciphertext.
            oaep: The ciphertext uses RSAES-OAEP. Defaults to True. If False, the raw representative is returned at
                the width of the modulus.
            label: The OAEP label the message was encrypted with.
            hashf: OAEP hash function (sha256, sha384 or sha512).

        Returns:
            The plaintext.

        Raises:
            MalformedMessage: If the ciphertext does not fit the modulus.
            RuntimeError: If OAEP decoding fails.
        """
        if len(message) != self.bsize:
            raise MalformedMessage(f"RSA ciphertext must be {self.bsize} octets long.")
        c = octets_to_integer(message)
        if c >= self.modulus:
            raise MalformedMessage("RSA ciphertext representative out of range.")
        em = integer_to_octets(self.c_rsa(c), self.bsize * 8)
        if not oaep:
            return em
        _check_hash(hashf)
        return padding.oaep_decode(em, self.bsize, label, hashf)


@register(KeyKind.RSA)
class RSAAlgorithm:
    """Key factory, key-pair generator and codecs of the RSA family."""

    def make_public_key(self, **options) -> RSAPublicKey:
        opts = parse_options(RSAPublicOptions, options)
        modulus, exponent = maybe_integerize(opts.modulus), maybe_integerize(opts.exponent)
        if modulus < 3 or not 0 < exponent < modulus:
            raise InvalidParameters("RSA public exponent must be in range (0, modulus).")
        return RSAPublicKey(modulus, exponent)

    def make_private_key(self, **options) -> RSAPrivateKey:
        opts = parse_options(RSAPrivateOptions, options)
        modulus = maybe_integerize(opts.modulus)
        exponent = maybe_integerize(opts.exponent)
        public_exponent = maybe_integerize(opts.public_exponent)
        if modulus < 3 or not 0 < exponent < modulus or not 0 < public_exponent < modulus:
            raise InvalidParameters("RSA exponents must be in range (0, modulus).")
        if (opts.p is None) != (opts.q is None):
            raise MissingParameter("RSA primes must be supplied together.")
        p = q = None
        if opts.p is not None:
            p, q = maybe_integerize(opts.p), maybe_integerize(opts.q)
            if p * q != modulus:
                raise InvalidParameters("RSA primes do not multiply to the modulus.")
        return RSAPrivateKey(modulus, exponent, public_exponent, p, q)

    def generate_key_pair(self, num_bits: int | None, **options) -> tuple[RSAPrivateKey, RSAPublicKey]:
        if num_bits is None:
            raise MissingParameter("RSA key generation requires num_bits.")
        opts = parse_options(RSAGenerateOptions, options)
        n, e, d, p, q = keygen.rsa_components(num_bits, opts.public_exponent)
        priv = RSAPrivateKey(n, d, e, p, q)
        return priv, priv.public_key

    def make_signature(self, **components) -> bytes:
        """Writes `s` at `n_bits`, the bit length of the modulus."""
        comps = parse_options(RSASignatureComponents, components)
        return integer_to_octets(maybe_integerize(comps.s), comps.n_bits)

    def destructure_signature(self, signature: bytes) -> dict[str, int]:
        if not signature:
            raise MalformedSignature("RSA signature is empty.")
        return {"s": octets_to_integer(signature), "n_bits": len(signature) * 8}

    def make_message(self, **components) -> bytes:
        comps = parse_options(RSAMessageComponents, components)
        return integer_to_octets(maybe_integerize(comps.c), comps.n_bits)

    def destructure_message(self, message: bytes) -> dict[str, int]:
        if not message:
            raise MalformedMessage("RSA ciphertext is empty.")
        return {"c": octets_to_integer(message), "n_bits": len(message) * 8}
