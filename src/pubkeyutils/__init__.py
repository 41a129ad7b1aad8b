"""Algorithm-neutral public-key cryptography in an academic sense.

Provides one protocol for key construction, key-pair generation, signing, verification, encryption, decryption and
Diffie-Hellman exchange, dispatched to the RSA, DSA, ElGamal and DH families shipped here or to any family registered
later. Also provides the integer/octet transcoding every family serializes through.

Typical usage example:

    priv, pub = generate_key_pair(KeyKind.RSA, 3072)
    sig = sign_message(priv, b"Hi there!")
    verify_signature(pub, b"Hi there!", sig)
    integer_to_octets(256, 16)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging

from pubkeyutils import dh
from pubkeyutils import dsa
from pubkeyutils import elgamal
from pubkeyutils import rsa
from pubkeyutils.errors import IncompatibleParameters
from pubkeyutils.errors import InvalidParameters
from pubkeyutils.errors import MalformedMessage
from pubkeyutils.errors import MalformedSignature
from pubkeyutils.errors import MissingParameter
from pubkeyutils.errors import PublicKeyError
from pubkeyutils.errors import RangeError
from pubkeyutils.errors import UnsupportedKind
from pubkeyutils.errors import UnsupportedOperation
from pubkeyutils.group import DiscreteLogarithmGroup
from pubkeyutils.group import MODP_2048
from pubkeyutils.octets import integer_to_octets
from pubkeyutils.octets import maybe_integerize
from pubkeyutils.octets import octets_to_integer
from pubkeyutils.protocol import decrypt_message
from pubkeyutils.protocol import destructure_message
from pubkeyutils.protocol import destructure_signature
from pubkeyutils.protocol import diffie_hellman
from pubkeyutils.protocol import encrypt_message
from pubkeyutils.protocol import generate_key_pair
from pubkeyutils.protocol import KeyKind
from pubkeyutils.protocol import make_message
from pubkeyutils.protocol import make_private_key
from pubkeyutils.protocol import make_public_key
from pubkeyutils.protocol import make_signature
from pubkeyutils.protocol import PrivateKey
from pubkeyutils.protocol import PublicKey
from pubkeyutils.protocol import register
from pubkeyutils.protocol import sign_message
from pubkeyutils.protocol import verify_signature

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "DiscreteLogarithmGroup",
    "MODP_2048",
    "KeyKind",
    "PublicKey",
    "PrivateKey",
    "register",
    "make_public_key",
    "make_private_key",
    "generate_key_pair",
    "sign_message",
    "verify_signature",
    "encrypt_message",
    "decrypt_message",
    "diffie_hellman",
    "make_signature",
    "destructure_signature",
    "make_message",
    "destructure_message",
    "octets_to_integer",
    "integer_to_octets",
    "maybe_integerize",
    "PublicKeyError",
    "UnsupportedKind",
    "UnsupportedOperation",
    "InvalidParameters",
    "MissingParameter",
    "RangeError",
    "MalformedSignature",
    "MalformedMessage",
    "IncompatibleParameters",
    "dh",
    "dsa",
    "elgamal",
    "rsa",
]
