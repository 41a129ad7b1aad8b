"""Exception hierarchy shared by the key protocol and every algorithm family.

Each error also derives from the closest builtin, so callers that only know about `ValueError` or `LookupError` keep
working.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class PublicKeyError(Exception):
    """Base class of all pubkeyutils errors."""


class UnsupportedKind(PublicKeyError, LookupError):
    """No algorithm is registered for the requested kind."""


class UnsupportedOperation(PublicKeyError, NotImplementedError):
    """The key or algorithm lacks the requested capability."""


class InvalidParameters(PublicKeyError, ValueError):
    """Construction or generation options are structurally inconsistent."""


class MissingParameter(InvalidParameters):
    """A required option was not supplied."""


class RangeError(PublicKeyError, IndexError):
    """A start/end pair lies outside the supplied buffer."""


class MalformedSignature(PublicKeyError, ValueError):
    """Signature bytes do not match the layout expected for the kind."""


class MalformedMessage(PublicKeyError, ValueError):
    """Encrypted message bytes do not match the layout expected for the kind."""


class IncompatibleParameters(PublicKeyError, ValueError):
    """Keys taking part in one operation do not share parameters."""
