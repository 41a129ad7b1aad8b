# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from cryptography.hazmat.primitives.asymmetric import dsa
from cryptography.hazmat.primitives.asymmetric import rsa
import pytest

from pubkeyutils import DiscreteLogarithmGroup

standard_payload = b"The quick brown fox jumps over the lazy dog1234567890!@#$%^&*()-_=+[{}];:\\|<>,./?~`'\""


@pytest.fixture(scope="session")
def payload() -> bytes:
    return standard_payload


@pytest.fixture(scope="session")
def crypto_rsa() -> rsa.RSAPrivateKey:
    """Reference RSA key from the `cryptography` package."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def crypto_dsa() -> dsa.DSAPrivateKey:
    """Reference DSA key from the `cryptography` package."""
    return dsa.generate_private_key(key_size=2048)


@pytest.fixture(scope="session")
def dl_group(crypto_dsa) -> DiscreteLogarithmGroup:
    numbers = crypto_dsa.parameters().parameter_numbers()
    return DiscreteLogarithmGroup(numbers.p, numbers.q, numbers.g)

