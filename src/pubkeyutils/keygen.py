"""Randomized parameter generation: probable primes, RSA prime pairs and discrete-logarithm groups.

Everything here consumes `secrets` randomness and is the only computationally heavy part of the library. Prime pairs
for RSA follow the probable-prime route of FIPS 186-5 Appendix A.1.3, discrete-logarithm groups are built around a
random `q` in the manner of FIPS 186-4 Appendix A.1.1, without the seed bookkeeping.

Typical usage example:

    check_prime(2**127 - 1)
    p, q = generate_primes(3072)
    p, q, g = generate_dl_group(2048)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import math
import secrets

from pubkeyutils.errors import InvalidParameters

_log = logging.getLogger(__name__)

_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0
_MINIMUM_PRIME_SEPARATION: int = 100

MINIMUM_RSA_SIZE: int = 2048
MINIMUM_GROUP_SIZE: int = 1024
# (L, N) pairs: modulus sizes up to L get a subgroup order of N bits.
SUBGROUP_SIZES: tuple[tuple[int, int], ...] = ((1024, 160), (2048, 224))
LARGE_SUBGROUP_SIZE: int = 256


def _sieve(n: int = 10000) -> list[int]:
    """Lists the primes up to `n` with an odd-only Sieve of Eratosthenes.

    Args:
        n: Inclusive upper bound. Defaults to 10000.

    Returns:
        The primes up to `n`, ascending.
    """
    if n < 2:
        return []
    # Index i stands for the odd number 2i + 3.
    odd_count = (n - 1) // 2
    is_prime = [True] * odd_count
    for i in range(int(n**0.5) // 2):
        if not is_prime[i]:
            continue
        step = 2 * i + 3
        for j in range((step * step - 3) // 2, odd_count, step):
            is_prime[j] = False
    return [2] + [2 * i + 3 for i, flag in enumerate(is_prime) if flag]


def get_pre_primes(n: int = 10000, change: bool = False) -> list[int]:
    """Returns the cached small primes, sieving again when the cache is too short.

    Args:
        n: The bound the cache has to cover. Defaults to 10000. Must be >= 0.
        change: Force a new sieve up to exactly `n`. Defaults to False.

    Returns:
        Ascending primes covering at least `n`, or exactly up to `n` if `change` is set.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    global _SMALL_PRIMES
    global _SMALL_PRIMES_CAP
    if change or not _SMALL_PRIMES or n > _SMALL_PRIMES_CAP:
        _SMALL_PRIMES = _sieve(n)
        _SMALL_PRIMES_CAP = n
    return _SMALL_PRIMES


def _trial_division(no: int, n: int = 10000) -> bool:
    """Rules out candidates with a small factor.

    Args:
        no: The candidate. Must be non-negative.
        n: Bound of the small primes used, passed on to `get_pre_primes()`.

    Returns:
        False if `no` is certainly composite (or below 2), True otherwise.
    """
    if no < 2:
        return False
    for prime in get_pre_primes(n):
        if prime * prime > no:
            return True
        if no % prime == 0:
            return False
    return True


def _miller_rabin(w: int, iters: int) -> bool:
    """Miller-Rabin probabilistic primality test, FIPS 186-5 Appendix B.3.

    Args:
        w: Odd integer to test.
        iters: Number of random bases to try.

    Returns:
        True if `w` is probably prime, False if it is certainly composite.
    """
    if w <= 3:
        return w in (2, 3)
    w_minus = w - 1
    a = (w_minus & -w_minus).bit_length() - 1
    m = w_minus >> a
    for _ in range(iters):
        z = pow(secrets.randbelow(w - 3) + 2, m, w)
        if z in (1, w_minus):
            continue
        for _ in range(a - 1):
            z = pow(z, 2, w)
            if z == w_minus:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def check_prime(candidate: int, iters: int | None = None, n: int = 10000) -> bool:
    """Tests `candidate` for primality: trial division first, then Miller-Rabin.

    Args:
        candidate: The number to test.
        iters: Miller-Rabin rounds. Defaults to the FIPS 186-5 Appendix C.1 table for the candidate size.
        n: Bound of the trial division primes.

    Returns:
        True if `candidate` is probably prime, False otherwise.
    """
    if not _trial_division(candidate, n):
        return False
    if iters is None:
        size = candidate.bit_length()
        if size <= 512:
            iters = 40
        elif size <= 1024:
            iters = 56
        elif size <= 1536:
            iters = 64
        elif size <= 2048:
            iters = 70
        else:
            iters = 74
    return _miller_rabin(candidate, iters)


def generate_prime(size: int) -> int:
    """Generates a probable prime of exactly `size` bits.

    Args:
        size: Bit length of the prime. Must be >= 2.

    Returns:
        A probable prime.

    Raises:
        RuntimeError: If an implausible number of candidates was rejected.
    """
    if size < 2:
        raise InvalidParameters("Prime size must be at least 2 bits.")
    rep_cap = size * 20
    for attempt in range(rep_cap):
        candidate = secrets.randbits(size) | (1 << size - 1) | 1
        if check_prime(candidate):
            _log.debug("Found %d-bit probable prime after %d candidates.", size, attempt + 1)
            return candidate
    raise RuntimeError(f"No prime found in {rep_cap} candidates. Check system random number generator.")


def _generate_probable_prime(size: int, pub: int = 65537, prm_p: int | None = None) -> int:
    """Generates one prime of an RSA pair, FIPS 186-5 Appendix A.1.3.

    Args:
        size: Bit length of the prime.
        pub: The public exponent the prime has to be compatible with.
        prm_p: The first prime of the pair, when generating the second one. Enforces the minimum separation.

    Returns:
        A probable prime with its two top bits set and `gcd(prime - 1, pub) == 1`.

    Raises:
        RuntimeError: If an implausible number of candidates was rejected.
    """
    rep_cap = size * (5 if prm_p is None else 10)
    # Two top bits set, so the product of two such primes has the full key size.
    top = (1 << size - 1) | (1 << size - 2)
    for _ in range(rep_cap):
        candidate = secrets.randbits(size) | top
        if prm_p is not None and abs(prm_p - candidate) <= (1 << (size - _MINIMUM_PRIME_SEPARATION)):
            continue
        if math.gcd(candidate - 1, pub) == 1 and check_prime(candidate):
            return candidate
    raise RuntimeError(f"No prime found in {rep_cap} candidates. Check system random number generator.")


def generate_primes(size: int, pub: int = 65537) -> tuple[int, int]:
    """Generates a distinct pair of primes suitable for an RSA modulus of `size` bits.

    Args:
        size: The modulus size. Must be even and at least `MINIMUM_RSA_SIZE`.
        pub: The public exponent. Must be odd and in range `(2**16, 2**256)`.

    Returns:
        The prime pair `(p, q)`.

    Raises:
        InvalidParameters: If `size` or `pub` does not meet the requirements.
    """
    if size < MINIMUM_RSA_SIZE:
        raise InvalidParameters(f"Size must be at least {MINIMUM_RSA_SIZE}.")
    if size % 2 != 0:
        raise InvalidParameters("Size must be an even number.")
    if pub % 2 == 0 or not 2**16 < pub < 2**256:
        raise InvalidParameters("Public exponent does not meet requirements.")
    p = _generate_probable_prime(size // 2, pub)
    q = _generate_probable_prime(size // 2, pub, p)
    while p == q:
        q = _generate_probable_prime(size // 2, pub, p)
    return p, q


def rsa_components(size: int, pub: int = 65537) -> tuple[int, int, int, int, int]:
    """Generates the integer components of an RSA key.

    Args:
        size: The modulus size, see `generate_primes`.
        pub: The public exponent, see `generate_primes`.

    Returns:
        `(modulus, public exponent, private exponent, p, q)`, the private exponent taken modulo `lcm(p - 1, q - 1)`.
    """
    p, q = generate_primes(size, pub)
    d = pow(pub, -1, math.lcm(p - 1, q - 1))
    return p * q, pub, d, p, q


def _subgroup_size(num_bits: int) -> int:
    for modulus_size, order_size in SUBGROUP_SIZES:
        if num_bits <= modulus_size:
            return order_size
    return LARGE_SUBGROUP_SIZE


def generate_dl_group(num_bits: int, q_bits: int | None = None) -> tuple[int, int, int]:
    """Generates discrete-logarithm domain parameters `(p, q, g)`.

    A random prime `q` is drawn first, then `p` is searched among the `num_bits` integers congruent to 1 modulo `2q`.
    `g` is the first `h^((p - 1) / q) mod p` different from 1.

    Args:
        num_bits: Bit length of `p`. Must be at least `MINIMUM_GROUP_SIZE`.
        q_bits: Bit length of `q`. Defaults according to `SUBGROUP_SIZES`.

    Returns:
        The triple `(p, q, g)`.

    Raises:
        InvalidParameters: If the sizes are unsupported.
        RuntimeError: If no modulus was found for the drawn `q`.
    """
    if num_bits < MINIMUM_GROUP_SIZE:
        raise InvalidParameters(f"Group size must be at least {MINIMUM_GROUP_SIZE}.")
    if q_bits is None:
        q_bits = _subgroup_size(num_bits)
    if not 160 <= q_bits < num_bits:
        raise InvalidParameters("Subgroup order size must be in range [160, num_bits).")
    q = generate_prime(q_bits)
    rep_cap = 4 * num_bits
    for attempt in range(rep_cap):
        x = secrets.randbits(num_bits) | (1 << num_bits - 1)
        p = x - (x % (2 * q)) + 1
        if p.bit_length() == num_bits and check_prime(p):
            _log.debug("Found %d-bit group modulus after %d candidates.", num_bits, attempt + 1)
            break
    else:
        raise RuntimeError(f"No modulus found in {rep_cap} candidates. Check system random number generator.")
    cofactor = (p - 1) // q
    h = 2
    g = pow(h, cofactor, p)
    while g == 1:
        h += 1
        g = pow(h, cofactor, p)
    return p, q, g


def random_exponent(q: int) -> int:
    """Draws a secret exponent uniformly from `[1, q - 1]`."""
    return secrets.randbelow(q - 1) + 1
