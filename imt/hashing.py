"""Two-to-one hash backends and the zero-hash table.

Every backend maps two field elements to one. The tree never calls a
backend directly: it is handed one as ``hash2`` at construction time.
"""
import hashlib
from functools import cache

from circomlibpy.poseidon import PoseidonHash

from .errors import UnknownHashError

default = 0  # default 'empty' leaf

# BN254 scalar field, the field circom / circomlibjs Poseidon works in
SNARK_SCALAR_FIELD = 21888242871839275222246405745257275088548364400416034343698204186575808495617

# Cairo / Stark field
STARK_PRIME = 2**251 + 17 * 2**192 + 1

DEFAULT_DEPTH = 32


@cache
def _poseidon():
    return PoseidonHash()


def poseidon2(left, right):
    # same function as poseidon-lite's poseidon2 / circomlibjs poseidon([l, r])
    return int(_poseidon().hash(2, [left, right]))


poseidon2.modulus = SNARK_SCALAR_FIELD


def cairo_poseidon2(left, right):
    # Cairo's hardcoded Poseidon parameters, P = 2**251 + 17 * 2**192 + 1
    from poseidon_py.poseidon_hash import poseidon_perm
    return poseidon_perm(left, right, 2)[0]


cairo_poseidon2.modulus = STARK_PRIME


def sha256_hash2(left, right):
    """SHA-256 of both values as 32-byte big-endian words, reduced into the BN254 field."""
    data = _word(left) + _word(right)
    return int.from_bytes(hashlib.sha256(data).digest(), byteorder='big') % SNARK_SCALAR_FIELD


# inputs are raw words, but keep values in the field the outputs live in
sha256_hash2.modulus = SNARK_SCALAR_FIELD


def _word(v):
    if v < 0 or v >= 2**256:
        raise ValueError(f"value {v} does not fit into a 256 bit word")
    return v.to_bytes(32, byteorder='big')


BACKENDS = {
    'poseidon': poseidon2,
    'cairo-poseidon': cairo_poseidon2,
    'sha256': sha256_hash2,
}


def get_hash(name):
    try:
        return BACKENDS[name]
    except KeyError:
        raise UnknownHashError(name) from None


def field_modulus(hash2):
    """Exclusive upper bound for field elements of a backend, or None if unknown."""
    return getattr(hash2, "modulus", None)


def zero_hashes(hash2, depth):
    """Hash of an all-empty subtree for every level 0..depth."""
    zeros = [default] * (depth + 1)
    for i in range(1, depth + 1):
        zeros[i] = hash2(zeros[i-1], zeros[i-1])
    return zeros
