"""
Client-side computation of swap verification proofs.

A pool stores only the first 10 hex characters of the password hash it was
filled with. To swap, an account proves knowledge of that prefix bound to its
own address, so a proof observed on chain cannot be replayed by another
account.
"""
from contracting.stdlib.bridge.hashing import sha3

PASSWORD_PREFIX_LENGTH = 10


def hash_password(password: str) -> str:
    return sha3(password)


def get_verification(password: str, account: str) -> str:
    prefix = hash_password(password)[:PASSWORD_PREFIX_LENGTH]
    return sha3(prefix + ':' + account)


def interface_id(signature: str) -> str:
    """Identifier accepted by ``supports_interface`` for a signature string."""
    return sha3(signature)[:8]
