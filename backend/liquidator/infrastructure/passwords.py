"""Password Hashing — argon2id hashes for stored user passwords.

Invariants:
    - Plaintext passwords are never stored or logged
    - verify_password never raises for a wrong password or a malformed hash; it returns False

Design Decisions:
    - argon2-cffi PasswordHasher with library defaults (argon2id, per-hash random salt)
"""

import logging

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

logger = logging.getLogger(__name__)

ph = PasswordHasher()


def hash_password(password: str) -> str:
    return ph.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return ph.verify(password_hash, password)
    except VerifyMismatchError:
        return False
    except (VerificationError, InvalidHashError) as e:
        logger.warning(f"Stored password hash could not be verified: {e}")
        return False
