"""
Password hashing

Stored format is "<hex scrypt key>.<hex salt>".
"""

import hashlib
import hmac
import secrets

SALT_BYTES = 16
KEY_LENGTH = 64
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1


def _derive(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode(),
        salt=salt.encode(),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=KEY_LENGTH,
    )


def hash_password(password: str) -> str:
    salt = secrets.token_hex(SALT_BYTES)
    return f"{_derive(password, salt).hex()}.{salt}"


def verify_password(supplied: str, stored: str) -> bool:
    """
    Re-derive the key with the stored salt and compare in constant time.
    Raises ValueError when the stored hash has no delimiter.
    """
    hashed, sep, salt = stored.partition(".")
    if not sep or not salt:
        raise ValueError("Malformed password hash")
    return hmac.compare_digest(bytes.fromhex(hashed), _derive(supplied, salt))
