"""
Password hashing for stored user credentials.

bcrypt through passlib. Every hash gets a fresh salt, so two hashes of the
same password never compare equal: check with ``verify_password`` (or
``verify_and_update`` at login, which also hands back a replacement hash when
the stored one was made with outdated settings).
"""
from __future__ import annotations

from passlib.context import CryptContext

BCRYPT_ROUNDS = 12

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def verify_and_update(plain_password: str, hashed_password: str) -> tuple[bool, str | None]:
    """Return (matches, new_hash); new_hash is None unless the stored hash should be replaced."""
    return pwd_context.verify_and_update(plain_password, hashed_password)
