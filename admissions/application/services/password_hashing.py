# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Salted one-way password hashing."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from admissions.domain.users.repositories import PasswordHasher

DEFAULT_METHOD = "scrypt"


class WerkzeugPasswordHasher(PasswordHasher):
    """Hashes with werkzeug; the method and salt are encoded in the digest itself.

    Digests produced with an older ``method`` keep verifying after the default
    changes, so stored users never need a migration.
    """

    def __init__(self, method: str = DEFAULT_METHOD, salt_length: int = 16) -> None:
        self._method = method
        self._salt_length = salt_length

    def hash(self, password: str) -> str:
        return generate_password_hash(password, method=self._method, salt_length=self._salt_length)

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed:
            return False
        return check_password_hash(hashed, password)
