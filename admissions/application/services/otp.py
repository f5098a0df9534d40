# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""One-time code generation for password resets."""

from __future__ import annotations

import secrets

from admissions.domain.users.entities import RESET_CODE_MAX, RESET_CODE_MIN
from admissions.domain.users.repositories import CodeGenerator


class SecretsCodeGenerator(CodeGenerator):
    """Uniform six-digit codes from the OS CSPRNG."""

    def generate(self) -> str:
        return str(RESET_CODE_MIN + secrets.randbelow(RESET_CODE_MAX - RESET_CODE_MIN + 1))
