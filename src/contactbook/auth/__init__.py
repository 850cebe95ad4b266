# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- Password hashing/verification (argon2id, ``salt:key`` format)
- Account registration and login against the database
- Signed session cookies (itsdangerous)
"""
