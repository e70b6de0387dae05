"""Two-factor backup code generation."""

import json
from typing import List

from ..utils.crypto import generate_random_string, symmetric_encrypt

BACKUP_CODE_COUNT = 10
BACKUP_CODE_LENGTH = 10


def generate_backup_code_list(count: int = BACKUP_CODE_COUNT) -> List[str]:
    """Generate plaintext backup codes formatted as ``xxxxx-xxxxx``."""
    codes = [
        generate_random_string(BACKUP_CODE_LENGTH, 'a-z', '0-9', 'A-Z')
        for _ in range(count)
    ]
    return [f'{code[:5]}-{code[5:]}' for code in codes]


def generate_backup_codes(secret: str) -> str:
    """Generate backup codes and encrypt them with the TOTP secret.

    Args:
        secret: TOTP secret, used as the encryption key

    Returns:
        Encrypted JSON list of codes, stored as-is on the two-factor record
    """
    data = json.dumps(generate_backup_code_list(), separators=(',', ':'))
    return symmetric_encrypt(key=secret, data=data)
