"""Random string and symmetric encryption helpers.

The output of :func:`symmetric_encrypt` is readable by better-auth's
``symmetricDecrypt``: the key is the SHA-256 digest of the secret, the cipher
is XChaCha20-Poly1305 and the 24-byte nonce is prepended to the ciphertext
before hex encoding.
"""

import hashlib
import secrets
import string

from nacl.bindings import (
    crypto_aead_xchacha20poly1305_ietf_encrypt,
    crypto_aead_xchacha20poly1305_ietf_NPUBBYTES,
)

ALPHABETS = {
    'a-z': string.ascii_lowercase,
    'A-Z': string.ascii_uppercase,
    '0-9': string.digits,
}


def generate_random_string(length: int, *alphabets: str) -> str:
    """Generate a cryptographically random string.

    Args:
        length: Number of characters
        *alphabets: Alphabet names from ``ALPHABETS``; all of them when omitted

    Returns:
        Random string drawn from the combined alphabets
    """
    if not alphabets:
        alphabets = tuple(ALPHABETS)
    try:
        charset = ''.join(ALPHABETS[name] for name in alphabets)
    except KeyError as e:
        raise ValueError(f'Unknown alphabet: {e.args[0]}')
    return ''.join(secrets.choice(charset) for _ in range(length))


def symmetric_encrypt(key: str, data: str) -> str:
    """Encrypt ``data`` with a key derived from ``key``.

    Returns:
        Hex string of nonce followed by ciphertext and tag
    """
    key_bytes = hashlib.sha256(key.encode('utf-8')).digest()
    nonce = secrets.token_bytes(crypto_aead_xchacha20poly1305_ietf_NPUBBYTES)
    ciphertext = crypto_aead_xchacha20poly1305_ietf_encrypt(
        data.encode('utf-8'), None, nonce, key_bytes
    )
    return (nonce + ciphertext).hex()
