"""
Password based string encryption used to protect generated private keys.

The key is a single SHA-256 pass over the password and AES runs in ECB mode
with PKCS#7 padding, so there is no IV and the same password and plaintext
always give the same ciphertext. That makes the output reproducible as a
memorable pass-key scheme, but it leaks equality of plaintexts and offers no
protection against brute forcing the password.
"""

import base64
import binascii

from Crypto.Cipher import AES
from Crypto.Hash import SHA256
from Crypto.Util.Padding import pad, unpad

from .errors import DecryptionError


def derive_key(password: str) -> bytes:
    """32-byte AES key from a password (no salt, no iterations)."""
    return SHA256.new(password.encode("utf-8")).digest()


def encrypt_string(plaintext: str, password: str) -> str:
    cipher = AES.new(derive_key(password), AES.MODE_ECB)
    encrypted = cipher.encrypt(pad(plaintext.encode("utf-8"), AES.block_size))
    return base64.b64encode(encrypted).decode("ascii")


def decrypt_string(ciphertext_b64: str, password: str) -> str:
    """Reverse encrypt_string. Any failure is reported as DecryptionError."""
    try:
        raw = base64.b64decode(ciphertext_b64.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecryptionError(f"Input is not valid base64: {e}") from e

    if not raw or len(raw) % AES.block_size:
        raise DecryptionError(
            f"Ciphertext length {len(raw)} is not a positive multiple of {AES.block_size}"
        )

    cipher = AES.new(derive_key(password), AES.MODE_ECB)
    try:
        decrypted = unpad(cipher.decrypt(raw), AES.block_size)
    except ValueError as e:
        raise DecryptionError("Wrong key or corrupted ciphertext") from e

    try:
        return decrypted.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecryptionError("Wrong key or corrupted ciphertext") from e
