"""Password-based key derivation and AES-256-CBC encryption of wallet secrets.

Keys are derived with PBKDF2-HMAC-SHA256 from the wallet password and a
per-record random salt. Secrets are encrypted with AES-256-CBC under a
per-record random IV and PKCS#7 padding. Salt and IV are stored hex-encoded
next to the base64 ciphertext; neither is secret.
"""

import base64
import binascii
import os
from dataclasses import dataclass

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ensemble_wallet.exceptions import InvalidPasswordError

PBKDF2_ITERATIONS = 10_000
KEY_LENGTH = 32
SALT_LENGTH = 32
IV_LENGTH = 16


@dataclass(frozen=True)
class SealedSecret:
    """Ciphertext plus the public parameters needed to open it."""

    encrypted_data: str
    salt: str
    iv: str


def generate_salt() -> str:
    """Return a fresh random salt, hex-encoded."""
    return os.urandom(SALT_LENGTH).hex()


def generate_iv() -> str:
    """Return a fresh random IV, hex-encoded."""
    return os.urandom(IV_LENGTH).hex()


def derive_key(password: str, salt: str) -> bytes:
    """Derive a 256-bit symmetric key from a password and hex salt."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=bytes.fromhex(salt),
        iterations=PBKDF2_ITERATIONS,
    )
    return kdf.derive(password.encode("utf-8"))


def encrypt(plaintext: str, key: bytes, iv: str) -> str:
    """Encrypt a UTF-8 string, returning base64 ciphertext."""
    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(bytes.fromhex(iv))).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return base64.b64encode(ciphertext).decode("ascii")


def parse_ciphertext(ciphertext: str) -> bytes:
    """Decode base64 ciphertext and check it is a whole number of AES blocks.

    Raises:
        ValueError: If the ciphertext is not well-formed.
    """
    try:
        raw = base64.b64decode(ciphertext, validate=True)
    except binascii.Error as e:
        raise ValueError(f"ciphertext is not valid base64: {e}") from e
    if not raw or len(raw) % (algorithms.AES.block_size // 8) != 0:
        raise ValueError("ciphertext is not block aligned")
    return raw


def parse_hex(value: str, length: int, label: str) -> bytes:
    """Decode a hex parameter of an exact byte length.

    Raises:
        ValueError: If the value is not hex or has the wrong length.
    """
    try:
        raw = bytes.fromhex(value)
    except (ValueError, TypeError) as e:
        raise ValueError(f"{label} is not valid hex") from e
    if len(raw) != length:
        raise ValueError(f"{label} must be {length} bytes, got {len(raw)}")
    return raw


def decrypt(ciphertext: str, key: bytes, iv: str) -> str:
    """Decrypt base64 ciphertext back to the original string.

    Raises:
        ValueError: If the ciphertext or IV is malformed.
        InvalidPasswordError: If the padding or recovered text is not
            well-formed, which is how a wrong key shows up.
    """
    raw = parse_ciphertext(ciphertext)
    iv_bytes = parse_hex(iv, IV_LENGTH, "iv")

    try:
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv_bytes)).decryptor()
        padded = decryptor.update(raw) + decryptor.finalize()

        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        data = unpadder.update(padded) + unpadder.finalize()
        result = data.decode("utf-8")
    except (ValueError, UnicodeDecodeError) as e:
        raise InvalidPasswordError() from e

    if not result:
        raise InvalidPasswordError()
    return result


def seal(secret: str, password: str) -> SealedSecret:
    """Encrypt a secret under a password with fresh salt and IV."""
    salt = generate_salt()
    iv = generate_iv()
    key = derive_key(password, salt)
    return SealedSecret(encrypted_data=encrypt(secret, key, iv), salt=salt, iv=iv)


def unseal(sealed: SealedSecret, password: str) -> str:
    """Decrypt a sealed secret with a password.

    Raises:
        ValueError: If the salt, IV or ciphertext is malformed.
        InvalidPasswordError: If the password does not open the secret.
    """
    parse_hex(sealed.salt, SALT_LENGTH, "salt")
    key = derive_key(password, sealed.salt)
    return decrypt(sealed.encrypted_data, key, sealed.iv)
