"""
Core key functions for wgconf.
Uses PyNaCl (libsodium) for secure random byte generation and
cryptography for the X25519 base-point multiplication.

libsodium's randombytes is process-global and safe to call from any
thread.
"""
import base64
import binascii

from nacl.utils import random
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives import constant_time
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey

from wgconf.constants import KEY_SIZE


def generate_private_key():
    """
    Generate a clamped X25519 private key.

    This does the same thing as `wg genkey`: 32 random bytes with the
    low three bits cleared, the top bit cleared and the second-highest
    bit set.

    Returns:
        bytes: 32-byte scalar

    Example:
        >>> key = generate_private_key()
        >>> len(key)
        32
        >>> key[0] & 7
        0
    """
    scalar = bytearray(random(KEY_SIZE))
    scalar[0] &= 248
    scalar[31] &= 127
    scalar[31] |= 64
    key = bytes(scalar)
    wipe(scalar)
    return key


def derive_public_key(private_key):
    """
    Derive the X25519 public key for a private key.

    Pure function: the same private key always gives the same public key.

    Args:
        private_key (bytes): 32-byte scalar

    Returns:
        bytes: 32-byte public key

    Raises:
        ValueError: If the private key has wrong length
    """
    if len(private_key) != KEY_SIZE:
        raise ValueError(f"Private key must be {KEY_SIZE} bytes, got {len(private_key)}")

    secret = X25519PrivateKey.from_private_bytes(bytes(private_key))
    return secret.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw
    )


def generate_psk():
    """
    Generate a cryptographically secure pre-shared key.

    Returns:
        bytes: 32 random bytes
    """
    return random(KEY_SIZE)


def encode_key(raw):
    """Encode 32 raw key bytes as standard base64 with padding."""
    if len(raw) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(raw)}")
    return base64.b64encode(bytes(raw)).decode("ascii")


def decode_key(text):
    """
    Decode a base64 key into its 32 raw bytes.

    Surrounding whitespace is ignored, anything else that isn't strict
    base64 is rejected.

    Args:
        text (str): base64 text, e.g. as printed by `wg genkey`

    Returns:
        bytes: 32 raw bytes

    Raises:
        ValueError: If the text isn't base64 or doesn't decode to 32 bytes
    """
    if isinstance(text, bytes):
        text = text.decode("ascii", errors="replace")
    if not isinstance(text, str):
        raise ValueError(f"Key text must be str, got {type(text).__name__}")

    try:
        raw = base64.b64decode(text.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Malformed base64: {e}") from e

    if len(raw) != KEY_SIZE:
        raise ValueError(f"Key must decode to {KEY_SIZE} bytes, got {len(raw)}")

    return raw


def keys_equal(a, b):
    """Compare two raw keys in constant time."""
    return constant_time.bytes_eq(bytes(a), bytes(b))


def wipe(buffer):
    """Overwrite a mutable secret buffer with zeros."""
    for i in range(len(buffer)):
        buffer[i] = 0
