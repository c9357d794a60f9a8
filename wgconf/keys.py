"""
WireGuard key types.

PrivateKey and PresharedKey keep their bytes in a bytearray that is
zeroed on wipe(), on leaving a `with` block and when the object is
garbage collected. PublicKey is plain public data.
"""
from wgconf import crypto
from wgconf.constants import KEY_SIZE
from wgconf.errors import InvalidPresharedKey, InvalidPrivateKey, InvalidPublicKey


class _SecretKey:
    """Shared behaviour of the two secret key types."""

    error = InvalidPrivateKey

    __slots__ = ("_secret",)

    def __init__(self, raw):
        if not isinstance(raw, (bytes, bytearray, memoryview)):
            raise self.error(f"expected bytes, got {type(raw).__name__}")
        if len(raw) != KEY_SIZE:
            raise self.error(f"expected {KEY_SIZE} bytes, got {len(raw)}")
        self._secret = bytearray(raw)

    @classmethod
    def from_base64(cls, text):
        try:
            raw = crypto.decode_key(text)
        except ValueError as e:
            raise cls.error(str(e)) from e
        return cls(raw)

    def to_bytes(self):
        return bytes(self._secret)

    def wipe(self):
        """Zero the key material. The key is unusable afterwards."""
        crypto.wipe(self._secret)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.wipe()
        return False

    def __del__(self):
        secret = getattr(self, "_secret", None)
        if secret is not None:
            crypto.wipe(secret)

    def __copy__(self):
        return type(self)(self._secret)

    def __deepcopy__(self, memo):
        return type(self)(self._secret)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return crypto.keys_equal(self._secret, other._secret)

    def __str__(self):
        return crypto.encode_key(self._secret)

    def __repr__(self):
        # only enough to tell keys apart in logs
        return f"{type(self).__name__}({str(self)[:4]}...)"


class PrivateKey(_SecretKey):
    """X25519 private key."""

    error = InvalidPrivateKey

    __slots__ = ()

    @classmethod
    def random(cls):
        """Generate a fresh clamped private key."""
        return cls(crypto.generate_private_key())

    def public_key(self):
        """Derive the matching public key."""
        return PublicKey(crypto.derive_public_key(self._secret))


class PresharedKey(_SecretKey):
    """Symmetric 32-byte key mixed into the handshake."""

    error = InvalidPresharedKey

    __slots__ = ()

    @classmethod
    def random(cls):
        return cls(crypto.generate_psk())


class PublicKey:
    """X25519 public key, either derived or received verbatim."""

    __slots__ = ("_key",)

    def __init__(self, raw):
        if not isinstance(raw, (bytes, bytearray, memoryview)):
            raise InvalidPublicKey(f"expected bytes, got {type(raw).__name__}")
        if len(raw) != KEY_SIZE:
            raise InvalidPublicKey(f"expected {KEY_SIZE} bytes, got {len(raw)}")
        self._key = bytes(raw)

    @classmethod
    def from_base64(cls, text):
        try:
            raw = crypto.decode_key(text)
        except ValueError as e:
            raise InvalidPublicKey(str(e)) from e
        return cls(raw)

    @classmethod
    def from_private_key(cls, private_key):
        return private_key.public_key()

    def to_bytes(self):
        return self._key

    def __eq__(self, other):
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self._key == other._key

    def __hash__(self):
        return hash(self._key)

    def __str__(self):
        return crypto.encode_key(self._key)

    def __repr__(self):
        return f"PublicKey({str(self)})"
