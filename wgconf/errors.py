"""
Errors raised by wgconf.

Every failure is an ordinary, caller-correctable condition. Nothing here
is meant to abort the process.
"""


class WireguardError(Exception):
    """Base class for all wgconf errors."""
    pass


class InvalidKey(WireguardError, ValueError):
    """Raised when key text or bytes can't be turned into a key."""
    kind = "key"

    def __init__(self, detail=None):
        message = f"invalid {self.kind}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InvalidPrivateKey(InvalidKey):
    kind = "private key"


class InvalidPublicKey(InvalidKey):
    kind = "public key"


class InvalidPresharedKey(InvalidKey):
    kind = "preshared key"


class NoPrivateKeyProvided(WireguardError):
    """Raised when a peer holding only a public key is turned into an interface."""

    def __init__(self):
        super().__init__("no private key provided")


class NoAssignedIP(WireguardError):
    """Raised when none of a peer's allowed IPs fits the interface network."""

    def __init__(self, network=None):
        message = "no assigned ip"
        if network is not None:
            message = f"{message} within {network}"
        super().__init__(message)


class InvalidObfuscationSetting(WireguardError, ValueError):
    """
    Raised when an AmneziaWG obfuscation check fails.

    Attributes:
        field (str): which check failed ("Jc", "Jmin", "Jmax", "S1",
            "S2" or "H1/H2/H3/H4")
    """

    def __init__(self, field):
        self.field = field
        super().__init__(f"invalid amnezia setting: {field}")

    def __eq__(self, other):
        if not isinstance(other, InvalidObfuscationSetting):
            return NotImplemented
        return self.field == other.field

    def __hash__(self):
        return hash(("InvalidObfuscationSetting", self.field))
