"""
Interface and Peer models.

An Interface is the local node: its tunnel address, private key, DNS and
the peers it trusts. A Peer is how a remote node is described from the
other side: where to reach it, which networks it may use and its key.

The two convert into each other:

    server.to_peer()          -> the [Peer] a client needs for the server
    client_peer.to_interface(server)
                              -> the full config the client runs itself
"""
import copy
import dataclasses
import ipaddress
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from wgconf import export
from wgconf.constants import MAX_KEEPALIVE, MAX_PORT
from wgconf.errors import NoAssignedIP, NoPrivateKeyProvided
from wgconf.keys import PresharedKey, PrivateKey, PublicKey
from wgconf.obfuscation import ObfuscationSettings

logger = logging.getLogger(__name__)

KeyRef = Union[PrivateKey, PublicKey]


def parse_network(value):
    """
    Turn a CIDR literal into an IPv4Interface.

    Host bits are kept, so "10.0.0.1/24" stays "10.0.0.1/24" while its
    `.network` is 10.0.0.0/24.

    Raises:
        ValueError: If the value isn't an IPv4 address or CIDR
    """
    if isinstance(value, ipaddress.IPv4Interface):
        return value
    if isinstance(value, ipaddress.IPv4Network):
        return ipaddress.IPv4Interface(value.with_prefixlen)
    if isinstance(value, ipaddress.IPv4Address):
        return ipaddress.IPv4Interface(value)
    if isinstance(value, str):
        try:
            return ipaddress.IPv4Interface(value.strip())
        except ValueError as e:
            raise ValueError(f"Not an IPv4 network: {value!r}") from e
    raise ValueError(f"Not an IPv4 network: {value!r}")


def contains(outer, inner):
    """True if every address of `inner` lies inside `outer`'s network."""
    return parse_network(inner).network.subnet_of(parse_network(outer).network)


def _check_port(name, value, upper):
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an int, got {type(value).__name__}")
    if not (0 <= value <= upper):
        raise ValueError(f"{name} must be 0-{upper}, got {value}")


def _check_obfuscation(settings):
    if settings is None:
        return
    if not isinstance(settings, ObfuscationSettings):
        raise TypeError(f"Expected ObfuscationSettings, got {type(settings).__name__}")
    settings.validate()


def _attach_unchecked(model, settings):
    # conversions carry settings over as-is, validation happened when they were attached
    object.__setattr__(model, "obfuscation_settings", copy.copy(settings))
    return model


def _as_network_tuple(value):
    if isinstance(value, (str, ipaddress.IPv4Interface, ipaddress.IPv4Network, ipaddress.IPv4Address)):
        value = (value,)
    return tuple(parse_network(ip) for ip in value)


@dataclass(frozen=True)
class Peer:
    """
    A remote endpoint.

    `key` is either a PrivateKey (the peer can later be turned into its
    own Interface) or a PublicKey (only a [Peer] section can be written).
    """
    __hash__ = None

    allowed_ips: Tuple[ipaddress.IPv4Interface, ...] = ()
    key: KeyRef = field(default_factory=PrivateKey.random)
    endpoint: Optional[str] = None
    preshared_key: Optional[PresharedKey] = None
    persistent_keepalive: Optional[int] = None
    obfuscation_settings: Optional[ObfuscationSettings] = None

    def __post_init__(self):
        object.__setattr__(self, "allowed_ips", _as_network_tuple(self.allowed_ips))
        if not isinstance(self.key, (PrivateKey, PublicKey)):
            raise TypeError(f"Peer key must be PrivateKey or PublicKey, got {type(self.key).__name__}")
        if self.preshared_key is not None and not isinstance(self.preshared_key, PresharedKey):
            raise TypeError(f"Expected PresharedKey, got {type(self.preshared_key).__name__}")
        _check_port("persistent_keepalive", self.persistent_keepalive, MAX_KEEPALIVE)
        _check_obfuscation(self.obfuscation_settings)

    @property
    def has_private_key(self):
        return isinstance(self.key, PrivateKey)

    @property
    def public_key(self):
        """The peer's public key, derived if the peer holds a private key."""
        if isinstance(self.key, PrivateKey):
            return self.key.public_key()
        elif isinstance(self.key, PublicKey):
            return self.key
        raise TypeError(f"Unexpected key type {type(self.key).__name__}")

    def evolve(self, **changes):
        """Return a copy with some fields replaced."""
        return dataclasses.replace(self, **changes)

    def to_interface(self, interface):
        """
        Build the Interface this peer would run, given the one it talks to.

        The first allowed IP that sits inside `interface.address`'s network
        becomes the new address. DNS comes from `interface`, obfuscation
        settings from the peer, and the only peer of the result is
        `interface.to_peer()`.

        Args:
            interface (Interface): the node this peer connects to

        Returns:
            Interface: standalone config for this peer

        Raises:
            NoPrivateKeyProvided: If the peer only has a public key
            NoAssignedIP: If no allowed IP fits the interface network
        """
        if isinstance(self.key, PublicKey):
            raise NoPrivateKeyProvided()
        elif isinstance(self.key, PrivateKey):
            private_key = self.key
        else:
            raise TypeError(f"Unexpected key type {type(self.key).__name__}")

        address = next(
            (ip for ip in self.allowed_ips if contains(interface.address, ip)),
            None,
        )
        if address is None:
            raise NoAssignedIP(interface.address.network)

        logger.debug("Assigned %s to peer within %s", address, interface.address.network)

        client = Interface(
            address=address,
            listen_port=None,
            private_key=copy.copy(private_key),
            dns=list(interface.dns),
            endpoint=None,
            peers=[interface.to_peer()],
        )
        return _attach_unchecked(client, self.obfuscation_settings)

    def config(self):
        return export.render_peer(self)

    def __str__(self):
        return self.config()


@dataclass
class Interface:
    """
    The local node.

    Only `address` is required; a fresh private key is generated when
    none is given. `endpoint` is a label written as a `# Name` comment.
    """
    address: ipaddress.IPv4Interface
    listen_port: Optional[int] = None
    private_key: PrivateKey = field(default_factory=PrivateKey.random)
    dns: List[str] = field(default_factory=list)
    endpoint: Optional[str] = None
    obfuscation_settings: Optional[ObfuscationSettings] = None
    peers: List[Peer] = field(default_factory=list)

    def __post_init__(self):
        self.address = parse_network(self.address)
        if not isinstance(self.private_key, PrivateKey):
            raise TypeError(f"Expected PrivateKey, got {type(self.private_key).__name__}")
        _check_port("listen_port", self.listen_port, MAX_PORT)
        self.dns = [str(server) for server in self.dns]
        self.peers = list(self.peers)
        for peer in self.peers:
            if not isinstance(peer, Peer):
                raise TypeError(f"Expected Peer, got {type(peer).__name__}")
        _check_obfuscation(self.obfuscation_settings)

    def add_peer(self, peer):
        if not isinstance(peer, Peer):
            raise TypeError(f"Expected Peer, got {type(peer).__name__}")
        self.peers.append(peer)
        return self

    def set_obfuscation_settings(self, settings):
        """
        Attach (or clear, with None) obfuscation settings.

        Raises:
            InvalidObfuscationSetting: If the settings don't validate
        """
        _check_obfuscation(settings)
        self.obfuscation_settings = settings

    def copy(self):
        """Independent copy, peers and keys included."""
        return copy.deepcopy(self)

    def to_peer(self):
        """
        Build the [Peer] a remote node uses to reach this interface.

        The whole declared network is allowed, the endpoint is copied and
        the key is this interface's private key. Preshared key and
        keepalive are never carried over.
        """
        peer = Peer(
            allowed_ips=(self.address,),
            key=copy.copy(self.private_key),
            endpoint=self.endpoint,
            preshared_key=None,
            persistent_keepalive=None,
        )
        return _attach_unchecked(peer, self.obfuscation_settings)

    def config(self):
        return export.render_interface(self)

    def __str__(self):
        return self.config()
