"""
Fluent builders for Interface and Peer.

    server = (
        InterfaceBuilder()
        .address(as_ipnet("10.0.0.1/24"))
        .listen_port(51820)
        .add_peer(PeerBuilder().add_allowed_ip("10.0.0.2/32").build())
        .build()
    )
"""
from wgconf.models import Interface, Peer, parse_network
from wgconf.keys import PrivateKey


def as_ipnet(text):
    """Shorthand for parsing a CIDR literal such as "10.0.0.1/24"."""
    return parse_network(text)


class InterfaceBuilder:
    def __init__(self):
        self._address = None
        self._listen_port = None
        self._private_key = None
        self._dns = []
        self._endpoint = None
        self._obfuscation_settings = None
        self._peers = []

    def address(self, address):
        self._address = parse_network(address)
        return self

    def listen_port(self, listen_port):
        self._listen_port = listen_port
        return self

    def private_key(self, private_key):
        self._private_key = private_key
        return self

    def set_dns(self, dns):
        self._dns = list(dns)
        return self

    def add_dns(self, dns):
        self._dns.append(dns)
        return self

    def endpoint(self, endpoint):
        self._endpoint = endpoint
        return self

    def obfuscation_settings(self, settings):
        self._obfuscation_settings = settings
        return self

    def set_peers(self, peers):
        self._peers = list(peers)
        return self

    def add_peer(self, peer):
        self._peers.append(peer)
        return self

    def build(self):
        """
        Build the Interface.

        Raises:
            ValueError: If no address was set
            InvalidObfuscationSetting: If attached settings don't validate
        """
        if self._address is None:
            raise ValueError("Interface needs an address")

        return Interface(
            address=self._address,
            listen_port=self._listen_port,
            private_key=self._private_key if self._private_key is not None else PrivateKey.random(),
            dns=list(self._dns),
            endpoint=self._endpoint,
            obfuscation_settings=self._obfuscation_settings,
            peers=list(self._peers),
        )


class PeerBuilder:
    def __init__(self):
        self._endpoint = None
        self._allowed_ips = []
        self._key = None
        self._preshared_key = None
        self._persistent_keepalive = None
        self._obfuscation_settings = None

    def endpoint(self, endpoint):
        self._endpoint = endpoint
        return self

    def set_allowed_ips(self, allowed_ips):
        self._allowed_ips = [parse_network(ip) for ip in allowed_ips]
        return self

    def add_allowed_ip(self, ip):
        self._allowed_ips.append(parse_network(ip))
        return self

    # private_key() and public_key() overwrite each other, last call wins
    def private_key(self, private_key):
        self._key = private_key
        return self

    def public_key(self, public_key):
        self._key = public_key
        return self

    def preshared_key(self, preshared_key):
        self._preshared_key = preshared_key
        return self

    def persistent_keepalive(self, seconds):
        self._persistent_keepalive = seconds
        return self

    def obfuscation_settings(self, settings):
        self._obfuscation_settings = settings
        return self

    def build(self):
        """Build the Peer; a random private key is used if none was set."""
        return Peer(
            allowed_ips=tuple(self._allowed_ips),
            key=self._key if self._key is not None else PrivateKey.random(),
            endpoint=self._endpoint,
            preshared_key=self._preshared_key,
            persistent_keepalive=self._persistent_keepalive,
            obfuscation_settings=self._obfuscation_settings,
        )
