"""Tests for Interface/Peer models and conversion between them."""
import dataclasses
import ipaddress

import pytest

from wgconf.models import Interface, Peer, contains, parse_network
from wgconf.keys import PrivateKey, PresharedKey
from wgconf.obfuscation import ObfuscationSettings
from wgconf.errors import NoAssignedIP, NoPrivateKeyProvided, InvalidObfuscationSetting


def make_server():
    return Interface(
        address="10.0.0.1/24",
        listen_port=51820,
        dns=["8.8.8.8", "8.8.4.4"],
        endpoint="vpn.example.com",
    )


def test_parse_network_keeps_host_bits():
    net = parse_network("10.0.0.1/24")
    assert str(net) == "10.0.0.1/24"
    assert net.network == ipaddress.IPv4Network("10.0.0.0/24")

def test_parse_network_rejects_garbage():
    with pytest.raises(ValueError):
        parse_network("10.0.0.300/24")
    with pytest.raises(ValueError):
        parse_network("fd00::1/64")

def test_contains():
    assert contains("10.0.0.1/24", "10.0.0.2/32")
    assert contains("10.0.0.1/24", "10.0.0.2/24")
    assert contains("0.0.0.0/0", "10.0.0.1/24")
    assert not contains("10.0.0.1/24", "10.0.1.2/32")
    assert not contains("10.0.0.1/24", "10.0.0.0/16")

def test_interface_defaults():
    """Only the address is required."""
    interface = Interface(address="10.0.0.1/24")
    assert interface.listen_port is None
    assert isinstance(interface.private_key, PrivateKey)
    assert interface.dns == []
    assert interface.peers == []
    assert interface.endpoint is None
    assert interface.obfuscation_settings is None

def test_interface_rejects_bad_port():
    with pytest.raises(ValueError):
        Interface(address="10.0.0.1/24", listen_port=70000)

def test_interface_rejects_invalid_obfuscation():
    bad = ObfuscationSettings(999, 40, 70, 20, 30, 1, 2, 3, 4)
    with pytest.raises(InvalidObfuscationSetting):
        Interface(address="10.0.0.1/24", obfuscation_settings=bad)
    interface = Interface(address="10.0.0.1/24")
    with pytest.raises(InvalidObfuscationSetting):
        interface.set_obfuscation_settings(bad)
    assert interface.obfuscation_settings is None

def test_interface_copy_is_deep():
    server = make_server()
    server.add_peer(Peer(allowed_ips=["10.0.0.2/32"]))
    clone = server.copy()
    clone.add_peer(Peer(allowed_ips=["10.0.0.3/32"]))
    clone.dns.append("1.1.1.1")
    assert len(server.peers) == 1
    assert server.dns == ["8.8.8.8", "8.8.4.4"]
    assert clone.private_key == server.private_key

def test_peer_is_immutable():
    peer = Peer(allowed_ips=["10.0.0.2/32"])
    with pytest.raises(dataclasses.FrozenInstanceError):
        peer.endpoint = "example.com:51820"
    changed = peer.evolve(endpoint="example.com:51820")
    assert changed.endpoint == "example.com:51820"
    assert peer.endpoint is None

def test_peer_keeps_allowed_ip_order():
    peer = Peer(allowed_ips=["0.0.0.0/0", "10.0.0.2/24"])
    assert [str(ip) for ip in peer.allowed_ips] == ["0.0.0.0/0", "10.0.0.2/24"]

def test_peer_public_key():
    private = PrivateKey.random()
    assert Peer(key=private).public_key == private.public_key()
    public = private.public_key()
    assert Peer(key=public).public_key == public
    assert Peer(key=private).has_private_key
    assert not Peer(key=public).has_private_key

def test_peer_rejects_non_key():
    with pytest.raises(TypeError):
        Peer(key="dwdtCnMYpX08FsFyUbJmRd9ML4frwJkqsXf7pR25LCo=")

def test_interface_to_peer():
    """The peer view allows the whole network and keeps the private key."""
    server = make_server()
    peer = server.to_peer()

    assert peer.allowed_ips == (parse_network("10.0.0.1/24"),)
    assert str(peer.allowed_ips[0]) == "10.0.0.1/24"
    assert peer.endpoint == "vpn.example.com"
    assert isinstance(peer.key, PrivateKey)
    assert peer.key == server.private_key
    assert peer.preshared_key is None
    assert peer.persistent_keepalive is None
    assert peer.obfuscation_settings is None

def test_interface_to_peer_carries_obfuscation():
    settings = ObfuscationSettings.random()
    server = Interface(address="10.0.0.1/24", obfuscation_settings=settings)
    assert server.to_peer().obfuscation_settings == settings

def test_peer_to_interface():
    server = make_server()
    client_key = PrivateKey.random()
    peer = Peer(
        allowed_ips=["10.0.0.2/32"],
        key=client_key,
        preshared_key=PresharedKey.random(),
        persistent_keepalive=25,
    )
    server.add_peer(peer)

    client = peer.to_interface(server)

    assert str(client.address) == "10.0.0.2/32"
    assert client.listen_port is None
    assert client.private_key == client_key
    assert client.dns == ["8.8.8.8", "8.8.4.4"]
    assert client.endpoint is None
    assert client.obfuscation_settings is None
    assert len(client.peers) == 1
    assert client.peers[0] == server.to_peer()

def test_peer_to_interface_first_match_wins():
    """The first allowed IP inside the interface network is used."""
    server = Interface(address="10.0.0.1/24")
    peer = Peer(allowed_ips=["0.0.0.0/0", "10.0.0.2/24"])
    client = peer.to_interface(server)
    assert str(client.address) == "10.0.0.2/24"

def test_peer_to_interface_skips_default_route():
    """A /0 entry is wider than the interface network, so it never matches."""
    server = Interface(address="10.0.0.1/24")
    peer = Peer(allowed_ips=["0.0.0.0/0", "10.0.0.5/32", "10.0.0.6/32"])
    assert str(peer.to_interface(server).address) == "10.0.0.5/32"
    with pytest.raises(NoAssignedIP):
        Peer(allowed_ips=["0.0.0.0/0"]).to_interface(server)

def test_peer_to_interface_skips_outside_networks():
    server = Interface(address="10.0.0.1/24")
    peer = Peer(allowed_ips=["192.168.1.0/24", "10.0.0.7/32", "10.0.0.8/32"])
    assert str(peer.to_interface(server).address) == "10.0.0.7/32"

def test_peer_to_interface_uses_peer_obfuscation():
    peer_settings = ObfuscationSettings.random()
    server = Interface(address="10.0.0.1/24", obfuscation_settings=ObfuscationSettings.random())
    peer = Peer(allowed_ips=["10.0.0.2/32"], obfuscation_settings=peer_settings)
    client = peer.to_interface(server)
    assert client.obfuscation_settings == peer_settings
    assert client.peers[0].obfuscation_settings == server.obfuscation_settings

def test_peer_to_interface_requires_private_key():
    server = make_server()
    peer = Peer(allowed_ips=["10.0.0.2/32"], key=PrivateKey.random().public_key())
    with pytest.raises(NoPrivateKeyProvided):
        peer.to_interface(server)

def test_peer_to_interface_requires_assigned_ip():
    server = make_server()
    peer = Peer(allowed_ips=["192.168.0.2/32", "10.1.0.0/16"])
    with pytest.raises(NoAssignedIP):
        peer.to_interface(server)

def test_peer_to_interface_with_no_allowed_ips():
    with pytest.raises(NoAssignedIP):
        Peer().to_interface(make_server())

def test_to_peer_keeps_unvalidated_settings():
    """Settings broken by direct assignment are carried over, not re-checked."""
    server = Interface(address="10.0.0.1/24")
    server.obfuscation_settings = ObfuscationSettings(999, 1, 0, 0, 0, 5, 5, 5, 5)
    peer = server.to_peer()
    assert peer.obfuscation_settings == server.obfuscation_settings
    assert peer.obfuscation_settings is not server.obfuscation_settings

def test_to_interface_keeps_unvalidated_settings():
    settings = ObfuscationSettings.random()
    peer = Peer(allowed_ips=["10.0.0.2/32"], obfuscation_settings=settings)
    settings.jc = 999
    server = Interface(address="10.0.0.1/24")
    server.obfuscation_settings = ObfuscationSettings(999, 1, 0, 0, 0, 5, 5, 5, 5)

    client = peer.to_interface(server)

    assert client.obfuscation_settings.jc == 999
    assert client.peers[0].obfuscation_settings.jc == 999

def test_peer_is_unhashable():
    """Peers compare by value but can't be hashed, with or without settings."""
    with pytest.raises(TypeError):
        hash(Peer(allowed_ips=["10.0.0.2/32"]))
    with pytest.raises(TypeError):
        hash(Peer(obfuscation_settings=ObfuscationSettings.random()))

def test_secret_keys_are_unhashable():
    with pytest.raises(TypeError):
        hash(PrivateKey.random())
    with pytest.raises(TypeError):
        hash(PresharedKey.random())
    public = PrivateKey.random().public_key()
    assert hash(public) == hash(public)

def test_peer_accepts_single_allowed_ip():
    """A bare CIDR string is one network, not a sequence of characters."""
    peer = Peer(allowed_ips="10.0.0.2/32")
    assert [str(ip) for ip in peer.allowed_ips] == ["10.0.0.2/32"]
    assert Peer(allowed_ips=parse_network("10.0.0.3/32")).allowed_ips == (parse_network("10.0.0.3/32"),)
