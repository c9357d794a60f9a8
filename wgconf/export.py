"""
Config export for wgconf.

Turns Interface / Peer / ObfuscationSettings values into WireGuard's
`Key = Value` config text. Output is deterministic and every line ends
with a newline.

Layout:
┌───────────────────────────────┐
│ [Interface]                   │
│ # Name = <endpoint>     (opt) │
│ Address = <cidr>              │
│ ListenPort = <port>     (opt) │
│ PrivateKey = <base64>         │
│ DNS = a,b               (opt) │
├───────────────────────────────┤
│ Jc = .. .. H4 = ..      (opt) │
├───────────────────────────────┤
│ [Peer]               (n times)│
│ Endpoint = <host:port>  (opt) │
│ AllowedIPs = a,b              │
│ PublicKey = <base64>          │
│ PresharedKey = <base64> (opt) │
│ PersistentKeepalive = n (opt) │
└───────────────────────────────┘
Sections are separated by one blank line.

Nothing here re-validates: whatever the model holds is written out.
"""
from wgconf.constants import NAME_COMMENT, SECTION_INTERFACE, SECTION_PEER


def _line(key, value):
    return f"{key} = {value}"


def interface_lines(interface):
    """
    Build the config lines for an interface, peers included.

    Args:
        interface (Interface): the local node

    Returns:
        list[str]: lines without trailing newlines; "" marks a blank line
    """
    lines = [SECTION_INTERFACE]

    if interface.endpoint is not None:
        lines.append(_line(NAME_COMMENT, interface.endpoint))

    lines.append(_line("Address", interface.address))

    if interface.listen_port is not None:
        lines.append(_line("ListenPort", interface.listen_port))

    lines.append(_line("PrivateKey", interface.private_key))

    if interface.dns:
        lines.append(_line("DNS", ",".join(interface.dns)))

    if interface.obfuscation_settings is not None:
        lines.append("")
        lines.extend(interface.obfuscation_settings.lines())

    for peer in interface.peers:
        lines.append("")
        lines.extend(peer_lines(peer))

    return lines


def peer_lines(peer):
    """
    Build the config lines for one [Peer] section.

    A peer holding a private key is written with the derived public key;
    private key material never ends up in a peer section.
    """
    lines = [SECTION_PEER]

    if peer.endpoint is not None:
        lines.append(_line("Endpoint", peer.endpoint))

    lines.append(_line("AllowedIPs", ",".join(str(ip) for ip in peer.allowed_ips)))
    lines.append(_line("PublicKey", peer.public_key))

    if peer.preshared_key is not None:
        lines.append(_line("PresharedKey", peer.preshared_key))

    if peer.persistent_keepalive is not None:
        lines.append(_line("PersistentKeepalive", peer.persistent_keepalive))

    return lines


def render_interface(interface):
    """Render an interface (and its peers) to config text."""
    return _join(interface_lines(interface))


def render_peer(peer):
    """Render a single [Peer] section to config text."""
    return _join(peer_lines(peer))


def render_obfuscation(settings):
    """Render only the nine obfuscation lines."""
    return _join(settings.lines())


def _join(lines):
    return "".join(line + "\n" for line in lines)
