"""
Constants for wgconf.

Defines key sizes, AmneziaWG obfuscation limits and the field names
used in the WireGuard config syntax.
"""

# Key material (in bytes)
KEY_SIZE = 32          # X25519 scalars, public points and preshared keys
KEY_BASE64_SIZE = 44   # base64 with padding of KEY_SIZE bytes

# Port ranges
MAX_PORT = 65535
MAX_KEEPALIVE = 65535  # seconds, wg(8) stores it in a u16

# AmneziaWG hard limits (validation)
JC_MIN = 1
JC_MAX = 128
JMAX_LIMIT = 1280
S_LIMIT = 1280         # S1 and S2 must stay below this
S1_S2_OFFSET = 56      # S1 + 56 must not equal S2

# AmneziaWG recommended ranges (random generation), inclusive
RANDOM_JC_RANGE = (3, 10)
RANDOM_JMIN_RANGE = (40, 60)
RANDOM_JMAX_SPREAD = 10    # Jmax is drawn from [Jmin + 10, 90]
RANDOM_JMAX_UPPER = 90
RANDOM_S1_RANGE = (15, 150)
RANDOM_S2_RANGE = (1, 150)
RANDOM_H_RANGE = (10, 2_147_483_640)

# Config sections
SECTION_INTERFACE = "[Interface]"
SECTION_PEER = "[Peer]"

# Comment prefix used for the interface's name label
NAME_COMMENT = "# Name"

# Obfuscation fields, in the order they are validated and rendered
OBFUSCATION_FIELDS = ("jc", "jmin", "jmax", "s1", "s2", "h1", "h2", "h3", "h4")
OBFUSCATION_LABELS = {
    "jc": "Jc",
    "jmin": "Jmin",
    "jmax": "Jmax",
    "s1": "S1",
    "s2": "S2",
    "h1": "H1",
    "h2": "H2",
    "h3": "H3",
    "h4": "H4",
}
