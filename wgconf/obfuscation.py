"""
AmneziaWG obfuscation values.

Jc/Jmin/Jmax control junk packets sent before the handshake, S1/S2 pad
the handshake init and response, H1..H4 replace the message type headers.
See https://github.com/amnezia-vpn/amneziawg-linux-kernel-module#configuration
"""
import logging
import secrets
from dataclasses import dataclass

from wgconf.constants import (
    JC_MAX,
    JC_MIN,
    JMAX_LIMIT,
    OBFUSCATION_FIELDS,
    OBFUSCATION_LABELS,
    RANDOM_H_RANGE,
    RANDOM_JC_RANGE,
    RANDOM_JMAX_SPREAD,
    RANDOM_JMAX_UPPER,
    RANDOM_JMIN_RANGE,
    RANDOM_S1_RANGE,
    RANDOM_S2_RANGE,
    S1_S2_OFFSET,
    S_LIMIT,
)
from wgconf.errors import InvalidObfuscationSetting

logger = logging.getLogger(__name__)

_rng = secrets.SystemRandom()


@dataclass
class ObfuscationSettings:
    """
    The nine AmneziaWG values.

    Building the dataclass directly does not check anything; use
    `create()` or call `validate()` before relying on the values.
    """
    jc: int    # 1 <= Jc <= 128, recommended 3..10
    jmin: int  # Jmin < Jmax, recommended 50
    jmax: int  # Jmin < Jmax <= 1280, recommended 1000
    s1: int    # S1 < 1280 and S1 + 56 != S2, recommended 15..150
    s2: int    # S2 < 1280, recommended 15..150
    h1: int    # H1..H4 unique among each other
    h2: int
    h3: int
    h4: int

    @classmethod
    def create(cls, jc, jmin, jmax, s1, s2, h1, h2, h3, h4):
        """
        Build settings and validate them.

        Raises:
            InvalidObfuscationSetting: On the first failing check
        """
        settings = cls(jc, jmin, jmax, s1, s2, h1, h2, h3, h4)
        settings.validate()
        return settings

    @classmethod
    def random(cls):
        """
        Draw settings from the recommended ranges.

        H1..H4 are sampled without replacement, so the result always
        passes `validate()`.
        """
        jc = _randint(RANDOM_JC_RANGE)
        jmin = _randint(RANDOM_JMIN_RANGE)
        jmax = _rng.randint(jmin + RANDOM_JMAX_SPREAD, RANDOM_JMAX_UPPER)
        s1 = _randint(RANDOM_S1_RANGE)

        s2 = s1 + S1_S2_OFFSET
        while s1 + S1_S2_OFFSET == s2:
            s2 = _randint(RANDOM_S2_RANGE)

        low, high = RANDOM_H_RANGE
        h1, h2, h3, h4 = _rng.sample(range(low, high + 1), 4)

        return cls(jc, jmin, jmax, s1, s2, h1, h2, h3, h4)

    def validate(self):
        validate_settings(self)

    def is_valid(self):
        try:
            validate_settings(self)
        except InvalidObfuscationSetting:
            return False
        return True

    def lines(self):
        """Config lines (`Jc = 4`, ...) in the fixed field order."""
        return [
            f"{OBFUSCATION_LABELS[name]} = {getattr(self, name)}"
            for name in OBFUSCATION_FIELDS
        ]

    def __str__(self):
        return "".join(line + "\n" for line in self.lines())


def _randint(bounds):
    low, high = bounds
    return _rng.randint(low, high)


def validate_settings(settings):
    """
    Check AmneziaWG values in a fixed order.

    Only the first failing check is reported:
    Jc, Jmin, Jmax, S1, S2, then H1/H2/H3/H4.

    Args:
        settings (ObfuscationSettings): values to check

    Raises:
        InvalidObfuscationSetting: With the name of the failed check
    """
    s = settings

    if not (JC_MIN <= s.jc <= JC_MAX):
        raise InvalidObfuscationSetting("Jc")

    if not (0 <= s.jmin < s.jmax):
        raise InvalidObfuscationSetting("Jmin")

    if not (s.jmax <= JMAX_LIMIT):
        raise InvalidObfuscationSetting("Jmax")

    if not (0 <= s.s1 < S_LIMIT and s.s1 + S1_S2_OFFSET != s.s2):
        raise InvalidObfuscationSetting("S1")

    if not (0 <= s.s2 < S_LIMIT):
        raise InvalidObfuscationSetting("S2")

    headers = (s.h1, s.h2, s.h3, s.h4)
    if len(set(headers)) != len(headers) or min(headers) < 0:
        raise InvalidObfuscationSetting("H1/H2/H3/H4")

    logger.debug("Obfuscation settings passed validation")
