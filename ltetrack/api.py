"""Identity-revealing uplink messages and how they are reported."""

from __future__ import annotations

import enum
from typing import Iterable

MAX_M_TMSI = 0xFFFFFFFF


class IdentityType(enum.IntEnum):
    """Kind of subscriber or device identity found in a message."""

    RANDOM_VALUE = enum.auto()
    TMSI = enum.auto()
    CONTENTION_RESOLUTION = enum.auto()
    IMSI = enum.auto()
    IMEI = enum.auto()
    IMEISV = enum.auto()


class MessageType(enum.IntEnum):
    """Signalling message an identity was taken from."""

    CONNECTION_REQUEST = 0
    CONNECTION_SETUP = 1
    ATTACH_REQUEST = 2
    IDENTITY_RESPONSE = 3
    UE_CAPABILITY = 4


_ID_NAMES = {
    IdentityType.RANDOM_VALUE: "RandomValue",
    IdentityType.TMSI: "TMSI",
    IdentityType.CONTENTION_RESOLUTION: "Contention Resolution",
    IdentityType.IMSI: "IMSI",
    IdentityType.IMEI: "IMEI",
    IdentityType.IMEISV: "IMEISV",
}

_MESSAGE_NAMES = {
    MessageType.CONNECTION_REQUEST: "RRC Connection Request",
    MessageType.CONNECTION_SETUP: "RRC Connection Setup",
    MessageType.ATTACH_REQUEST: "Attach Request",
    MessageType.IDENTITY_RESPONSE: "Identity Response",
    MessageType.UE_CAPABILITY: "UECapability",
}


def id_name(identity: IdentityType | int | None) -> str:
    """Display name of an identity type; "-" when there is none or it is unknown."""
    if identity is None:
        return "-"
    try:
        return _ID_NAMES[IdentityType(identity)]
    except ValueError:
        return "-"


def message_name(message: MessageType | int | None) -> str:
    """Display name of a message type; "-" when there is none or it is unknown."""
    if message is None:
        return "-"
    try:
        return _MESSAGE_NAMES[MessageType(message)]
    except ValueError:
        return "-"


def format_api_line(
    tti: int,
    rnti: int,
    identity: IdentityType | int | None,
    value: str,
    message: MessageType | int | None,
) -> str:
    """One report line: frame-subframe, identity type, value, RNTI and message."""
    return (
        str(tti // 10).ljust(4)
        + "-"
        + str(tti % 10).ljust(5)
        + id_name(identity).ljust(26)
        + str(value).ljust(17)
        + str(rnti).ljust(11)
        + message_name(message).ljust(25)
    )


def random_value_hex(bits: str) -> str:
    """Hex text of the random value of an RRC connection request.

    ``bits`` is the value as a string of '0' and '1'. Every group of four bits
    (the last one possibly shorter) becomes one hex digit, and the first two
    digits are dropped.
    """
    digits = "".join(
        format(int(bits[i:i + 4], 2), "x") for i in range(0, len(bits), 4)
    )
    if len(digits) < 2:
        raise ValueError(f"random value too short: {bits!r}")
    return digits[2:]


def tmsi_hex(m_tmsi: int) -> str:
    """Lower-case hex text of an M-TMSI, without leading zeros."""
    if not 0 <= m_tmsi <= MAX_M_TMSI:
        raise ValueError(f"M-TMSI out of range: {m_tmsi}")
    return format(m_tmsi, "x")


def digits_string(digits: Iterable[int]) -> str:
    """Concatenate the decimal digits of an IMSI, IMEI or IMEISV."""
    return "".join(str(int(d)) for d in digits)