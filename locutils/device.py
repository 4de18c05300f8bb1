"""Device helpers: reading the WLAN MAC address and toggling input devices."""

from __future__ import annotations

import logging
import os
import re
from typing import Union

log = logging.getLogger(__name__)

MAC_INFO_FILE = "/efs/wifi/.mac.info"
TK_POWER = "/sys/class/input/input1/enabled"
TS_POWER = "/sys/class/input/input2/enabled"

PathLike = Union[str, "os.PathLike[str]"]

_OCTET = r"\s*([0-9A-Fa-f]{1,2})"
_MAC_RE = re.compile(":".join([_OCTET] * 6))


def read_wlan_address(path: PathLike = MAC_INFO_FILE) -> bytes:
    """Read a ``XX:XX:XX:XX:XX:XX`` MAC address from the start of ``path``.

    Raises OSError when the file cannot be opened and ValueError when its
    contents are not a valid address.
    """
    try:
        with open(path, "r", errors="replace") as handle:
            content = handle.read()
    except OSError:
        log.error("failed to open %s", path)
        raise
    match = _MAC_RE.match(content)
    if match is None:
        log.error("%s: file contents are not valid", path)
        raise ValueError(f"{path}: file contents are not valid")
    return bytes(int(octet, 16) for octet in match.groups())


def sysfs_write(path: PathLike, value: str) -> bool:
    """Write ``value`` to an existing file; log and return False on failure."""
    try:
        fd = os.open(path, os.O_WRONLY)
    except OSError as exc:
        log.error("Error opening %s: %s", path, exc.strerror)
        return False
    try:
        with os.fdopen(fd, "w") as handle:
            handle.write(value)
    except OSError as exc:
        log.error("Error writing to %s: %s", path, exc.strerror)
        return False
    return True


def set_interactive(
    on: bool,
    touchkey_path: PathLike = TK_POWER,
    touchscreen_path: PathLike = TS_POWER,
) -> bool:
    """Enable or disable the touchkeys and touchscreen; True if both writes worked."""
    log.debug("%s input devices", "enabling" if on else "disabling")
    value = "1" if on else "0"
    keys_ok = sysfs_write(touchkey_path, value)
    screen_ok = sysfs_write(touchscreen_path, value)
    return keys_ok and screen_ok