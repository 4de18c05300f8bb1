"""Detection of the GNSS target from system properties and SoC information files."""

from __future__ import annotations

import logging
import time
from enum import IntEnum
from pathlib import Path
from typing import Callable, Mapping, Optional, Union

log = logging.getLogger(__name__)


class GnssTarget(IntEnum):
    NONE = 0
    MSM = 1
    GSS = 2
    MDM = 3
    QCA1530 = 4
    AUTO = 5
    UNKNOWN = 6


class SscType(IntEnum):
    NO_SSC = 0
    HAS_SSC = 1


def target_set(gnss: int, ssc: int) -> int:
    """Pack a GNSS type and an SSC flag into a target value."""
    return (int(gnss) << 1) | int(ssc)


def gnss_type(target: int) -> int:
    """Return the GNSS type part of a target value."""
    return int(target) >> 1


TARGET_DEFAULT = target_set(GnssTarget.MSM, SscType.HAS_SSC)
TARGET_MDM = target_set(GnssTarget.MDM, SscType.HAS_SSC)
TARGET_APQ_SA = target_set(GnssTarget.GSS, SscType.NO_SSC)
TARGET_MPQ = target_set(GnssTarget.NONE, SscType.NO_SSC)
TARGET_MSM_NO_SSC = target_set(GnssTarget.MSM, SscType.NO_SSC)
TARGET_QCA1530 = target_set(GnssTarget.QCA1530, SscType.NO_SSC)
TARGET_AUTO = target_set(GnssTarget.AUTO, SscType.NO_SSC)
TARGET_UNKNOWN = target_set(GnssTarget.UNKNOWN, SscType.NO_SSC)

APQ8064_ID_1 = "109"
APQ8064_ID_2 = "153"
MPQ8064_ID_1 = "130"
MSM8930_ID_1 = "142"
MSM8930_ID_2 = "116"
APQ8030_ID_1 = "157"
APQ8074_ID_1 = "184"

LINE_LEN = 100
STR_LIQUID = "Liquid"
STR_SURF = "Surf"
STR_MTP = "MTP"
STR_APQ = "apq"
STR_AUTO = "auto"
QCA1530_DETECT_TIMEOUT = 30
QCA1530_DETECT_PRESENT = "yes"
QCA1530_DETECT_PROGRESS = "detect"
QCA1530_PROPERTY = "persist.qca1530"

HW_PLATFORM = "sys/devices/soc0/hw_platform"
SOC_ID = "sys/devices/soc0/soc_id"
HW_PLATFORM_DEP = "sys/devices/system/soc/soc0/hw_platform"
SOC_ID_DEP = "sys/devices/system/soc/soc0/id"
MDM_DEVICE = "dev/mdm"

PropertySource = Union[Mapping[str, str], Callable[[str], Optional[str]]]


def _matches(line: str, token: str) -> bool:
    """True when ``line`` is ``token`` followed by end of string or a line break."""
    if not line.startswith(token):
        return False
    rest = line[len(token):]
    return rest == "" or rest[0] in "\n\r"


class TargetDetector:
    """Works out which GNSS target the system is.

    ``properties`` is a mapping or a callable returning a property's value
    (or None when unset). SoC files are looked up below ``root``.
    """

    def __init__(
        self,
        properties: Optional[PropertySource] = None,
        root: Union[str, Path] = "/",
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._properties = properties if properties is not None else {}
        self._root = Path(root)
        self._sleep = sleep
        self._target: Optional[int] = None

    def _property(self, name: str, default: str = "") -> str:
        if callable(self._properties):
            value = self._properties(name)
        else:
            value = self._properties.get(name)
        return default if value is None else value

    def _read_a_line(self, relative: str) -> Optional[str]:
        """Read the first line of a file, or None when it cannot be opened."""
        path = self._root / relative
        try:
            with open(path, "r", errors="replace") as handle:
                line = handle.readline(LINE_LEN - 1)
        except OSError as exc:
            log.error("open failed: %s: %s", path, exc)
            return None
        log.debug("cat %s: %s", path, line)
        return line

    def _read_preferred(self, primary: str, fallback: str) -> str:
        chosen = primary if (self._root / primary).exists() else fallback
        return self._read_a_line(chosen) or ""

    def is_qca1530(self) -> bool:
        """Return True when the QCA1530 SoC is configured, waiting out detection."""
        result = False
        for _ in range(QCA1530_DETECT_TIMEOUT):
            value = self._property(QCA1530_PROPERTY)
            log.debug("qca1530: property %s is set to %s", QCA1530_PROPERTY, value)
            if value == QCA1530_DETECT_PRESENT:
                result = True
                break
            if value == QCA1530_DETECT_PROGRESS:
                log.debug("qca1530: SoC detection is in progress.")
                self._sleep(1)
                continue
            break
        log.debug("qca1530: detected=%s", "true" if result else "false")
        return result

    def baseband(self) -> str:
        """Return the ``ro.baseband`` property, or an empty string."""
        return self._property("ro.baseband", "")

    def platform_name(self) -> str:
        """Return the ``ro.board.platform`` property, or an empty string."""
        return self._property("ro.board.platform", "")

    def detect(self) -> Optional[int]:
        """Return the target value, detecting it on first success.

        Returns None when the platform looks like an MDM board but the MDM
        device cannot be read; detection is then retried on the next call.
        """
        if self._target is not None:
            return self._target

        target: Optional[int] = None
        if self.is_qca1530():
            target = TARGET_QCA1530
        else:
            baseband = self.baseband()
            hw_platform = self._read_preferred(HW_PLATFORM, HW_PLATFORM_DEP)
            soc_id = self._read_preferred(SOC_ID, SOC_ID_DEP)

            if baseband.startswith(STR_AUTO):
                target = TARGET_AUTO
            elif baseband.startswith(STR_APQ):
                target = TARGET_MPQ if _matches(soc_id, MPQ8064_ID_1) else TARGET_APQ_SA
            elif any(_matches(hw_platform, s) for s in (STR_LIQUID, STR_SURF, STR_MTP)):
                if self._read_a_line(MDM_DEVICE) is not None:
                    target = TARGET_MDM
            elif _matches(soc_id, MSM8930_ID_1) or _matches(soc_id, MSM8930_ID_2):
                target = TARGET_MSM_NO_SSC
            else:
                target = TARGET_UNKNOWN

        self._target = target
        log.debug("HAL: detect returned %s", target)
        return target