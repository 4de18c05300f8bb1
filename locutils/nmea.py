"""NMEA sentence helpers: checksums, blank reports and satellites-in-view sentences."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from functools import reduce
from typing import Callable, Iterable, List, Optional

log = logging.getLogger(__name__)

NMEA_SENTENCE_MAX_LENGTH = 200

GPS_PRN_START = 1
GPS_PRN_END = 32
GLONASS_PRN_START = 65
GLONASS_PRN_END = 96

SVS_PER_GSV_SENTENCE = 4

BLANK_GSA = "$GPGSA,A,1,,,,,,,,,,,,,,,"
BLANK_VTG = "$GPVTG,,T,,M,,N,,K,N"
BLANK_RMC = "$GPRMC,,V,,,,,,,,,,N"
BLANK_GGA = "$GPGGA,,,,,,0,,,,,,,,"
BLANK_GPGSV = "$GPGSV,1,1,0,"
BLANK_GLGSV = "$GLGSV,1,1,0,"

NmeaCallback = Callable[[int, str, int], None]


@dataclass
class SvInfo:
    """One satellite in view."""

    prn: int
    snr: float = 0.0
    elevation: float = 0.0
    azimuth: float = 0.0


@dataclass
class SvStatus:
    """Satellites in view and the mask of those used in the fix (bit 0 is PRN 1)."""

    sv_list: List[SvInfo] = field(default_factory=list)
    used_in_fix_mask: int = 0

    @property
    def num_svs(self) -> int:
        return len(self.sv_list)


@dataclass
class LocationExtended:
    """Optional extra fix data; a value of None means it was not reported."""

    pdop: Optional[float] = None
    hdop: Optional[float] = None
    vdop: Optional[float] = None
    magnetic_deviation: Optional[float] = None
    altitude_mean_sea_level: Optional[float] = None

    @property
    def has_dop(self) -> bool:
        return None not in (self.pdop, self.hdop, self.vdop)

    @property
    def has_mag_dev(self) -> bool:
        return self.magnetic_deviation is not None

    @property
    def has_altitude_mean_sea_level(self) -> bool:
        return self.altitude_mean_sea_level is not None


@dataclass
class NmeaState:
    """State kept between reports, and the callback that receives each sentence.

    The satellites used in the fix and the DOP values seen in a satellite
    report are cached here for the next position report.
    """

    nmea_cb: Optional[NmeaCallback] = None
    sv_used_mask: int = 0
    pdop: float = 0.0
    hdop: float = 0.0
    vdop: float = 0.0

    def send(self, sentence: str) -> None:
        """Hand ``sentence`` to the callback with the current time in milliseconds."""
        now = time.time_ns() // 1_000_000
        log.debug("nmea_cb %s", sentence)
        if self.nmea_cb is not None:
            self.nmea_cb(now, sentence, len(sentence))
        log.debug("NMEA <%s", sentence)

    def clear_dop(self) -> None:
        self.pdop = self.hdop = self.vdop = 0.0


def put_checksum(sentence: str) -> str:
    """Append ``*HH\\r\\n`` to ``sentence``, HH being the XOR of all characters after the first.

    The suffix is cut short if the sentence would not fit in
    ``NMEA_SENTENCE_MAX_LENGTH`` characters including a terminator.
    """
    if not sentence:
        raise ValueError("sentence must not be empty")
    body = sentence[1:]
    checksum = reduce(lambda acc, byte: acc ^ byte, body.encode("latin-1", "replace"), 0)
    suffix = f"*{checksum:02X}\r\n"
    room = NMEA_SENTENCE_MAX_LENGTH - len(body) - 2
    return sentence + suffix[: max(room, 0)]


def blank_sentences() -> List[str]:
    """Return the GSA, VTG, RMC and GGA sentences reported when there is no fix."""
    return [put_checksum(s) for s in (BLANK_GSA, BLANK_VTG, BLANK_RMC, BLANK_GGA)]


def _round(value: float) -> int:
    return int(0.5 + value)


def _gsv_sentences(talker: str, svs: List[SvInfo], blank: str) -> List[str]:
    if not svs:
        return [put_checksum(blank)]
    count = len(svs)
    sentence_count = math.ceil(count / SVS_PER_GSV_SENTENCE)
    sentences = []
    for number in range(1, sentence_count + 1):
        start = (number - 1) * SVS_PER_GSV_SENTENCE
        parts = [f"${talker}GSV,{sentence_count},{number},{count:02d}"]
        for sv in svs[start:start + SVS_PER_GSV_SENTENCE]:
            parts.append(f",{sv.prn:02d},{_round(sv.elevation):02d},{_round(sv.azimuth):03d},")
            if sv.snr > 0:
                parts.append(f"{_round(sv.snr):02d}")
        sentences.append(put_checksum("".join(parts)))
    return sentences


def _in_range(svs: Iterable[SvInfo], first: int, last: int) -> List[SvInfo]:
    return [sv for sv in svs if first <= sv.prn <= last]


def generate_sv(
    state: NmeaState, sv_status: SvStatus, extended: Optional[LocationExtended] = None
) -> List[str]:
    """Send the $GPGSV and $GLGSV sentences for a satellite report and return them.

    Satellites that are neither GPS nor GLONASS are left out. When no
    satellite is used in the fix the blank position sentences follow;
    otherwise the used mask and DOP values are cached in ``state``.
    """
    extended = extended if extended is not None else LocationExtended()
    gps = _in_range(sv_status.sv_list, GPS_PRN_START, GPS_PRN_END)
    glonass = _in_range(sv_status.sv_list, GLONASS_PRN_START, GLONASS_PRN_END)

    sentences = _gsv_sentences("GP", gps, BLANK_GPGSV)
    sentences += _gsv_sentences("GL", glonass, BLANK_GLGSV)

    if sv_status.used_in_fix_mask == 0:
        sentences += blank_sentences()
    else:
        state.sv_used_mask = sv_status.used_in_fix_mask
        if extended.has_dop:
            state.pdop = extended.pdop
            state.hdop = extended.hdop
            state.vdop = extended.vdop
        else:
            state.clear_dop()

    for sentence in sentences:
        state.send(sentence)
    return sentences