"""NMEA sentences for a position report: $GPGSA, $GPVTG, $GPRMC and $GPGGA."""

from __future__ import annotations

import logging
import math
import struct
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from locutils.nmea import (
    NMEA_SENTENCE_MAX_LENGTH,
    LocationExtended,
    NmeaState,
    blank_sentences,
    put_checksum,
)

log = logging.getLogger(__name__)

MAX_GSA_SVS = 12
KNOTS_PER_METRE_PER_SECOND = 3600.0 / 1852.0
KMH_PER_METRE_PER_SECOND = 3.6


class PositionMode(Enum):
    """How the fix is computed; only a standalone fix counts as autonomous."""

    STANDALONE = "standalone"
    MS_BASED = "ms_based"
    MS_ASSISTED = "ms_assisted"


@dataclass
class Location:
    """A position fix. ``timestamp`` is UTC in milliseconds; None means not reported."""

    timestamp: int = 0
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    altitude: Optional[float] = None
    speed: Optional[float] = None
    bearing: Optional[float] = None

    @property
    def has_lat_long(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class _Sentence:
    """Builds one sentence within the fixed maximum length."""

    def __init__(self) -> None:
        self._parts: List[str] = []
        self._remaining = NMEA_SENTENCE_MAX_LENGTH

    def add(self, text: str) -> None:
        if len(text) >= self._remaining:
            log.error("NMEA Error in string formatting")
            raise ValueError("NMEA Error in string formatting")
        self._parts.append(text)
        self._remaining -= len(text)

    def finish(self, last: str = "") -> str:
        """Append the last field, cut to fit, and add the checksum."""
        self._parts.append(last[: max(self._remaining - 1, 0)])
        return put_checksum("".join(self._parts))


def _as_float32(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _as_uint8(value: float) -> int:
    return int(value) & 0xFF


def _lat_lon_fields(latitude: float, longitude: float) -> str:
    if latitude > 0:
        lat_hemisphere = "N"
    else:
        lat_hemisphere = "S"
        latitude = -latitude
    if longitude < 0:
        lon_hemisphere = "W"
        longitude = -longitude
    else:
        lon_hemisphere = "E"
    lat_minutes = math.fmod(latitude * 60.0, 60.0)
    lon_minutes = math.fmod(longitude * 60.0, 60.0)
    return (
        f"{_as_uint8(math.floor(latitude)):02d}{lat_minutes:09.6f},{lat_hemisphere},"
        f"{_as_uint8(math.floor(longitude)):03d}{lon_minutes:09.6f},{lon_hemisphere},"
    )


def _mode_char(location: Location, mode: PositionMode) -> str:
    if not location.has_lat_long:
        return "N"
    return "A" if mode is PositionMode.STANDALONE else "D"


def _utc(timestamp_ms: int) -> time.struct_time:
    ms = int(timestamp_ms)
    seconds = abs(ms) // 1000
    if ms < 0:
        seconds = -seconds
    try:
        return time.gmtime(seconds)
    except (OverflowError, OSError, ValueError):
        log.error("gmtime failed")
        raise ValueError("gmtime failed") from None


def _used_svs(mask: int) -> List[int]:
    mask &= 0xFFFFFFFF
    return [bit + 1 for bit in range(32) if (mask >> bit) & 1]


def _state_has_dop(state: NmeaState) -> bool:
    return state.pdop > 0 and state.hdop > 0 and state.vdop > 0


def _gsa(state: NmeaState, used: List[int], extended: LocationExtended) -> str:
    if not used:
        fix_type = "1"
    elif len(used) <= 3:
        fix_type = "2"
    else:
        fix_type = "3"
    sentence = _Sentence()
    sentence.add(f"$GPGSA,A,{fix_type},")
    for index in range(MAX_GSA_SVS):
        sentence.add(f"{used[index]:02d}," if index < len(used) else ",")
    if extended.has_dop:
        dop = f"{extended.pdop:.1f},{extended.hdop:.1f},{extended.vdop:.1f}"
    elif _state_has_dop(state):
        dop = f"{state.pdop:.1f},{state.hdop:.1f},{state.vdop:.1f}"
    else:
        dop = ",,"
    return sentence.finish(dop)


def _vtg(location: Location, mode: PositionMode) -> str:
    sentence = _Sentence()
    if location.bearing is not None:
        # The magnetic track field carries the true bearing.
        mag_track = _as_float32(location.bearing)
        sentence.add(f"$GPVTG,{location.bearing:.1f},T,{mag_track:.1f},M,")
    else:
        sentence.add("$GPVTG,,T,,M,")
    if location.speed is not None:
        knots = _as_float32(location.speed * KNOTS_PER_METRE_PER_SECOND)
        kmh = _as_float32(location.speed * KMH_PER_METRE_PER_SECOND)
        sentence.add(f"{knots:.1f},N,{kmh:.1f},K,")
    else:
        sentence.add(",N,,K,")
    return sentence.finish(_mode_char(location, mode))


def _rmc(
    location: Location, extended: LocationExtended, mode: PositionMode, utc: time.struct_time
) -> str:
    sentence = _Sentence()
    sentence.add(f"$GPRMC,{utc.tm_hour:02d}{utc.tm_min:02d}{utc.tm_sec:02d},A,")
    if location.has_lat_long:
        sentence.add(_lat_lon_fields(location.latitude, location.longitude))
    else:
        sentence.add(",,,,")
    if location.speed is not None:
        knots = _as_float32(location.speed * KNOTS_PER_METRE_PER_SECOND)
        sentence.add(f"{knots:.1f},")
    else:
        sentence.add(",")
    sentence.add(f"{location.bearing:.1f}," if location.bearing is not None else ",")
    year = int(math.fmod(utc.tm_year - 1900, 100))
    sentence.add(f"{utc.tm_mday:02d}{utc.tm_mon:02d}{year:02d},")
    if extended.has_mag_dev:
        variation = _as_float32(extended.magnetic_deviation)
        if variation < 0.0:
            direction = "W"
            variation = -variation
        else:
            direction = "E"
        sentence.add(f"{variation:.1f},{direction},")
    else:
        sentence.add(",,")
    return sentence.finish(_mode_char(location, mode))


def _gga(
    state: NmeaState,
    location: Location,
    extended: LocationExtended,
    mode: PositionMode,
    utc: time.struct_time,
    used_count: int,
) -> str:
    sentence = _Sentence()
    sentence.add(f"$GPGGA,{utc.tm_hour:02d}{utc.tm_min:02d}{utc.tm_sec:02d},")
    if location.has_lat_long:
        sentence.add(_lat_lon_fields(location.latitude, location.longitude))
    else:
        sentence.add(",,,,")

    if not location.has_lat_long:
        quality = "0"
    elif mode is PositionMode.STANDALONE:
        quality = "1"
    else:
        quality = "2"

    if extended.has_dop:
        sentence.add(f"{quality},{used_count:02d},{extended.hdop:.1f},")
    elif _state_has_dop(state):
        sentence.add(f"{quality},{used_count:02d},{state.hdop:.1f},")
    else:
        sentence.add(f"{quality},{used_count:02d},,")

    if extended.has_altitude_mean_sea_level:
        sentence.add(f"{extended.altitude_mean_sea_level:.1f},M,")
    else:
        sentence.add(",,")

    if location.altitude is not None and extended.has_altitude_mean_sea_level:
        separation = location.altitude - extended.altitude_mean_sea_level
        return sentence.finish(f"{separation:.1f},M,,")
    return sentence.finish(",,,")


def generate_pos(
    state: NmeaState,
    location: Location,
    extended: Optional[LocationExtended] = None,
    generate_nmea: bool = True,
    position_mode: PositionMode = PositionMode.STANDALONE,
) -> List[str]:
    """Send the GSA, VTG, RMC and GGA sentences for a position report and return them.

    With ``generate_nmea`` false the blank sentences are sent instead. The
    satellites-used mask cached in ``state`` is consumed, and the cached DOP
    values are cleared once the report is done. Raises ValueError when the
    timestamp cannot be converted or a field does not fit in a sentence;
    sentences finished before that have already been sent.
    """
    extended = extended if extended is not None else LocationExtended()
    utc = _utc(location.timestamp)
    sent: List[str] = []

    def emit(sentence: str) -> None:
        state.send(sentence)
        sent.append(sentence)

    if generate_nmea:
        used = _used_svs(state.sv_used_mask)
        state.sv_used_mask = 0
        emit(_gsa(state, used, extended))
        emit(_vtg(location, position_mode))
        emit(_rmc(location, extended, position_mode, utc))
        emit(_gga(state, location, extended, position_mode, utc, len(used)))
    else:
        for sentence in blank_sentences():
            emit(sentence)

    state.clear_dop()
    return sent