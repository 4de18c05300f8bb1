import re

import pytest

from locutils.nmea import (
    NMEA_SENTENCE_MAX_LENGTH,
    LocationExtended,
    NmeaState,
    SvInfo,
    SvStatus,
    blank_sentences,
    generate_sv,
    put_checksum,
)

CHECKSUM_RE = re.compile(r"\*[0-9A-F]{2}\r\n$")


def collecting_state():
    received = []
    state = NmeaState(nmea_cb=lambda ts, s, n: received.append((ts, s, n)))
    return state, received


def test_checksum_of_single_char():
    assert put_checksum("$A") == "$A*41\r\n"


def test_checksum_cancels_for_repeated_char():
    assert put_checksum("$AA") == "$AA*00\r\n"


def test_checksum_ignores_first_character():
    assert put_checksum("$AB")[3:] == put_checksum("!AB")[3:]


def test_checksum_keeps_sentence_prefix():
    sentence = "$GPGSV,1,1,0,"
    result = put_checksum(sentence)
    assert result.startswith(sentence)
    assert CHECKSUM_RE.search(result)
    assert len(result) == len(sentence) + 5


def test_checksum_empty_raises():
    with pytest.raises(ValueError):
        put_checksum("")


def test_checksum_never_exceeds_buffer():
    result = put_checksum("$" + "X" * 197)
    assert len(result) <= NMEA_SENTENCE_MAX_LENGTH - 1


def test_blank_sentences_prefixes():
    blanks = blank_sentences()
    assert [b.split("*")[0] for b in blanks] == [
        "$GPGSA,A,1,,,,,,,,,,,,,,,",
        "$GPVTG,,T,,M,,N,,K,N",
        "$GPRMC,,V,,,,,,,,,,N",
        "$GPGGA,,,,,,0,,,,,,,,",
    ]
    assert all(CHECKSUM_RE.search(b) for b in blanks)


def test_send_calls_callback_with_length():
    state, received = collecting_state()
    state.send("$A*41\r\n")
    assert len(received) == 1
    ts, sentence, length = received[0]
    assert sentence == "$A*41\r\n"
    assert length == len(sentence)
    assert ts > 0


def test_no_satellites_sends_blank_gsv_and_blank_fix():
    state, received = collecting_state()
    sentences = generate_sv(state, SvStatus())
    assert sentences[0].startswith("$GPGSV,1,1,0,*")
    assert sentences[1].startswith("$GLGSV,1,1,0,*")
    assert sentences[2:] == blank_sentences()
    assert [s for _, s, _ in received] == sentences


def test_gps_satellites_split_in_groups_of_four():
    svs = [SvInfo(prn=p, snr=30.0, elevation=10.0, azimuth=100.0) for p in range(1, 6)]
    state, _ = collecting_state()
    sentences = generate_sv(state, SvStatus(svs, used_in_fix_mask=1))
    gsv = [s for s in sentences if s.startswith("$GPGSV")]
    assert len(gsv) == 2
    assert gsv[0].startswith("$GPGSV,2,1,05,01,10,100,30,02,")
    assert gsv[1].startswith("$GPGSV,2,2,05,05,10,100,30*")


def test_values_are_rounded_and_zero_snr_omitted():
    svs = [SvInfo(prn=7, snr=0.0, elevation=44.6, azimuth=89.5)]
    state, _ = collecting_state()
    sentences = generate_sv(state, SvStatus(svs, used_in_fix_mask=1))
    assert sentences[0].split("*")[0] == "$GPGSV,1,1,01,07,45,090,"


def test_glonass_separated_and_others_dropped():
    svs = [
        SvInfo(prn=3, snr=20.0, elevation=5.0, azimuth=5.0),
        SvInfo(prn=70, snr=25.0, elevation=6.0, azimuth=7.0),
        SvInfo(prn=40, snr=25.0, elevation=6.0, azimuth=7.0),
    ]
    state, _ = collecting_state()
    sentences = generate_sv(state, SvStatus(svs, used_in_fix_mask=4))
    assert len(sentences) == 2
    assert sentences[0].startswith("$GPGSV,1,1,01,03,")
    assert sentences[1].split("*")[0] == "$GLGSV,1,1,01,70,06,007,25"
    assert all(",40," not in s for s in sentences)


def test_used_mask_and_dop_cached():
    state, _ = collecting_state()
    extended = LocationExtended(pdop=1.5, hdop=0.9, vdop=1.2)
    sv_status = SvStatus([SvInfo(prn=1, snr=10.0)], used_in_fix_mask=0b101)
    sentences = generate_sv(state, sv_status, extended)
    assert state.sv_used_mask == 0b101
    assert (state.pdop, state.hdop, state.vdop) == (1.5, 0.9, 1.2)
    assert not any(s.startswith("$GPGGA") for s in sentences)


def test_dop_cleared_without_extended_dop():
    state = NmeaState(pdop=2.0, hdop=2.0, vdop=2.0)
    generate_sv(state, SvStatus([SvInfo(prn=2)], used_in_fix_mask=2), LocationExtended(pdop=1.0))
    assert (state.pdop, state.hdop, state.vdop) == (0.0, 0.0, 0.0)
    assert state.sv_used_mask == 2


def test_zero_mask_leaves_cache_untouched():
    state = NmeaState(sv_used_mask=9, pdop=3.0)
    generate_sv(state, SvStatus([SvInfo(prn=2)]))
    assert state.sv_used_mask == 9
    assert state.pdop == 3.0


def test_every_generated_sentence_has_checksum():
    svs = [SvInfo(prn=p, snr=float(p), elevation=1.0, azimuth=2.0) for p in (1, 2, 65, 66, 67, 68, 69)]
    state, _ = collecting_state()
    sentences = generate_sv(state, SvStatus(svs))
    assert all(CHECKSUM_RE.search(s) for s in sentences)
    assert sum(s.startswith("$GLGSV") for s in sentences) == 2


def test_location_extended_flags():
    extended = LocationExtended(pdop=1.0, hdop=1.0, vdop=1.0, magnetic_deviation=-2.0)
    assert extended.has_dop is True
    assert extended.has_mag_dev is True
    assert extended.has_altitude_mean_sea_level is False
    assert SvStatus([SvInfo(prn=1), SvInfo(prn=2)]).num_svs == 2