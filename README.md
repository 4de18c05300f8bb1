# locutils

Helpers for a GNSS location service. The main part builds NMEA 0183
sentences from satellite and position reports. The package also detects the
SoC target, provides a small FIFO list, and has a few device and string
utilities. It needs only the standard library.

## Installation

```
pip install .
```

## Modules

- `locutils.nmea`
  - `put_checksum(sentence)` appends `*HH\r\n`. `HH` is the XOR of every character after the leading `$`.
  - `blank_sentences()` returns the `$GPGSA`, `$GPVTG`, `$GPRMC` and `$GPGGA` sentences used when there is no fix.
  - `generate_sv(state, sv_status, extended)` builds `$GPGSV` and `$GLGSV` sentences. It takes four satellites per sentence. GPS PRNs are 1–32 and GLONASS PRNs are 65–96; satellites outside both ranges are left out.
  - The data classes are `SvInfo`, `SvStatus` and `LocationExtended`.
  - `NmeaState` holds the optional callback `nmea_cb(time_ms, sentence, length)`. It also caches the used-in-fix mask and the DOP values between reports.
- `locutils.nmea_position`
  - `generate_pos(state, location, extended, generate_nmea, position_mode)` builds `$GPGSA`, `$GPVTG`, `$GPRMC` and `$GPGGA` from a `Location`.
  - The cached satellite mask is used up by this call, and the cached DOP values are cleared afterwards.
  - `PositionMode.STANDALONE` marks the fix as autonomous (`A` / quality `1`). The other modes give differential (`D` / quality `2`).
  - It raises `ValueError` when the timestamp cannot be converted or a field does not fit in 200 characters.
- `locutils.target`
  - `TargetDetector(properties, root, sleep)` works out the target value. It reads the system properties (a mapping or a callable) and the SoC files under `root`.
  - The result is cached after the first successful detection.
  - Also provides `GnssTarget`, `SscType`, `target_set` and `gnss_type`.
- `locutils.linked_list`
  - `LinkedList` adds at the head and removes from the tail, so items come out in FIFO order.
  - Methods are `add`, `remove`, `is_empty`, `flush` and `search`. `flush` calls each element's deallocator.
  - `remove` and `search` on an empty list raise `EmptyListError`, which is a subclass of `LinkedListError`.
- `locutils.misc_utils`
  - `split_string(raw, max_substrings, delimiter)` splits on the delimiter.
  - `trim_space(text)` strips whitespace at both ends. A string that is all whitespace is returned unchanged.
- `locutils.platform_time`
  - `system_time()` returns wall-clock time in microseconds.
  - `elapsed_millis_since_boot()` returns wall-clock time in milliseconds.
- `locutils.device`
  - `read_wlan_address(path)` reads a `XX:XX:XX:XX:XX:XX` address as six bytes. It raises `OSError` when the file cannot be opened and `ValueError` when the contents are invalid.
  - `sysfs_write(path, value)` writes to an existing file and returns `False` on failure.
  - `set_interactive(on, touchkey_path, touchscreen_path)` writes `"1"` or `"0"` to both input-device files.

## Example

```python
from locutils.linked_list import LinkedList
from locutils.nmea import NmeaState, SvInfo, SvStatus, generate_sv

received = []
state = NmeaState(nmea_cb=lambda ms, sentence, length: received.append(sentence))
sentences = generate_sv(state, SvStatus([SvInfo(prn=5, snr=30.0, elevation=45.0, azimuth=120.0)]))
assert sentences[0].startswith("$GPGSV,1,1,01,05,45,120,30*")
assert received == sentences

items = LinkedList()
items.add("first")
items.add("second")
assert items.remove() == "first"
```

## What it does not do

This package has no thread-safe message queue. It has no configuration-file
reader, no timers, no logging setup beyond the standard `logging` module, and
no command-line program. It produces NMEA text, but it does not talk to a GNSS
receiver or a modem. Position and satellite reports must be supplied by the
caller.

## Running the tests

```
pip install .[test]
pytest
```