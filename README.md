# ltetrack

Bookkeeping for passive LTE traffic analysis, in plain Python with no
third-party dependencies. It keeps per-RNTI statistics, learns which
modulation or MCS table each UE uses, holds uplink grants until their PUSCH
is due, and formats the results as text tables, CSV and report lines.

## Modules

- `ltetrack.types` – enums for uplink modulation (`ULModulation`), downlink
  MCS table (`DLTable`), HARQ transmission type (`TransmissionType`), MIMO
  check outcome (`MimoResult`) and CQI report type (`CqiType`); UE-specific
  configuration (`UCIOffsets`, `UESpecConfig`, `default_ue_config()`, which
  gives UCI offsets ack=10, cqi=8, ri=11 and subband higher-layer CQI); a
  codeword record `TransportBlock`; and the per-RNTI statistics records
  `ULTrackingEntry` and `DLTrackingEntry`. `merge` adds one entry's counters
  and per-MCS counts into another. For uplink entries it also appends the
  other entry's mean SNR and mean timing advance as one sample each.
- `ltetrack.ul_tracking.ULTracker` – the uplink tracking database.
  - `find` returns an RNTI's known modulation and refreshes its timestamp.
    For an RNTI it does not hold, it returns `UNKNOWN`, or `FULL_BUFFER` once
    `max_size` entries are held.
  - `update_rnti`, `update_statistic` (success, SNR, TA) and
    `update_ue_config` / `get_ue_config` / `set_default_ue_config` update the
    entries and their configuration.
  - `update_database` drops entries that have been idle longer than
    `interval` seconds, entries with no activity, and entries that look like
    false detections. The genuine ones are archived in `all_database`.
  - `merge_all_database` archives every entry still held.
  - `increase_nof_api_msg` counts identity-revealing messages.
  - The clock can be injected for testing.
- `ltetrack.dl_tracking.DLTracker` – the same for the downlink MCS table,
  with these additions:
  - `update_rar_time_crnti` marks an RNTI as just assigned by a random access
    response. Its table then stays unknown until more than `rar_threshold`
    messages with a DCI format above 1A have been seen.
  - `update_statistic` counts new transmissions, retransmissions, successes,
    MIMO errors and per-MCS successes from a list of `TransportBlock`s.
    With `harq_mode` on, it uses MCS limits (28 for the 64QAM table, 27 for
    the 256QAM table) to tell new transmissions from retransmissions.
  - `update_database` forgets the learned table of an RNTI that stays but
    decodes fewer than 15 % of its messages.
- `ltetrack.report` – text tables of both databases
  (`format_ul_database`, `format_all_ul_database`, `format_dl_database`,
  `format_all_dl_database`) with ANSI colour in the archive tables, and a
  per-MCS CSV export (`csv_header`, `csv_row`, `write_csv`, which returns the
  number of rows written).
- `ltetrack.ul_schedule` – `ULSchedule` keeps uplink grants by the TTI they
  were sent in (`push`, `push_rar`) and hands them back when their PUSCH is
  due (`get`, `get_rar`, `delete`, `delete_rar`). That is 4 subframes later
  for DCI 0 grants and 6 for RAR grants, wrapping at 10240 (`ul_tti`,
  `rar_ul_tti`). `configure` derives `DmrsConfig` and `PrachConfig` from
  `SIB2Params`.
- `ltetrack.meta_formats.DCIMetaFormats` – counts hits per DCI format
  (`hit`). `update_formats` ranks the formats by hits, puts the most frequent
  ones up to `split_ratio` of all hits in the primary set and the rest in the
  secondary set, then resets the counts. `describe` lists both sets.
- `ltetrack.power` – `compute_rb_power` and `SubframePower.compute` give the
  average received power per resource block in dB over the 14 symbols of a
  subframe.
- `ltetrack.api` – identity and message types (`IdentityType`,
  `MessageType`) and their display names (`id_name`, `message_name`).
  `format_api_line` builds one report line. `tmsi_hex`, `random_value_hex`
  and `digits_string` produce the text shown for M-TMSIs, RRC random values
  and IMSI/IMEI digits.

## Example

```python
from ltetrack.ul_tracking import ULTracker
from ltetrack.types import ULModulation
from ltetrack.report import format_all_ul_database

tracker = ULTracker()
tracker.update_statistic(1234, True, ULModulation.UNKNOWN, 12.5, 0.3)
tracker.update_rnti(1234, ULModulation.QAM64_MAX)
print(tracker.find(1234))            # ULModulation.QAM64_MAX
tracker.merge_all_database()
print(format_all_ul_database(tracker.all_database))
```

## What it does not do

The package does not receive or demodulate radio signals. It does not
decode DCI, PDSCH or PUSCH, and it does not parse RRC or NAS messages. It
has no command-line program. Decoding results must be passed in by the
caller. The package only tracks, schedules and reports them.

## Tests

```
pip install -e .[test]
pytest
```