# arcontrol

Helpers for running and maintaining a fleet of self-hosted CI runners.

The package provides:

- **Recurring schedules** (`arcontrol.schedule`): given a start and end time and
  a `RecurrenceRule` (frequency `Daily`, `Weekly`, `Monthly` or `Yearly`, and an
  optional `until_time`), `match_schedule` returns the `Period` that is active
  now and the next one to come.
- **Label helpers** (`arcontrol.labels`): copy label maps and `LabelSelector`s
  with one key added (`clone_and_add_label`, `clone_selector_and_add_label`),
  drop a key (`filter_labels`), read the runner template hash from a label map
  (`get_template_hash`), and fall back to a default for a missing number
  (`get_int_or_default`).
- **Stable hashing** (`arcontrol.hashing`): `deep_dump` renders nested objects
  (dataclasses, mappings, sequences, sets, scalars) as stable text with sorted
  keys; `fnv32a` is the 32-bit FNV-1a hash; `compute_hash` and
  `fnv_hash_string_objects` turn these into a short, safe-to-print string. The
  hash does not depend on key order and contains no vowels.
- **Logging** (`arcontrol.logsetup`): `new_logger` accepts the levels `debug`,
  `info`, `warn`, `error`, or a signed number (`-1` debug, `0` info, `1` warn,
  `2` error, lower numbers for more verbose output) and writes RFC 3339
  timestamps. `parse_log_level` raises `ValueError` for anything else.
  `LoggingTransport` wraps a callable transport and logs each response, its
  method, URL, whether it came from a cache and the remaining rate limit.
- **Rate-limit tracking** (`arcontrol.ratelimit`): `MetricsTransport` wraps a
  callable transport and records the `X-RateLimit-Limit` and
  `X-RateLimit-Remaining` response headers in a `RateLimitMetrics`. Values that
  are not integers are ignored.
- **An in-memory resource reader** (`arcontrol.resourcereader`):
  `ResourceReader.get(namespace, name)` returns a copy of a stored object or
  raises `NotFoundError`.
- **A fake runners API** (`arcontrol.fakerunners`): `RunnersList` keeps runners
  in memory, unique by name, and `serve()` starts a local HTTP server that lists
  them under `/repos/<owner>/<repo>/actions/runners` and
  `/orgs/<org>/actions/runners`, and removes one on a request to
  `.../actions/runners/<id>`. Use it in tests.
- **Release signing** (`arcontrol.signrel`): downloads the assets of a release,
  signs each one with `gpg`, and uploads the detached signatures.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Schedules

```python
from datetime import datetime, timezone, timedelta

from arcontrol.schedule import RecurrenceRule, match_schedule

tz = timezone(timedelta(hours=9))
start = datetime(2021, 5, 1, tzinfo=tz)
end = datetime(2021, 5, 3, tzinfo=tz)
now = datetime(2021, 5, 8, tzinfo=tz)

active, upcoming = match_schedule(now, start, end, RecurrenceRule("Weekly"))
print(active)    # 2021-05-08T00:00:00+09:00-2021-05-10T00:00:00+09:00
print(upcoming)  # 2021-05-15T00:00:00+09:00-2021-05-17T00:00:00+09:00
```

If the frequency is empty, the period happens once. An unknown frequency raises
`ScheduleError`. So does a period that is longer than one repetition of its
frequency.

## Template hashes

```python
from arcontrol.hashing import compute_hash
from arcontrol.labels import clone_and_add_label

template = {"labels": ["project1", "dev"], "image": "runner"}
template_hash = compute_hash(template)
labels = clone_and_add_label({"foo": "bar"}, "runner-template-hash", template_hash)
```

`clone_and_add_label` returns a new map. The map you pass in is not changed.
If the key is empty, you get the original map back unchanged.

## A fake runners server

```python
from arcontrol.fakerunners import RunnersList

runners = RunnersList()
runners.sync(["runner-a", "runner-b"])      # online, ids 0 and 1
runners.add_offline(["runner-c"])           # offline, id 1000

with runners.serve() as server:
    print(server.url)  # http://127.0.0.1:<port>
```

## Signing release assets

The `arcontrol-signrel` command takes one subcommand:

```
arcontrol-signrel tags
TAG=v0.1.0 arcontrol-signrel sign
```

- `tags` prints the JSON list of releases.
- `sign` downloads every asset of the release named by `TAG` into
  `downloads/<tag>/`, skipping assets that end in `.asc`. It creates a `.asc`
  detached signature for each asset that does not have one on disk yet, and
  uploads the signature. If the signature was already uploaded, this is
  reported and the command goes on.

Any other argument, or none, prints a usage message and exits with status 2.
A failed request or signature exits with status 1.

The command reads two environment variables:

- `GITHUB_TOKEN`: optional. If set, it is used to authenticate API requests.
- `SIGNREL_PASSWORD`: the passphrase handed to `gpg`.

`gpg` must be on your `PATH`.

## What this package does not do

It has no controller that watches a cluster: nothing here creates, scales or
deletes runners or their replica sets, and nothing talks to a cluster API. The
fake runners server keeps its list in memory only. The rate-limit gauges are
plain attributes and are not exported to a metrics endpoint.