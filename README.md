# opskit

A toolkit for writing operations services and agents in Python.

- **Linux metrics** (`opskit.nux`). `opskit.nux.cpu`, `opskit.nux.system`, `opskit.nux.disk`,
  `opskit.nux.netif`, `opskit.nux.netstat` and `opskit.nux.proc` cover CPU, memory, load
  average, uptime, kernel limits, mount points and disk usage, block device I/O, network
  interfaces, netstat and snmp counters, socket summaries, listening ports and processes.
  The data comes from `/proc` and `/sys`, and a few readers also run `ss` or `ethtool`. Most
  readers have a `parse_*` counterpart that takes text, so you can use them on captured data too.
- **Logging** (`opskit.log.logger`, `opskit.log.file_backend`). A levelled logger that writes
  to stdout or stderr, to per-severity files (`FileBackend`, rotated by size or by the hour), or
  to several backends at once (`MultiBackend`).
- **Caching** (`opskit.cache`). `InMemoryCache` expires its entries and follows the memcached
  contract: `get`, `set`, `add`, `replace`, `delete`, `increment`, `decrement` and `flush`. There
  is also a module-level default instance, which you set up with `init_memory_cache`.
- **Consistent hashing** (`opskit.consistent`). `Consistent` is a hash ring over murmur3
  (`murmur3_32`), with replicas.
- **Containers** (`opskit.container.safelist`, `opskit.container.sets`, `opskit.semaphore`).
  Thread-safe lists (`SafeList`, `SafeListLimited`), sets (`IntSet`, `StringSet`,
  `SafeInt64Set`, `SafeSet`) and a counting `Semaphore` that also works as a context manager.
- **Other helpers**:
  - `opskit.pool.ConnPool`: a bounded connection pool.
  - `opskit.pager.Paginator`: pagination driven by the request URI.
  - `opskit.sysutil`: running commands, finding and killing processes, local addresses.
  - `opskit.files`: paths, reading and writing files, YAML and JSON loading.
  - `opskit.strutil`, `opskit.slices`, `opskit.conv`, `opskit.timefmt`: string, list,
    integer and time helpers.
  - `opskit.errors`: `PageError` and the helpers `bomb` and `dangerous`.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Examples

Slice and string helpers:

```python
from opskit.slices import subtract
from opskit.strutil import ids_int64

subtract([1, 3, 5, 56, 67, 7], [3, 5, 6, 7])   # [1, 56, 67]
ids_int64("1,2,,x,3")                          # [1, 2, 3]
```

Human-readable durations:

```python
from opskit.timefmt import duration

duration(1000, 700)   # "5 minutes ago"
```

Consistent hashing:

```python
from opskit.consistent import Consistent

ring = Consistent()
ring.add("node-a")
ring.add("node-b")
owner = ring.get("user:42")
first, second = ring.get_two("user:42")
```

In-memory cache. Expiration times are in seconds.

```python
from opskit.cache import InMemoryCache, NotStoredError

cache = InMemoryCache(300)
cache.set("hits", 1)
cache.increment("hits", 2)      # 3
try:
    cache.add("hits", 0)
except NotStoredError:
    pass
```

Pagination:

```python
from opskit.pager import new_paginator

p = new_paginator("/items?page=3", 10, 95)
p.page()             # 3
p.page_nums()        # 10
p.page_link_next()   # "/items?page=4"
```

Logging through the package-level logger, which writes to stdout by default:

```python
from opskit.log import logger

logger.set_severity("INFO")
logger.infof("started %s workers", 4)
```

Logging to per-severity files (`INFO.log`, `ERROR.log`, and so on):

```python
from opskit.log import logger
from opskit.log.file_backend import FileBackend

backend = FileBackend("/tmp/myapp-logs")
backend.rotate(20, 100 * 1024 * 1024)
logger.set_logging("DEBUG", backend)
logger.warning("disk almost full")
logger.close()
```

`fatal` and `fatalf` log the message, write the stack to stderr and exit with status 255.

## Command line

```
opskit
```

Prints a short self-check: a list subtraction, the host name, the directory the program runs
from, and the files in that directory.

## What it does not do

- The logger has no syslog backend. It also cannot be set up from a configuration object:
  you choose and attach backends in code with `set_logging`.
- The cache only lives in memory, in one process. There is no networked or shared cache.
- There are no mail, RPC, NTP or HTTP client helpers.

## Tests

```
pytest
```