from __future__ import annotations

from clickstream_firehose.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
