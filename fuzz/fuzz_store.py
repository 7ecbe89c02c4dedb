"""Fuzz harness for the CSV storage parser.

Arbitrary bytes are decoded as text and fed to ``parse_rows``. A StorageError
is the expected outcome for malformed input; anything else is a crash. Rows
that do parse must survive a write/read cycle unchanged.
"""
from __future__ import annotations
import atheris
import io
import sys
import csv

with atheris.instrument_imports():
    from trackwork.errors import StorageError
    from trackwork.store import HEADER, parse_rows, to_row


def TestOneInput(data: bytes):  # noqa: N802 (Atheris signature)
    text = data.decode("utf-8", errors="ignore")
    try:
        records = list(parse_rows(io.StringIO(text, newline="")))
    except StorageError:
        return
    buf = io.StringIO(newline="")
    writer = csv.writer(buf)
    writer.writerow(HEADER)
    for r in records:
        writer.writerow(to_row(r))
    buf.seek(0)
    again = list(parse_rows(buf))
    if again != records:
        raise RuntimeError("records changed across a write/read cycle")


def main():
    atheris.Setup(sys.argv, TestOneInput, enable_python_coverage=True)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
