"""
Basic subvibe usage example.

Parses a messy SRT file, reports diagnostics, shifts the timings and writes
the result as WebVTT.
"""

import logging

from subvibe import parse, build, resync

MESSY_SRT = """1
00:00:01,000 --> 00:00:04,000
Hello there.

3
0:05,5 --> 0:07
Short timestamps work too.

00:00:08,000 --> 00:00:06,000
Reversed timings are swapped.
"""


def main():
    # Show the parser's tracing output
    logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

    doc = parse(MESSY_SRT)
    print(f"Detected {doc.type} with {len(doc.cues)} cues")
    for error in doc.errors or ():
        print(f"  line {error.line} [{error.severity}] {error.message}")

    # Move everything 2 seconds later
    shifted = resync(doc.cues, 2000)

    print("\nAs WebVTT:")
    print(build(shifted, format="vtt"))

    print("Plain text:")
    print(build(shifted, "text"))

if __name__ == "__main__":
    main()
