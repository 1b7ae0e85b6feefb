"""Driver process entry point for the code-generation host.

The host runs ``python -m roachschema assemble``, writes its driver config as
a JSON object to stdin and reads the schema snapshot as JSON from stdout.
Failures are reported on stderr with a non-zero exit status. Without a
method the driver version is printed to stderr.
"""

import argparse
import json
import logging
import sys

import psycopg2

from roachschema import __version__
from roachschema.db.conn import IntrospectionError
from roachschema.db.connection.onto import CockroachConfig
from roachschema.hq.assembler import assemble

ASSEMBLE = "assemble"


def run_assemble(stdin, stdout) -> None:
    """Read the driver config from ``stdin`` and write the snapshot to ``stdout``."""
    driver_config = json.load(stdin)
    if not isinstance(driver_config, dict):
        raise ValueError("driver config must be a JSON object")
    config = CockroachConfig.from_driver_config(driver_config)
    info = assemble(config)
    stdout.write(info.model_dump_json(by_alias=True, exclude_none=True))
    stdout.write("\n")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="roachschema", description="CockroachDB schema introspection driver"
    )
    parser.add_argument("method", nargs="?", choices=[ASSEMBLE])
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args(argv)

    if args.method is None:
        sys.stderr.write(f"Version: v{__version__}\n")
        return 0

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        run_assemble(sys.stdin, sys.stdout)
    except (IntrospectionError, psycopg2.Error, ValueError) as e:
        # pydantic ValidationError and json.JSONDecodeError are ValueErrors
        sys.stderr.write(f"failed to assemble schema: {e}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
