"""High-level entry points: the driver facade and snapshot assembly."""

from roachschema.hq.assembler import assemble
from roachschema.hq.driver import CockroachDriver

__all__ = [
    "CockroachDriver",
    "assemble",
]
