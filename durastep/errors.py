"""Exceptions raised by durastep."""

from __future__ import annotations


class DurastepError(Exception):
    """Base class for durastep errors."""


class StoreError(DurastepError):
    """A checkpoint lookup or upsert failed.

    Raised for I/O failures, constraint violations and missing schema. The
    engine never retries these; the step is left without a checkpoint.
    """


class SerializationError(StoreError):
    """A step result could not be encoded for, or decoded from, the store."""


class ProcessInitError(DurastepError):
    """Bootstrapping the checkpoint store failed."""
