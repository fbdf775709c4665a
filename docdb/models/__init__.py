"""Data models for docdb."""

from docdb.models.enums import DumpPolicyKind, ErrorType, SerializationMethod
from docdb.models.policy import AutoDump, DumpPolicy, DumpRelyRequest, NeverDump, PeriodicDump

__all__ = [
    "AutoDump",
    "DumpPolicy",
    "DumpPolicyKind",
    "DumpRelyRequest",
    "ErrorType",
    "NeverDump",
    "PeriodicDump",
    "SerializationMethod",
]
