from __future__ import annotations
from typing import Optional


class CannagraphError(Exception):
    """Base class for errors raised around the graph build."""


class ConfigError(CannagraphError, ValueError):
    pass


class RecordParseError(CannagraphError, ValueError):
    """A raw provider row is missing a field every record needs (ID or Name)."""

    def __init__(self, kind: str, message: str, row_id: Optional[str] = None):
        self.kind = kind
        self.row_id = row_id
        super().__init__(f"{kind}: {message}" + (f" (id={row_id})" if row_id else ""))


class ContractError(CannagraphError):
    pass
