"""Runtime settings for the rent ledger.

Settings come from environment variables so the command line and the web
page pick the same formulas without extra flags:

``RENT_LEDGER_RENT_METHOD``
    ``span`` (default) or ``calendar``.
``RENT_LEDGER_LATE_FEE_METHOD``
    ``per_diem`` (default) or ``flat``.
``RENT_LEDGER_CURRENCY``
    Symbol printed before amounts, ``₱`` by default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .data_models import LATE_FEE_METHODS, PER_DIEM, RENT_METHODS, SPAN

DEFAULT_CURRENCY = "₱"


@dataclass(frozen=True)
class LedgerSettings:
    rent_method: str = SPAN
    late_fee_method: str = PER_DIEM
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if self.rent_method not in RENT_METHODS:
            raise ValueError(f"Unknown rent method: {self.rent_method}")
        if self.late_fee_method not in LATE_FEE_METHODS:
            raise ValueError(f"Unknown late fee method: {self.late_fee_method}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LedgerSettings":
        env = os.environ if environ is None else environ
        return cls(
            rent_method=env.get("RENT_LEDGER_RENT_METHOD", SPAN).strip().lower() or SPAN,
            late_fee_method=env.get("RENT_LEDGER_LATE_FEE_METHOD", PER_DIEM).strip().lower() or PER_DIEM,
            currency=env.get("RENT_LEDGER_CURRENCY", DEFAULT_CURRENCY),
        )
