"""Pedalboard banks defined on the host."""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from pedalhmi.models import Bank

logger = logging.getLogger(__name__)

# User banks are numbered after the implicit "All Pedalboards" bank
FIRST_USER_BANK_ID = 2


class _BankPedalboard(BaseModel):
    bundle: str | None = None


class _BankEntry(BaseModel):
    title: str = "Unnamed Bank"
    pedalboards: list[_BankPedalboard] = Field(default_factory=list)


def load_banks(banks_path: Path) -> list[Bank]:
    """
    Read the host's banks.json.

    The result always starts with the "All Pedalboards" bank (id 1),
    followed by user banks numbered from 2 in file order. A missing or
    malformed file yields only the first bank.
    """
    banks = [Bank.all_pedalboards()]

    banks_path = Path(banks_path)
    if not banks_path.is_file():
        logger.info(f"No banks.json found at {banks_path}")
        return banks

    try:
        entries = json.loads(banks_path.read_text(encoding="utf-8"))
        if not isinstance(entries, list):
            raise ValueError("expected a list of banks")
        for offset, entry in enumerate(entries):
            parsed = _BankEntry.model_validate(entry)
            banks.append(
                Bank(
                    id=FIRST_USER_BANK_ID + offset,
                    title=parsed.title,
                    pedalboard_bundles=[pb.bundle for pb in parsed.pedalboards if pb.bundle],
                )
            )
    except (OSError, ValueError, ValidationError) as e:
        logger.warning(f"Failed to load banks from {banks_path}: {e}")
        return [Bank.all_pedalboards()]

    logger.info(f"Loaded {len(banks) - 1} user banks")
    return banks
