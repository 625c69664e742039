"""Data loader module for parsing expense, deposit, and shift type CSV files."""

import logging
import pandas as pd
from typing import Dict, List

from .models.ledger import Deposit, Expense
from .models.shift import ShiftType

logger = logging.getLogger(__name__)


def _read_table(csv_path: str, required_cols: List[str], sep: str) -> pd.DataFrame:
    """Read a CSV file and check its required columns."""
    df = pd.read_csv(csv_path, sep=sep)
    df.columns = [str(col).strip().lower() for col in df.columns]
    for col in required_cols:
        if col not in df.columns:
            raise ValueError(f"Missing required column: {col}")
    return df


def load_expenses(csv_path: str, sep: str = ",") -> List[Expense]:
    """
    Parse an expenses CSV (columns: day, amount, optional name).

    Args:
        csv_path: Path to expenses CSV file
        sep: Column separator

    Returns:
        List of Expense instances in file order
    """
    expenses = []

    try:
        df = _read_table(csv_path, ["day", "amount"], sep)
        logger.info(f"Loaded expenses CSV with {len(df)} rows")

        for _, row in df.iterrows():
            name = row.get("name", "")
            expenses.append(Expense(
                day=int(row["day"]),
                name="" if pd.isna(name) else str(name),
                amount=float(row["amount"]),
            ))
    except FileNotFoundError:
        logger.warning(f"Expenses CSV not found at {csv_path}, using empty list")
    except Exception as e:
        logger.error(f"Error loading expenses: {e}")
        raise

    return expenses


def load_deposits(csv_path: str, sep: str = ",") -> List[Deposit]:
    """
    Parse a deposits CSV (columns: day, amount, optional name).

    Args:
        csv_path: Path to deposits CSV file
        sep: Column separator

    Returns:
        List of Deposit instances in file order
    """
    deposits = []

    try:
        df = _read_table(csv_path, ["day", "amount"], sep)
        logger.info(f"Loaded deposits CSV with {len(df)} rows")

        for _, row in df.iterrows():
            name = row.get("name", "")
            deposits.append(Deposit(
                day=int(row["day"]),
                amount=float(row["amount"]),
                name="" if pd.isna(name) else str(name),
            ))
    except FileNotFoundError:
        logger.warning(f"Deposits CSV not found at {csv_path}, using empty list")
    except Exception as e:
        logger.error(f"Error loading deposits: {e}")
        raise

    return deposits


def load_shift_types(csv_path: str, sep: str = ",") -> Dict[str, ShiftType]:
    """
    Parse a shift types CSV (columns: name, net, optional gross).

    Args:
        csv_path: Path to shift types CSV file
        sep: Column separator

    Returns:
        Dictionary mapping shift name to ShiftType (empty if the file is missing)
    """
    shift_types = {}

    try:
        df = _read_table(csv_path, ["name", "net"], sep)
        logger.info(f"Loaded shift types CSV with {len(df)} rows")

        for _, row in df.iterrows():
            gross = row.get("gross")
            shift_types[str(row["name"]).strip()] = ShiftType(
                net=float(row["net"]),
                gross=None if gross is None or pd.isna(gross) else float(gross),
            )
    except FileNotFoundError:
        logger.warning(f"Shift types CSV not found at {csv_path}, using empty dict")
    except Exception as e:
        logger.error(f"Error loading shift types: {e}")
        raise

    return shift_types
