"""
Local Authority (Highway) reference lookup.
"""

import logging

import pandas as pd

from ..models.accident import AuthorityMap

logger = logging.getLogger(__name__)


def build_authority_map(df: pd.DataFrame, code_column: str = "Code", label_column: str = "Label") -> AuthorityMap:
    """
    Build the code -> name mapping from a two-column table.

    Later rows overwrite earlier rows with the same code.

    Args:
        df: Table with a code column and a label column
        code_column: Name of the code column
        label_column: Name of the label column

    Returns:
        Read-only AuthorityMap
    """
    entries = {}
    duplicates = 0
    for code, label in zip(df[code_column], df[label_column]):
        code = str(code)
        if code in entries:
            duplicates += 1
        entries[code] = str(label)

    if duplicates:
        logger.warning(f"⚠ {duplicates} duplicate authority codes (last row wins)")
    logger.info(f"✓ Loaded {len(entries)} local authority names")
    return AuthorityMap(entries)
