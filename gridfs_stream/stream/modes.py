# Copyright 2026 gridfs-stream contributors. All Rights Reserved.
"""
Open mode classification.

A mode token is one of ``r``, ``w``, ``a``, ``x`` or ``c``, optionally
flavoured with ``t``, ``b`` and ``+``. ``+`` requests read and write access.
"""

from ..client.exceptions import ModeClassificationError
from ..client.types import AccessClass, OpenContract

READ = 'r'
TRUNCATE = 'w'
APPEND = 'a'
EXCLUSIVE = 'x'
WRITE_NEW = 'c'

# primary -> (create_if_missing, truncate_existing, fail_if_missing, fail_if_exists, append_on_write)
_CONTRACTS = {
    READ: (False, False, True, False, False),
    TRUNCATE: (True, True, False, False, False),
    APPEND: (True, False, False, False, True),
    EXCLUSIVE: (False, False, False, True, False),
    WRITE_NEW: (True, False, False, False, False),
}

def access_class(primary: str, extended: bool) -> AccessClass:
    if extended:
        return AccessClass.READ_WRITE
    if primary == READ:
        return AccessClass.READ_ONLY
    return AccessClass.WRITE_ONLY

def classify_mode(mode: str) -> OpenContract:
    """
    Map an open mode token to an access contract.

    Args:
        mode (str): Mode token such as ``"r"``, ``"wb"`` or ``"a+"``

    Returns:
        OpenContract: The contract for the session

    Raises:
        ModeClassificationError: If the primary letter is not recognized
    """
    extended = '+' in mode
    primary = mode.replace('t', '').replace('b', '').replace('+', '')
    if primary not in _CONTRACTS:
        raise ModeClassificationError(
            f"Illegal mode {mode!r}, use r, w, a, x or c, flavoured with t, b and/or +"
        )

    create, truncate, fail_missing, fail_exists, append = _CONTRACTS[primary]
    return OpenContract(
        primary=primary,
        access=access_class(primary, extended),
        create_if_missing=create,
        truncate_existing=truncate,
        fail_if_missing=fail_missing,
        fail_if_exists=fail_exists,
        append_on_write=append,
    )
