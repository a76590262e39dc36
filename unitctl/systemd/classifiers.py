from pathlib import PurePosixPath

from unitctl.errors import UnrecognizedExtensionError, UnrecognizedStateError
from unitctl.systemd.types import STATE_LEAD_CHARACTERS, UnitState, UnitType


def classify_unit_type(path: str) -> UnitType:
    """Determine the unit kind from a unit file path or name.

    Only the final extension is consulted; the directory part is ignored.

    Args:
        path: Unit file path (`/usr/lib/systemd/system/sshd.service`) or
            bare unit name (`sshd.service`)

    Returns:
        The matching UnitType

    Raises:
        UnrecognizedExtensionError: If the extension is missing or unknown
    """
    suffix = PurePosixPath(path).suffix.removeprefix('.')
    try:
        return UnitType(suffix)
    except ValueError:
        raise UnrecognizedExtensionError(path) from None


def classify_unit_state(token: str, offset: int = 0) -> UnitState:
    """Map a state token to a UnitState by its lead character.

    The token may be embedded in a larger quoted structure, in which case
    `offset` is the position of the first character of the state word.

    Args:
        token: Raw text that holds the state word
        offset: Index of the discriminating character within `token`

    Returns:
        The matching UnitState

    Raises:
        UnrecognizedStateError: If the character is missing or not in the
            closed state table
    """
    if offset >= len(token):
        raise UnrecognizedStateError(token)

    character = token[offset]
    state = STATE_LEAD_CHARACTERS.get(character)
    if state is None:
        raise UnrecognizedStateError(token, character)

    return state


def is_template_unit(name_or_path: str) -> bool:
    """Check whether a unit is a template (`foo@.service`).
    """
    return PurePosixPath(name_or_path).stem.endswith('@')
