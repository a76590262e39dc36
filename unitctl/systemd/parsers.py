"""
Decoders for systemd replies and command output.

Everything here is a pure function of its input so the catalog and control
client can be tested without a bus or a `systemctl` binary.
"""
import logging
import re
from collections.abc import Sequence
from itertools import takewhile
from typing import Any, Final

from unitctl.errors import MalformedReplyError
from unitctl.systemd.classifiers import classify_unit_state
from unitctl.systemd.models import (
    BlameEntry,
    BootTimes,
    UnitFile,
    UnitFileEntry,
    UnitProperty,
)

logger = logging.getLogger(__name__)

# Debug-formatted ListUnitFiles reply:
#   [Array([Struct([Str("/path"), Str("enabled")]), ...], "a(ss)")]
TEXT_REPLY_PREFIX: Final[str] = '[Array('
TEXT_REPLY_SUFFIX: Final[str] = ', "a(ss)")]'
# Path segments look like `[Struct([Str("` or ` Struct([Str("`.
TEXT_PATH_QUOTE_OFFSET: Final[int] = 13
# State segments look like ` Str("enabled")])`.
TEXT_STATE_OFFSET: Final[int] = 6

# `systemctl status`: third line is `   Active: active (running) ...`
STATUS_ACTIVE_LINE: Final[int] = 2
STATUS_ACTIVE_COLUMN: Final[int] = len('Active: ')

# `systemctl list-dependencies` prefixes every child with a tree glyph.
DEPENDENCY_INDENT: Final[int] = 4

DESCRIPTION_KEY: Final[str] = 'Description='

_BOOT_PHASE = re.compile(r'(\S+) \((kernel|userspace)\)')
_BOOT_TOTAL = re.compile(r'= (\S+)')


def parse_unit_files_reply(reply: Any) -> list[UnitFileEntry]:
    """Decode the native `a(ss)` body of a ListUnitFiles reply.

    Args:
        reply: Sequence of `[path, state]` pairs as returned by dbus_next

    Returns:
        Entries in reply order

    Raises:
        MalformedReplyError: If the reply is not a sequence of string pairs
        UnrecognizedStateError: If a state is outside the closed table
    """
    if not isinstance(reply, Sequence) or isinstance(reply, str):
        raise MalformedReplyError(
            f'Expected an array of unit files, got {type(reply).__name__}'
        )

    entries = []
    for item in reply:
        if isinstance(item, str) or not isinstance(item, Sequence) \
                or len(item) != 2:
            raise MalformedReplyError(f'Expected (path, state), got {item!r}')

        path, state = item
        if not isinstance(path, str) or not isinstance(state, str) \
                or not path:
            raise MalformedReplyError(f'Expected (path, state), got {item!r}')

        entries.append(
            UnitFileEntry(path=path, state=classify_unit_state(state))
        )

    return entries


def parse_unit_files_text(text: str) -> list[UnitFileEntry]:
    """Decode the debug-formatted text dump of a ListUnitFiles reply.

    Args:
        text: Text of the form `[Array([Struct([Str("..."), Str("...")]),
            ...], "a(ss)")]`

    Returns:
        Entries in reply order

    Raises:
        MalformedReplyError: If the wrapper, a path quote or a pair is missing
        UnrecognizedStateError: If a state is outside the closed table
    """
    text = text.strip()
    if not text:
        return []

    if not text.startswith(TEXT_REPLY_PREFIX) or \
            not text.endswith(TEXT_REPLY_SUFFIX):
        raise MalformedReplyError('Unit file reply wrapper not recognized')

    body = text[len(TEXT_REPLY_PREFIX):-len(TEXT_REPLY_SUFFIX)]
    if body == '[]':
        return []

    segments = body.split(',')
    if len(segments) % 2:
        raise MalformedReplyError(
            f'Unit file reply has an unpaired segment: {segments[-1]!r}'
        )

    entries = []
    for path_segment, state_segment in zip(
        segments[::2],
        segments[1::2],
        strict=True,
    ):
        entries.append(UnitFileEntry(
            path=_extract_quoted(path_segment, TEXT_PATH_QUOTE_OFFSET),
            state=classify_unit_state(state_segment, TEXT_STATE_OFFSET),
        ))

    return entries


def _extract_quoted(segment: str, offset: int) -> str:
    """Return the text between the first quote at or after `offset` and the
    next quote.
    """
    start = segment.find('"', offset)
    if start < 0:
        raise MalformedReplyError(f'No opening quote in {segment!r}')

    end = segment.find('"', start + 1)
    if end < 0:
        raise MalformedReplyError(f'No closing quote in {segment!r}')

    value = segment[start + 1:end]
    if not value:
        raise MalformedReplyError(f'Empty path in {segment!r}')

    return value


def parse_list_unit_files(text: str) -> list[UnitFileEntry]:
    """Decode `systemctl list-unit-files` output.

    The header line is skipped and parsing stops at the first blank line,
    which separates the table from the `N unit files listed.` footer.
    """
    entries = []
    lines = text.splitlines()[1:]

    for line in takewhile(lambda x: x.strip(), lines):
        columns = line.split()
        if len(columns) < 2:
            logger.warning('Missing unit file information: %s', line)
            continue

        name, state = columns[0], columns[1]
        entries.append(
            UnitFileEntry(path=name, state=classify_unit_state(state))
        )

    return entries


def parse_status_active(text: str) -> bool:
    """Decode `systemctl status` output to an active flag.

    Anything we cannot read counts as inactive.
    """
    lines = text.splitlines()
    if len(lines) <= STATUS_ACTIVE_LINE:
        return False

    active_line = lines[STATUS_ACTIVE_LINE].strip()
    return active_line[STATUS_ACTIVE_COLUMN:STATUS_ACTIVE_COLUMN + 1] == 'a'


def parse_is_active(text: str, count: int) -> list[bool]:
    """Decode bulk `systemctl is-active` output, one line per queried unit.

    Args:
        text: Command stdout
        count: Number of units passed on the command line

    Returns:
        Active flags in query order

    Raises:
        MalformedReplyError: If the line count does not match `count`
    """
    lines = text.splitlines()
    if len(lines) != count:
        raise MalformedReplyError(
            f'Expected {count} is-active lines, got {len(lines)}'
        )

    return [line.startswith('a') for line in lines]


def parse_dependencies(text: str) -> str:
    """Flatten `systemctl list-dependencies` output.

    Drops the header line (the unit itself) and the tree indent of each
    remaining line.
    """
    return ''.join(
        f'{line[DEPENDENCY_INDENT:]}\n'
        for line in text.splitlines()[1:]
    )


def parse_properties(text: str) -> list[UnitProperty]:
    """Decode `systemctl show` output into properties sorted by key.

    Lines without `=` and properties with empty values are skipped.
    """
    properties = []

    for line in text.splitlines():
        key, separator, value = line.partition('=')
        if not separator or not key or not value:
            continue
        properties.append(UnitProperty(key=key, value=value))

    return sorted(properties, key=lambda p: p.key)


def parse_unit_cat(text: str) -> UnitFile | None:
    """Decode `systemctl cat` output.

    The first line is a `# /path/to/unit` comment; everything after it is the
    file itself. Returns None when there is no such header.
    """
    header, separator, contents = text.partition('\n')
    if not separator or len(header) <= 3:
        return None

    return UnitFile(path=header[2:], contents=contents.strip())


def unit_description(contents: str) -> str | None:
    """Return the `Description=` value of a unit file, if any.
    """
    for line in contents.splitlines():
        if line.startswith(DESCRIPTION_KEY):
            return line[len(DESCRIPTION_KEY):]
    return None


def is_already_enabled(reply: Any) -> bool:
    """Check an EnableUnitFiles reply for the "nothing changed" shape.

    The reply is `(carries_install_info, changes)`; a unit that was already
    enabled answers `(True, [])`.

    Raises:
        MalformedReplyError: If the reply is not a two item sequence
    """
    if isinstance(reply, str) or not isinstance(reply, Sequence) \
            or len(reply) != 2:
        raise MalformedReplyError(
            f'Unexpected EnableUnitFiles reply: {reply!r}'
        )

    carries_install_info, changes = reply
    return carries_install_info is True and _is_empty_changes(changes)


def is_already_disabled(changes: Any) -> bool:
    """Check a DisableUnitFiles reply for the "nothing changed" shape.

    Raises:
        MalformedReplyError: If the reply is not a sequence of changes
    """
    if isinstance(changes, str) or not isinstance(changes, Sequence):
        raise MalformedReplyError(
            f'Unexpected DisableUnitFiles reply: {changes!r}'
        )
    return _is_empty_changes(changes)


def _is_empty_changes(changes: Any) -> bool:
    return isinstance(changes, Sequence) and not isinstance(changes, str) \
        and len(changes) == 0


def parse_duration_ms(token: str) -> int:
    """Convert a `systemd-analyze` duration token to milliseconds.

    Unknown units count as zero.
    """
    try:
        if token.endswith('ms'):
            return round(float(token[:-2]))
        if token.endswith('s'):
            return round(float(token[:-1]) * 1000)
        if token.endswith('min'):
            return round(float(token[:-3]) * 60_000)
    except ValueError:
        return 0
    return 0


def parse_blame_line(line: str) -> BlameEntry | None:
    """Decode one `systemd-analyze blame` line.

    Example: `3min 38.514s foo.service`.
    """
    tokens = line.split()
    if not tokens:
        return None

    unit = tokens.pop()
    return BlameEntry(
        time=sum(parse_duration_ms(token) for token in tokens),
        unit=unit,
    )


def parse_blame(text: str) -> list[BlameEntry] | None:
    """Decode `systemd-analyze blame` output, cheapest unit first.

    Returns None if any line cannot be decoded.
    """
    entries = []
    for line in reversed(text.splitlines()):
        entry = parse_blame_line(line)
        if entry is None:
            return None
        entries.append(entry)
    return entries


def parse_boot_times(text: str) -> BootTimes:
    """Decode `systemd-analyze time` output.

    Phases that are not reported stay `N/A`.
    """
    phases = {phase: value for value, phase in _BOOT_PHASE.findall(text)}
    total = _BOOT_TOTAL.search(text)

    return BootTimes(
        kernel=phases.get('kernel', 'N/A'),
        userspace=phases.get('userspace', 'N/A'),
        total=total.group(1) if total else 'N/A',
    )
