# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Property file discovery and priority-based selection."""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .diagnostics import log_diagnostic

PRIORITY_KEY = "priority"

_LOOKUP = "[LOOKUP]"


@dataclass
class PropertiesFile:
    """A property file found on the search path.

    Attributes:
        path: Location of the file
        priority: Value of its ``priority`` key (0.0 when absent)
        values: Parsed key/value pairs
    """
    path: Path
    priority: float = 0.0
    values: dict[str, str] = field(default_factory=dict)


def parse_properties(text: str) -> dict[str, str]:
    """Parse ``key=value`` / ``key: value`` lines.

    Lines starting with ``#`` or ``!`` are comments. A trailing backslash
    joins the next line onto the value.

    Args:
        text: File contents

    Returns:
        Dictionary of parsed properties
    """
    props: dict[str, str] = {}
    pending = ""
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if pending:
            line = pending + line
            pending = ""
        elif not line or line[0] in "#!":
            continue

        if line.endswith("\\") and not line.endswith("\\\\"):
            pending = line[:-1]
            continue

        key, value = _split_entry(line)
        if key:
            props[key] = value

    if pending:
        key, value = _split_entry(pending)
        if key:
            props[key] = value
    return props


def _split_entry(line: str) -> tuple[str, str]:
    positions = [pos for pos in (line.find("="), line.find(":")) if pos >= 0]
    if not positions:
        return line.strip(), ""
    sep = min(positions)
    return line[:sep].strip(), line[sep + 1:].strip()


def find_resources(name: str, search_path: Iterable[str | Path] | None = None) -> list[Path]:
    """Find every file called ``name`` on the search path.

    Args:
        name: Resource file name, e.g. ``logfacade.properties``
        search_path: Directories to scan in order (defaults to ``sys.path``)

    Returns:
        Existing files in search order without duplicates
    """
    directories = sys.path if search_path is None else search_path
    found: list[Path] = []
    seen: set[Path] = set()
    for entry in directories:
        directory = Path(entry) if entry else Path.cwd()
        candidate = directory / name
        try:
            if not candidate.is_file():
                continue
            resolved = candidate.resolve()
        except OSError:
            continue
        if resolved in seen:
            continue
        seen.add(resolved)
        found.append(candidate)
    return found


def _read_priority(values: dict[str, str], path: Path) -> float:
    text = values.get(PRIORITY_KEY)
    if text is None:
        return 0.0
    try:
        return float(text)
    except ValueError:
        log_diagnostic(_LOOKUP, f"Ignoring invalid priority '{text}' in '{path}'")
        return 0.0


def load_configuration_file(
    name: str,
    search_path: Iterable[str | Path] | None = None,
) -> PropertiesFile | None:
    """Pick the highest-priority property file called ``name``.

    When several files share the name, the one with the strictly highest
    ``priority`` wins; on a tie the first one found is kept.

    Args:
        name: Resource file name
        search_path: Directories to scan (defaults to ``sys.path``)

    Returns:
        The selected file, or None if no readable file was found
    """
    selected: PropertiesFile | None = None
    for path in find_resources(name, search_path):
        try:
            values = parse_properties(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            log_diagnostic(_LOOKUP, f"Unable to read '{path}': {e}")
            continue

        current = PropertiesFile(path=path, priority=_read_priority(values, path), values=values)
        if selected is None:
            log_diagnostic(_LOOKUP, f"Properties file found at '{path}' with priority {current.priority}")
            selected = current
        elif current.priority > selected.priority:
            log_diagnostic(
                _LOOKUP,
                f"Properties file at '{path}' with priority {current.priority} overrides file at "
                f"'{selected.path}' with priority {selected.priority}",
            )
            selected = current
        else:
            log_diagnostic(
                _LOOKUP,
                f"Properties file at '{path}' with priority {current.priority} does not override file at "
                f"'{selected.path}' with priority {selected.priority}",
            )

    if selected is None:
        log_diagnostic(_LOOKUP, f"No properties file of name '{name}' found.")
    else:
        log_diagnostic(_LOOKUP, f"Properties file of name '{name}' found at '{selected.path}'")
    return selected
