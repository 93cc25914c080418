"""
In-place status updates for workflow status files.

The file is never re-serialized. Each update finds the status value of one
item with an anchor regex and splices the new value into the original text,
so comments, key order and spacing survive untouched.
"""

import logging
import re
from pathlib import Path

from statusboard.lib.schema import Schema, detect_schema
from statusboard.lib.statusparse import parse_yaml_text, read_status_text

logger = logging.getLogger(__name__)

# Scalar value after `status:` - quoted strings first, then a bare token
_CURRENT_VALUE = r'(?P<value>"[^"\r\n]*"|\'[^\'\r\n]*\'|\S+)'
_LEGACY_VALUE = r'(?P<value>"[^"\r\n]*"|\'[^\'\r\n]*\'|[^\s"\'#]+)'


def current_anchor(item_id: str) -> re.Pattern:
    """Anchor for `<id>:` followed by a more deeply indented `status:` line."""
    key = re.escape(item_id)
    return re.compile(
        rf'^(?P<indent>[ \t]*)["\']?{key}["\']?:[ \t]*(?:#[^\r\n]*)?\r?\n'
        rf'(?P=indent)[ \t]+status:[ \t]*{_CURRENT_VALUE}',
        re.MULTILINE,
    )


def legacy_anchor(item_id: str) -> re.Pattern:
    """Anchor for `- id: <id>` and the nearest `status:` key line inside that element."""
    key = re.escape(item_id)
    return re.compile(
        rf'^(?P<indent>[ \t]*)-[ \t]+id:[ \t]*["\']?{key}["\']?(?=[ \t]*(?:#[^\r\n]*)?\r?$)'
        rf'(?:(?!^(?P=indent)-\s)[\s\S])*?'
        rf'^(?P=indent)[ \t]+status:[ \t]*{_LEGACY_VALUE}',
        re.MULTILINE,
    )


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _splice(content: str, match: re.Match, replacement: str) -> str:
    start, end = match.span("value")
    return content[:start] + replacement + content[end:]


def set_status(filepath, item_id: str, new_status: str) -> bool:
    """Set the status of one item in a workflow status file.

    Current schema values are written verbatim; Legacy values are written
    double-quoted. Writing "complete" does not add an output_file.

    Returns:
        True if the file was updated. False if the file is missing, the new
        status is not a single line, or no unique anchor matches item_id;
        the file is not touched in those cases.

    Raises:
        MalformedDocument: if the file is not valid YAML
    """
    path = Path(filepath)
    if not path.is_file():
        return False

    new_status = new_status.strip()
    if not new_status or '\n' in new_status or '\r' in new_status:
        logger.warning(f"Rejected status for {item_id!r}: must be a non-empty single line")
        return False

    content = read_status_text(path)
    schema = detect_schema(parse_yaml_text(content, path))

    if schema is Schema.CURRENT:
        pattern = current_anchor(item_id)
        replacement = new_status
    else:
        pattern = legacy_anchor(item_id)
        replacement = _quote(new_status)

    matches = list(pattern.finditer(content))
    if not matches:
        logger.debug(f"No {schema.value} anchor for {item_id!r} in {path}")
        return False
    if len(matches) > 1:
        logger.warning(f"Ambiguous anchor for {item_id!r} in {path}: {len(matches)} matches, not updating")
        return False

    updated = _splice(content, matches[0], replacement)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(updated)

    logger.info(f"Set {item_id} to {new_status} in {path}")
    return True
