"""Render and parse the one-string resource document."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from buildstamp.artifact.base import MalformedArtifact, validate_resource_name

_TEMPLATE = (
    "<resources>\n"
    '    <string name="{name}">{value}</string>\n'
    "</resources>"
)


def render_resource(resource_name: str, timestamp: int) -> str:
    """Return the artifact text for *timestamp* under *resource_name*.

    No trailing newline; consumers compare the file byte for byte.
    """
    validate_resource_name(resource_name)
    if timestamp < 0:
        raise ValueError(f"Build timestamp must be non-negative, got {timestamp}")
    return _TEMPLATE.format(name=resource_name, value=int(timestamp))


def parse_resource(text: str, resource_name: str, path: Path | str = "<string>") -> int:
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise MalformedArtifact(path, exc) from exc

    if root.tag != "resources":
        raise MalformedArtifact(path, f"unexpected root element <{root.tag}>")

    for element in root.iter("string"):
        if element.get("name") != resource_name:
            continue
        value = (element.text or "").strip()
        if not (value.isascii() and value.isdigit()):
            raise MalformedArtifact(path, f"non-numeric value {value!r}")
        return int(value)

    raise MalformedArtifact(path, f"no string resource named {resource_name!r}")


def read_resource(path: Path | str, resource_name: str) -> int:
    """Read the timestamp stored in the artifact at *path*.

    Raises:
        FileNotFoundError: If there is no artifact at *path*.
        MalformedArtifact: If the file does not hold the named resource.
    """
    text = Path(path).read_text(encoding="utf-8")
    return parse_resource(text, resource_name, path)
