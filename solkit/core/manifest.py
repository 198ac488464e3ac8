"""Read and write project manifests without disturbing unrelated content.

Only the Include attribute of ProjectReference elements is ever touched.
Everything else in the file (comments, whitespace, line endings, BOM) is
written back byte for byte.
"""
import codecs
import os
import re
import shutil
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Union
from xml.sax.saxutils import escape, unescape

from solkit.core.errors import MalformedManifest, ManifestIOError
from solkit.core.logger import get_logger
from solkit.models.manifest import ProjectManifest, ReferenceEntry

logger = get_logger(__name__)

REFERENCE_ELEMENT = "ProjectReference"
REFERENCE_ATTRIBUTE = "Include"

# Comments are matched so references inside them can be skipped.
_TOKEN_RE = re.compile(
    r"<!--.*?-->|<" + REFERENCE_ELEMENT + r"\b(?P<attrs>[^>]*)>",
    re.DOTALL,
)
_ATTR_RE = re.compile(
    r"\b" + REFERENCE_ATTRIBUTE + r"""\s*=\s*(?P<quote>["'])(?P<value>.*?)(?P=quote)""",
    re.DOTALL,
)

_UNESCAPE = {"&quot;": '"', "&apos;": "'"}
_ESCAPE = {'"': "&quot;", "'": "&apos;"}


def parse(path: Union[str, Path]) -> ProjectManifest:
    """Load a manifest and locate its project references.

    Raises:
        ManifestIOError: If the file cannot be read
        MalformedManifest: If the file is not well-formed XML
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ManifestIOError(path, e.strerror or str(e)) from e

    try:
        ET.fromstring(data)
    except ET.ParseError as e:
        raise MalformedManifest(path, str(e)) from e

    has_bom = data.startswith(codecs.BOM_UTF8)
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise MalformedManifest(path, f"not UTF-8: {e}") from e

    manifest = ProjectManifest(path=path, text=text, has_bom=has_bom)
    manifest.references = _find_references(text)
    logger.debug(f"Parsed {path} ({len(manifest.references)} references)")
    return manifest


def _find_references(text: str) -> List[ReferenceEntry]:
    entries = []
    for token in _TOKEN_RE.finditer(text):
        if token.group("attrs") is None:
            continue
        attr = _ATTR_RE.search(token.group("attrs"))
        if attr is None:
            continue
        offset = token.start("attrs")
        entries.append(ReferenceEntry(
            path=unescape(attr.group("value"), _UNESCAPE),
            start=offset + attr.start("value"),
            end=offset + attr.end("value"),
        ))
    return entries


def get_references(manifest: ProjectManifest) -> List[ReferenceEntry]:
    """Return the manifest's references in document order."""
    return list(manifest.references)


def set_reference_path(entry: ReferenceEntry, new_path: str) -> None:
    """Point a reference at a new path (in memory only)."""
    entry.path = new_path


def render(manifest: ProjectManifest) -> str:
    """Return the manifest text with pending reference changes applied."""
    return _splice(manifest, update_offsets=False)


def _splice(manifest: ProjectManifest, update_offsets: bool) -> str:
    text = manifest.text
    pieces = []
    cursor = 0
    delta = 0
    for ref in manifest.references:
        pieces.append(text[cursor:ref.start])
        if ref.changed:
            value = escape(ref.path, _ESCAPE)
        else:
            value = text[ref.start:ref.end]
        pieces.append(value)
        cursor = ref.end
        if update_offsets:
            new_start = ref.start + delta
            delta += len(value) - (ref.end - ref.start)
            ref.start = new_start
            ref.end = new_start + len(value)
            ref.original = ref.path
    pieces.append(text[cursor:])
    return "".join(pieces)


def write(manifest: ProjectManifest) -> bool:
    """Write pending reference changes back to the manifest's path.

    The new content goes to a temporary file next to the manifest which is
    then renamed over it. Nothing is written when no reference changed.

    Returns:
        True if the file was rewritten

    Raises:
        ManifestIOError: On permission, lock or missing-directory problems
    """
    if not manifest.dirty:
        return False

    content = render(manifest)
    data = content.encode(manifest.encoding)
    if manifest.has_bom:
        data = codecs.BOM_UTF8 + data

    path = manifest.path
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(data)
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ManifestIOError(path, e.strerror or str(e)) from e

    manifest.text = _splice(manifest, update_offsets=True)
    logger.debug(f"Wrote {path}")
    return True
