"""Document attributes: entries, references and attribute lists.

Supported syntax:
- ``:name: value`` sets an attribute, ``:name!:`` and ``:!name:`` unset it
- ``{name}`` references are replaced by the attribute value
- ``key=value,opts=optional`` attribute lists on include directives
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)

ATTRIBUTE_ENTRY_PATTERN = re.compile(r"^:(!?\w[\w-]*?)(!?):(?:[ \t]+(.*))?$")
ATTRIBUTE_REFERENCE_PATTERN = re.compile(r"(\\)?\{(\w[\w-]*)\}")

# Character replacement attributes every document defines.
INTRINSIC_ATTRIBUTES: Dict[str, str] = {
    "startsb": "[",
    "endsb": "]",
    "vbar": "|",
    "caret": "^",
    "asterisk": "*",
    "tilde": "~",
    "plus": "&#43;",
    "backslash": "\\",
    "backtick": "`",
    "blank": "",
    "empty": "",
    "sp": " ",
    "two-colons": "::",
    "two-semicolons": ";;",
    "nbsp": "&#160;",
    "deg": "&#176;",
    "zwsp": "&#8203;",
    "quot": "&#34;",
    "apos": "&#39;",
    "lsquo": "&#8216;",
    "rsquo": "&#8217;",
    "ldquo": "&#8220;",
    "rdquo": "&#8221;",
    "wj": "&#8288;",
    "brvbar": "&#166;",
    "pp": "&#43;&#43;",
    "cpp": "C++",
    "amp": "&",
    "lt": "<",
    "gt": ">",
}

AttributesInput = Union[None, str, Iterable[str], Mapping[str, Any]]


def parse_attribute_entry(line: str) -> Optional[Tuple[str, Optional[str]]]:
    """Parse an attribute entry line.

    Returns:
        ``(name, value)`` for a set entry, ``(name, None)`` for an unset
        entry, or ``None`` when ``line`` is not an attribute entry.
    """
    match = ATTRIBUTE_ENTRY_PATTERN.match(line)
    if not match:
        return None
    raw_name, bang, value = match.group(1), match.group(2), match.group(3)
    if raw_name.startswith("!"):
        return raw_name[1:].lower(), None
    if bang:
        return raw_name.lower(), None
    return raw_name.lower(), (value or "").strip()


def substitute_attributes(
    text: str,
    attributes: Mapping[str, Any],
    *,
    attribute_missing: Optional[str] = None,
    quiet: bool = False,
) -> Optional[str]:
    """Replace attribute references in ``text``.

    Args:
        text: Text that may contain ``{name}`` references.
        attributes: Attribute values by lowercase name.
        attribute_missing: How to treat an undefined reference; defaults to
            the ``attribute-missing`` attribute, then ``skip``.
        quiet: Do not log dropped lines or missing references.

    Returns:
        The substituted text, or ``None`` when a missing reference drops the line.
    """
    if "{" not in text:
        return text
    mode = attribute_missing or str(attributes.get("attribute-missing") or "skip")
    dropped = False

    def _replace(match: "re.Match[str]") -> str:
        nonlocal dropped
        if match.group(1):
            return match.group(0)[1:]
        name = match.group(2).lower()
        if name in attributes:
            return str(attributes[name])
        if name in INTRINSIC_ATTRIBUTES:
            return INTRINSIC_ATTRIBUTES[name]
        if mode == "drop-line":
            dropped = True
            if not quiet:
                logger.debug("dropping line containing reference to missing attribute: %s", name)
            return ""
        if mode == "drop":
            return ""
        if mode == "warn" and not quiet:
            logger.warning("skipping reference to missing attribute: %s", name)
        return match.group(0)

    result = ATTRIBUTE_REFERENCE_PATTERN.sub(_replace, text)
    return None if dropped else result


def parse_attrlist(attrlist: Optional[str]) -> Dict[str, str]:
    """Parse an attribute list such as ``lines="1..3,5",opts=optional``.

    Named entries are returned by lowercase name with surrounding quotes
    removed. Each option in ``opts``/``options`` also yields ``<name>-option``.
    Positional entries are returned under their 1-based position.
    """
    parsed: Dict[str, str] = {}
    if not attrlist:
        return parsed
    position = 0
    for entry in _split_attrlist(attrlist):
        entry = entry.strip()
        if not entry:
            continue
        key, sep, value = entry.partition("=")
        if not sep:
            position += 1
            parsed[str(position)] = _unquote(entry)
            continue
        name = key.strip().lower()
        value = _unquote(value.strip())
        parsed[name] = value
        if name in ("opts", "options"):
            for option in value.split(","):
                option = option.strip()
                if option:
                    parsed[f"{option}-option"] = ""
    return parsed


def _split_attrlist(attrlist: str) -> Iterable[str]:
    entry = []
    quote: Optional[str] = None
    for char in attrlist:
        if quote:
            if char == quote:
                quote = None
            entry.append(char)
        elif char in ('"', "'"):
            quote = char
            entry.append(char)
        elif char == ",":
            yield "".join(entry)
            entry = []
        else:
            entry.append(char)
    yield "".join(entry)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def normalize_attributes(attributes: AttributesInput) -> Dict[str, Optional[str]]:
    """Normalize attributes passed by a caller.

    Accepts a mapping, a ``"name=value other"`` string, or an iterable of
    ``name=value`` strings. ``name!`` (or a ``None``/``False`` value) unsets
    the attribute. A value ending in ``@`` may be overridden by the document.
    """
    if attributes is None:
        return {}
    if isinstance(attributes, str):
        items: Iterable[Any] = attributes.split()
    elif isinstance(attributes, Mapping):
        items = attributes.items()
    else:
        items = attributes

    normalized: Dict[str, Optional[str]] = {}
    for item in items:
        if isinstance(item, tuple):
            name, value = item
        else:
            name, sep, value = str(item).partition("=")
            if not sep:
                value = ""
        name = str(name).strip().lower()
        if name.endswith("!"):
            normalized[name[:-1]] = None
        elif value is None or value is False:
            normalized[name] = None
        elif value is True:
            normalized[name] = ""
        else:
            normalized[name] = str(value)
    return normalized


__all__ = [
    "ATTRIBUTE_ENTRY_PATTERN",
    "INTRINSIC_ATTRIBUTES",
    "normalize_attributes",
    "parse_attribute_entry",
    "parse_attrlist",
    "substitute_attributes",
]
