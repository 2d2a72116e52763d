"""
Docstring Parser - Extracts documentation from Google style docstrings.

Supports:
- Summary and description
- Args/Arguments/Parameters sections (with optional `(type)` annotations)
- Returns/Yields sections
- Raises sections
- Inline literals (``text``) and reST roles (:class:`Foo`) as <code> markup
"""

import inspect
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from markupsafe import escape

logger = logging.getLogger(__name__)

SECTION_ALIASES = {
    "args": "args",
    "arguments": "args",
    "parameters": "args",
    "params": "args",
    "returns": "returns",
    "return": "returns",
    "yields": "returns",
    "raises": "raises",
    "exceptions": "raises",
}

SECTION_PATTERN = re.compile(r"^(\w+):\s*$")
ENTRY_PATTERN = re.compile(r"^(\*{0,2}[\w.]+)\s*(?:\(([^)]*)\))?\s*:\s*(.*)$")
LITERAL_PATTERN = re.compile(r"``(.+?)``")
ROLE_PATTERN = re.compile(r":(?:py:)?\w+:`~?([^`]+)`")


@dataclass
class DocstringInfo:
    """Parsed docstring"""
    summary: str = ""
    description: str = ""
    params: Dict[str, str] = field(default_factory=dict)
    returns: str = ""
    raises: List[Tuple[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            "summary": self.summary,
            "description": self.description,
            "params": self.params,
            "returns": self.returns,
            "raises": [{"name": name, "description": text} for name, text in self.raises],
        }


def to_html(text: str) -> str:
    """Escape text as HTML and turn inline literals into <code> markup"""
    html = str(escape(text))
    html = LITERAL_PATTERN.sub(lambda m: f"<code>{m.group(1)}</code>", html)
    html = ROLE_PATTERN.sub(lambda m: f"<code>{m.group(1)}</code>", html)
    return html


class DocstringParser:
    """Parses Google style docstrings"""

    def parse_object(self, obj: Any) -> DocstringInfo:
        """Parse the docstring of a class or function (empty info if none)"""
        return self.parse(inspect.getdoc(obj))

    def parse(self, text: Optional[str]) -> DocstringInfo:
        """
        Parse a docstring

        Args:
            text: Raw docstring (may be None)

        Returns:
            DocstringInfo with HTML formatted texts
        """
        info = DocstringInfo()
        if not text:
            return info

        lines = inspect.cleandoc(text).splitlines()
        description_lines: List[str] = []
        sections: Dict[str, List[str]] = {}
        current: Optional[str] = None

        for line in lines:
            match = SECTION_PATTERN.match(line)
            if match and match.group(1).lower() in SECTION_ALIASES:
                current = SECTION_ALIASES[match.group(1).lower()]
                sections.setdefault(current, [])
                continue
            if current is not None and line and not line[0].isspace():
                # Unindented text ends the section
                current = None
            if current is None:
                description_lines.append(line)
            else:
                sections[current].append(line)

        description = "\n".join(description_lines).strip()
        paragraphs = [p.strip() for p in re.split(r"\n\s*\n", description) if p.strip()]
        if paragraphs:
            info.summary = to_html(" ".join(paragraphs[0].split()))
        info.description = to_html(description)

        for name, entry in self._entries(sections.get("args", [])):
            info.params[name.lstrip("*")] = to_html(entry)
        info.returns = to_html(self._text(sections.get("returns", [])))
        info.raises = [(name, to_html(entry)) for name, entry in self._entries(sections.get("raises", []))]

        logger.debug(f"Parsed docstring: {len(info.params)} params, {len(info.raises)} raises")
        return info

    @staticmethod
    def _entries(lines: List[str]) -> List[Tuple[str, str]]:
        """Split an indented `name (type): text` section into entries"""
        entries: List[Tuple[str, List[str]]] = []
        entry_indent: Optional[int] = None
        for line in lines:
            if not line.strip():
                continue
            indent = len(line) - len(line.lstrip())
            if entry_indent is None:
                entry_indent = indent
            match = ENTRY_PATTERN.match(line.strip())
            if indent <= entry_indent:
                if match:
                    entries.append((match.group(1), [match.group(3)]))
                else:
                    entries.append((line.strip().rstrip(":"), []))
            elif entries:
                entries[-1][1].append(line.strip())
        return [(name, " ".join(t for t in text if t)) for name, text in entries]

    @staticmethod
    def _text(lines: List[str]) -> str:
        text = " ".join(line.strip() for line in lines if line.strip())
        # "Returns:\n    Demo: the entity" -> drop the type prefix
        match = ENTRY_PATTERN.match(text)
        if match:
            return match.group(3)
        return text
