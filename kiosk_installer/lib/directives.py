"""Idempotent file directives.

A directive names a target file, knows how to tell whether its payload is
already there (present / absent / present-but-different) and how to add or
rewrite it. ``apply_directive`` drives one directive against the current file
contents; applying the same directive twice leaves the file untouched the
second time.

Variants, chosen by the step author:

- AppendDirective: substring/regex presence, append a line or block
- LineTokenDirective: single-line token files (cmdline.txt)
- RegexLineDirective: one setting per line (config.txt, autostart commands)
- MarkupAnchorDirective: insert before a closing tag (labwc rc.xml)
- FileDirective: whole file owned by the installer (units, keymaps)
"""

from __future__ import annotations

import logging
import re
import textwrap
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from ..errors import TargetMissingAnchor
from .files import FileWriter

logger = logging.getLogger(__name__)


class Presence(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    DIFFERENT = "different"


class Outcome(str, Enum):
    CREATED = "created"
    APPENDED = "appended"
    REPLACED = "replaced"
    SKIPPED = "skipped"
    SKIPPED_WITH_WARNING = "skipped-with-warning"


@dataclass(frozen=True)
class ApplyResult:
    path: Path
    outcome: Outcome
    detail: str = ""

    @property
    def changed(self) -> bool:
        return self.outcome in {Outcome.CREATED, Outcome.APPENDED, Outcome.REPLACED}

    @property
    def is_warning(self) -> bool:
        return self.outcome is Outcome.SKIPPED_WITH_WARNING

    def as_dict(self) -> dict:
        return {"path": str(self.path), "outcome": self.outcome.value, "detail": self.detail}


def _join(contents: str, payload: str) -> str:
    if contents and not contents.endswith("\n"):
        contents += "\n"
    return contents + payload


def _any_match(patterns: Tuple[str, ...], text: str) -> bool:
    return any(re.search(p, text, re.MULTILINE) for p in patterns)


class Directive:
    """Base class; subclasses are frozen dataclasses declaring ``path``."""

    path: Path
    privileged: bool = False
    create_missing: bool = True

    @property
    def template(self) -> Optional[str]:
        """Full file contents to write when the target is missing."""
        return None

    def detect(self, contents: str) -> Presence:
        raise NotImplementedError

    def insert(self, contents: str) -> str:
        raise NotImplementedError

    def replace(self, contents: str) -> str:
        raise NotImplementedError

    def describe(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class AppendDirective(Directive):
    """Append ``payload`` unless one of ``markers`` (regexes) already matches.

    Without markers the stripped payload itself is the marker. Markers let
    equivalent spellings (``chromium`` vs ``chromium-browser``) count as present.
    """

    path: Path
    payload: str
    markers: Tuple[str, ...] = ()
    privileged: bool = False
    create_missing: bool = True

    def _markers(self) -> Tuple[str, ...]:
        return self.markers or (re.escape(self.payload.strip()),)

    def detect(self, contents: str) -> Presence:
        return Presence.PRESENT if _any_match(self._markers(), contents) else Presence.ABSENT

    def insert(self, contents: str) -> str:
        return _join(contents, self.payload)

    def describe(self) -> str:
        return f"append {self.payload.strip().splitlines()[0]!r}"


@dataclass(frozen=True)
class LineTokenDirective(Directive):
    """Ensure tokens on the first line of a space-separated token file.

    ``supersedes`` are regexes matched against whole tokens; a superseded
    token is replaced in place by the missing tokens (e.g. console=tty1 ->
    console=tty3). Remaining lines are preserved untouched.
    """

    path: Path
    tokens: Tuple[str, ...]
    supersedes: Tuple[str, ...] = ()
    prepend: bool = False
    privileged: bool = False
    create_missing: bool = True

    def _is_superseded(self, token: str) -> bool:
        return token not in self.tokens and any(re.fullmatch(p, token) for p in self.supersedes)

    def detect(self, contents: str) -> Presence:
        line = contents.partition("\n")[0]
        toks = line.split()
        if any(self._is_superseded(t) for t in toks):
            return Presence.DIFFERENT
        if all(t in toks for t in self.tokens):
            return Presence.PRESENT
        return Presence.ABSENT

    def insert(self, contents: str) -> str:
        line, sep, rest = contents.partition("\n")
        toks = line.split()
        missing = " ".join(t for t in self.tokens if t not in toks)
        if not line.strip():
            new_line = missing
        elif self.prepend:
            new_line = f"{missing} {line.lstrip()}"
        else:
            new_line = f"{line.rstrip()} {missing}"
        return new_line + sep + rest

    def replace(self, contents: str) -> str:
        line, sep, rest = contents.partition("\n")
        toks = line.split()
        missing = [t for t in self.tokens if t not in toks]
        out: list[str] = []
        placed = False
        for t in toks:
            if self._is_superseded(t):
                if not placed:
                    out.extend(missing)
                    placed = True
                continue
            out.append(t)
        return " ".join(out) + sep + rest

    def describe(self) -> str:
        return f"tokens {' '.join(self.tokens)!r}"


@dataclass(frozen=True)
class RegexLineDirective(Directive):
    """Own one setting line.

    Active lines matching ``pattern`` are rewritten to ``line``; if there are
    none, the first line matching ``reclaim`` (typically the commented-out
    default) is rewritten instead; otherwise ``line`` is appended.
    """

    path: Path
    line: str
    pattern: str
    reclaim: Optional[str] = None
    privileged: bool = False
    create_missing: bool = True

    def _active(self, lines: list[str]) -> list[str]:
        return [ln for ln in lines if re.match(self.pattern, ln)]

    def detect(self, contents: str) -> Presence:
        lines = contents.splitlines()
        active = self._active(lines)
        if active:
            if all(ln.strip() == self.line for ln in active):
                return Presence.PRESENT
            return Presence.DIFFERENT
        if self.reclaim and any(re.match(self.reclaim, ln) for ln in lines):
            return Presence.DIFFERENT
        return Presence.ABSENT

    def insert(self, contents: str) -> str:
        return _join(contents, self.line)

    def replace(self, contents: str) -> str:
        lines = contents.splitlines(keepends=True)
        has_active = bool(self._active([ln.rstrip("\r\n") for ln in lines]))
        reclaimed = False
        out: list[str] = []
        for raw in lines:
            body = raw.rstrip("\r\n")
            ending = raw[len(body):]
            if has_active and re.match(self.pattern, body):
                out.append(self.line + ending)
            elif not has_active and not reclaimed and self.reclaim and re.match(self.reclaim, body):
                out.append(self.line + ending)
                reclaimed = True
            else:
                out.append(raw)
        return "".join(out)

    def describe(self) -> str:
        return f"line {self.line!r}"


@dataclass(frozen=True)
class MarkupAnchorDirective(Directive):
    """Insert a markup snippet immediately before a closing tag.

    The whole ``document`` is written when the file is missing or blank. An
    existing file without ``anchor`` is left alone (TargetMissingAnchor).
    """

    path: Path
    snippet: str
    anchor: str
    document: str
    markers: Tuple[str, ...]
    indent: str = "  "
    privileged: bool = False
    create_missing: bool = True

    @property
    def template(self) -> Optional[str]:
        return self.document

    def detect(self, contents: str) -> Presence:
        return Presence.PRESENT if _any_match(self.markers, contents) else Presence.ABSENT

    def insert(self, contents: str) -> str:
        idx = contents.find(self.anchor)
        if idx < 0:
            raise TargetMissingAnchor(f"{self.anchor} not found in {self.path}")

        snippet = self.snippet if self.snippet.endswith("\n") else self.snippet + "\n"
        line_start = contents.rfind("\n", 0, idx) + 1
        lead = contents[line_start:idx]
        if lead.strip():
            # Anchor shares its line with other markup.
            block = "\n" + textwrap.indent(snippet, _lead_ws(lead) + self.indent)
            return contents[:idx] + block + contents[idx:]
        block = textwrap.indent(snippet, lead + self.indent)
        return contents[:line_start] + block + contents[line_start:]

    def describe(self) -> str:
        return f"insert before {self.anchor}"


def _lead_ws(text: str) -> str:
    return text[: len(text) - len(text.lstrip())]


@dataclass(frozen=True)
class FileDirective(Directive):
    """Whole-file content; any difference is overwritten."""

    path: Path
    contents: str
    privileged: bool = False
    create_missing: bool = True

    @property
    def template(self) -> Optional[str]:
        return self.contents

    def detect(self, contents: str) -> Presence:
        return Presence.PRESENT if contents == self.contents else Presence.DIFFERENT

    def replace(self, contents: str) -> str:
        return self.contents

    def describe(self) -> str:
        return "full file"


def apply_directive(directive: Directive, *, writer: FileWriter) -> ApplyResult:
    """Bring one directive's target file into the desired state."""

    path = Path(directive.path)
    current = writer.read_text(path, privileged=directive.privileged)

    if current is None and not directive.create_missing:
        logger.warning("%s not found; skipping %s", str(path), directive.describe())
        return ApplyResult(path=path, outcome=Outcome.SKIPPED_WITH_WARNING, detail=f"{path} not found")

    blank = current is None or not current.strip()
    template = directive.template
    if blank and template is not None:
        writer.write_text(path, template, privileged=directive.privileged)
        logger.info("%s: created (%s)", str(path), directive.describe())
        return ApplyResult(path=path, outcome=Outcome.CREATED, detail=directive.describe())

    contents = current or ""
    presence = directive.detect(contents)
    if presence is Presence.PRESENT:
        logger.info("%s: already present (%s)", str(path), directive.describe())
        return ApplyResult(path=path, outcome=Outcome.SKIPPED, detail=directive.describe())

    if presence is Presence.DIFFERENT:
        new_contents = directive.replace(contents)
        outcome = Outcome.REPLACED
    else:
        try:
            new_contents = directive.insert(contents)
        except TargetMissingAnchor as e:
            logger.warning("%s; please add the change manually", e)
            return ApplyResult(path=path, outcome=Outcome.SKIPPED_WITH_WARNING, detail=str(e))
        outcome = Outcome.CREATED if blank else Outcome.APPENDED

    if new_contents == contents:
        return ApplyResult(path=path, outcome=Outcome.SKIPPED, detail=directive.describe())

    writer.write_text(path, new_contents, privileged=directive.privileged)
    logger.info("%s: %s (%s)", str(path), outcome.value, directive.describe())
    return ApplyResult(path=path, outcome=outcome, detail=directive.describe())
