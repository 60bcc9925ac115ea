"""
User glossaries for a single translation request.

A glossary is a list of (source, target) overrides supplied with a
request. It is shown to the model in the prompt and then enforced on the
model output by literal substitution. Glossaries are request-scoped:
they are never merged into the static terminology table and never
persisted here.

This module handles:
- The ``GlossaryTerm`` value object and a small ``Glossary`` container
- Loading glossaries from CSV / tab-separated files
- ``apply_glossary``: ordered, case-insensitive, global substitution
"""

from __future__ import annotations

import csv
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator


@dataclass(frozen=True)
class GlossaryTerm:
    """A user-supplied override: ``source`` text becomes ``target``."""
    source: str
    target: str

    @classmethod
    def from_dict(cls, data: dict) -> GlossaryTerm:
        return cls(source=str(data["source"]), target=str(data["target"]))


@dataclass
class Glossary:
    """Ordered collection of glossary terms.

    Order matters: substitution runs entry by entry in this order.
    """
    terms: list[GlossaryTerm] = field(default_factory=list)
    name: str = "custom"

    def __len__(self) -> int:
        return len(self.terms)

    def __iter__(self) -> Iterator[GlossaryTerm]:
        return iter(self.terms)

    def add(self, source: str, target: str) -> None:
        self.terms.append(GlossaryTerm(source, target))

    def as_tuple(self) -> tuple[GlossaryTerm, ...]:
        return tuple(self.terms)

    def to_prompt_string(self, max_entries: int = 50) -> str:
        """Format the glossary for inclusion in an LLM prompt."""
        lines = [f'- "{t.source}" → "{t.target}"' for t in self.terms[:max_entries]]
        if len(self.terms) > max_entries:
            lines.append(f"- ... and {len(self.terms) - max_entries} more terms")
        return "\n".join(lines)


def as_terms(glossary: Iterable | None) -> list[GlossaryTerm]:
    """Normalise a glossary given as terms, dicts or (source, target) pairs."""
    terms = []
    for item in glossary or ():
        if isinstance(item, GlossaryTerm):
            terms.append(item)
        elif isinstance(item, dict):
            terms.append(GlossaryTerm.from_dict(item))
        else:
            source, target = item
            terms.append(GlossaryTerm(str(source), str(target)))
    return terms


def apply_glossary(text: str, glossary: Iterable | None) -> str:
    """Replace every glossary source with its target.

    Entries are applied in the order supplied, each as a
    case-insensitive, global, literal replacement over the text produced
    by the previous entries. This is a single forward pass: a later
    entry can match text inserted by an earlier one.

    Example:
        >>> apply_glossary("The Grantor and the grantor", [GlossaryTerm("Grantor", "X")])
        'The X and the X'
    """
    result = text or ""
    for term in as_terms(glossary):
        if not term.source:
            continue
        pattern = re.compile(re.escape(term.source), re.IGNORECASE)
        # callable replacement: targets are literal, never regex templates
        result = pattern.sub(lambda _m, target=term.target: target, result)
    return result


# ============================================================================
# Loading Functions
# ============================================================================

def load_glossary_csv(
    path: str | Path,
    source_col: int = 0,
    target_col: int = 1,
    has_header: bool = True,
) -> Glossary:
    """Load a glossary from a CSV file.

    Expected format (default):
        source_term,target_term

    Rows with fewer than two columns or an empty side are skipped.
    """
    path = Path(path)
    terms = []

    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        if has_header:
            next(reader, None)

        for row in reader:
            if len(row) <= max(source_col, target_col):
                continue
            source = row[source_col].strip()
            target = row[target_col].strip()
            if source and target:
                terms.append(GlossaryTerm(source, target))

    return Glossary(terms=terms, name=path.stem)


def load_glossary_txt(path: str | Path, separator: str = "\t") -> Glossary:
    """Load a glossary from a separator-delimited text file.

    Format: source_term<separator>target_term, ``#`` starts a comment line.
    """
    path = Path(path)
    terms = []

    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            parts = line.split(separator, 1)
            if len(parts) == 2:
                source, target = parts[0].strip(), parts[1].strip()
                if source and target:
                    terms.append(GlossaryTerm(source, target))

    return Glossary(terms=terms, name=path.stem)


def load_glossary(path: str | Path) -> Glossary:
    """Load a glossary, picking the format from the file extension."""
    path = Path(path)
    if path.suffix.lower() == ".csv":
        return load_glossary_csv(path)
    return load_glossary_txt(path)
