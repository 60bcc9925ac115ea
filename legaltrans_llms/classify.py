"""
Heuristic document-type classification.

A legal document is tagged by the first rule in ``RULES`` whose keywords
occur in the text (case-insensitive substring match) or whose heading
pattern matches a whole line. Rules are ordered from the most specific
document type to the most generic one, so a "lease agreement" is a
lease and a power of attorney that mentions an agreement is still a
power of attorney. Keywords cover English and the regional surface forms
found in Hindi, Gujarati, Marathi and Kannada documents; English
keywords must begin a word.

Classification is total: every input maps to exactly one tag and the
function never raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache


class DocumentType(str, Enum):
    """Coarse legal document categories used to select prompt grounding."""
    AGREEMENT = "agreement"
    AFFIDAVIT = "affidavit"
    POWER_OF_ATTORNEY = "power_of_attorney"
    LEASE = "lease"
    WILL = "will"
    NOTICE = "notice"
    PETITION = "petition"
    APPEAL = "appeal"
    GENERAL = "general"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


@lru_cache(maxsize=None)
def _keyword_pattern(keyword: str) -> re.Pattern:
    # English keywords must start a word ("release" is not a lease);
    # Indic keywords are plain substrings.
    if keyword.isascii():
        return re.compile(r"\b" + re.escape(keyword))
    return re.compile(re.escape(keyword))


@dataclass(frozen=True)
class ClassificationRule:
    """One row of the classification table.

    ``headings`` are regexes matched against whole lines, for titles that
    are too ambiguous to use as keywords.
    """
    tag: DocumentType
    keywords: tuple[str, ...]
    headings: tuple[str, ...] = ()

    def matches(self, lowered: str) -> bool:
        if any(_keyword_pattern(k).search(lowered) for k in self.keywords):
            return True
        return any(re.search(h, lowered, re.MULTILINE) for h in self.headings)


RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(DocumentType.POWER_OF_ATTORNEY, (
        "power of attorney", "मुख्तारनामा", "मुखत्यारपत्र", "મુખત્યારનામું", "ಅಧಿಕಾರ ಪತ್ರ",
    )),
    ClassificationRule(DocumentType.AFFIDAVIT, (
        "affidavit", "शपथ पत्र", "प्रतिज्ञापत्र", "શપથપત્ર", "સોગંદનામું", "ಪ್ರಮಾಣ ಪತ್ರ",
    )),
    # bare "will" counts only as a title line of its own
    ClassificationRule(DocumentType.WILL, (
        "last will", "will and testament", "testament", "testator",
        "वसीयत", "मृत्युपत्र", "વસિયતનામું", "ಉಯಿಲು",
    ), headings=(r"^[ \t]*will[ \t]*$",)),
    ClassificationRule(DocumentType.LEASE, (
        "lease", "पट्टा", "भाडेपट्टा", "લીઝ", "ભાડાપટ્ટો", "ಗುತ್ತಿಗೆ",
    )),
    ClassificationRule(DocumentType.PETITION, (
        "petition", "याचिका", "અરજી", "ಅರ್ಜಿ",
    )),
    ClassificationRule(DocumentType.APPEAL, (
        "appeal", "अपील", "અપીલ", "ಮೇಲ್ಮನವಿ",
    )),
    ClassificationRule(DocumentType.AGREEMENT, (
        "agreement", "contract", "समझौता", "अनुबंध", "करार", "કરાર", "ಒಪ್ಪಂದ",
    )),
    ClassificationRule(DocumentType.NOTICE, (
        "notice", "नोटिस", "सूचना", "નોટિસ", "ಸೂಚನೆ", "ನೋಟಿಸ್",
    )),
)


def classify(text: str | None) -> DocumentType:
    """Detect the document type of raw text.

    Args:
        text: Extracted document text (may be empty or None)

    Returns:
        The tag of the first matching rule, or ``DocumentType.GENERAL``

    Example:
        >>> classify("This AGREEMENT is made between Party A and Party B")
        <DocumentType.AGREEMENT: 'agreement'>
    """
    lowered = (text or "").lower()
    for rule in RULES:
        if rule.matches(lowered):
            return rule.tag
    return DocumentType.GENERAL


def coerce_document_type(value: str | DocumentType | None) -> DocumentType | None:
    """Parse a user-supplied tag; unknown strings map to GENERAL, None stays None."""
    if value is None or isinstance(value, DocumentType):
        return value
    key = value.strip().lower().replace(" ", "_").replace("-", "_")
    if not key:
        return None
    try:
        return DocumentType(key)
    except ValueError:
        return DocumentType.GENERAL
