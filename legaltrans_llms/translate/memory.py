from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from legaltrans_llms.languages import normalize_language


@dataclass
class MemoryEntry:
    source: str
    target: str
    source_lang: str
    target_lang: str
    document_type: Optional[str] = None
    usage_count: int = 1
    last_used: datetime = field(default_factory=datetime.now)
    sequence: int = 0

    def to_dict(self) -> dict:
        return {
            "sourceText": self.source,
            "targetText": self.target,
            "sourceLang": self.source_lang,
            "targetLang": self.target_lang,
            "documentType": self.document_type,
            "usageCount": self.usage_count,
            "lastUsedAt": self.last_used.isoformat(),
        }


def _keywords(text: str, limit: int = 5) -> list[str]:
    return [w for w in text.lower().split() if len(w) > 3][:limit]


class TranslationMemory:
    """In-process translation memory.

    Stores approved source/target pairs so later prompts can reuse the
    same wording. Saving an identical pair again only bumps its usage
    count. Nothing is persisted; callers may serialize ``snapshot()``.
    """

    def __init__(self):
        self._entries: list[MemoryEntry] = []
        self._tick = 0

    def __len__(self) -> int:
        return len(self._entries)

    def _touch(self, entry: MemoryEntry) -> None:
        # sequence orders entries touched within the same clock tick
        self._tick += 1
        entry.last_used = datetime.now()
        entry.sequence = self._tick

    def add(
        self,
        source: str,
        target: str,
        source_lang: str,
        target_lang: str,
        document_type: Optional[str] = None,
    ) -> Optional[MemoryEntry]:
        if not source or not target:
            return None
        source_lang, target_lang = normalize_language(source_lang), normalize_language(target_lang)

        for entry in self._entries:
            if (entry.source, entry.target, entry.source_lang, entry.target_lang) == (
                source, target, source_lang, target_lang
            ):
                entry.usage_count += 1
                self._touch(entry)
                return entry

        entry = MemoryEntry(source, target, source_lang, target_lang, document_type)
        self._touch(entry)
        self._entries.append(entry)
        return entry

    def find_similar(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        limit: int = 5,
    ) -> list[MemoryEntry]:
        """Entries sharing a keyword with ``text``.

        Keywords are the first five lowercase words longer than three
        characters; an entry matches when its source contains any of
        them. Most used first, then most recently used.
        """
        keywords = _keywords(text or "")
        if not keywords:
            return []
        source_lang, target_lang = normalize_language(source_lang), normalize_language(target_lang)

        matches = [
            e for e in self._entries
            if e.source_lang == source_lang
            and e.target_lang == target_lang
            and any(k in e.source.lower() for k in keywords)
        ]
        matches.sort(key=lambda e: (e.usage_count, e.sequence), reverse=True)
        return matches[:limit]

    def snapshot(self) -> list[tuple[str, str]]:
        return [(e.source, e.target) for e in self._entries]

    def stats(self) -> dict:
        return {
            "total_pairs": len(self._entries),
            "total_usage": sum(e.usage_count for e in self._entries),
        }

    def contextual_prompt(self, text: str, source_lang: str, target_lang: str, limit: int = 5) -> str:
        matches = self.find_similar(text, source_lang, target_lang, limit=limit)
        if not matches:
            return ""
        joined = "\n".join(f"- {e.source} -> {e.target}" for e in matches)
        return (
            "Reuse these prior translations for consistency (do not retranslate them, just honor the terminology):\n"
            f"{joined}"
        )
