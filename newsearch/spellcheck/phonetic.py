"""
Correction by sound: words that are spelled as they are heard.

A simplified Russian Soundex maps letters that sound alike to the same
digit, so "путен" and "путин" share a code. Only words that belong to a
known phonetic group are corrected, always into the group's first word.
"""
from typing import Dict, Iterable, List, Optional, Sequence

from rapidfuzz.distance import Levenshtein

from newsearch.models.spell_check import SpellCheckResult
from newsearch.spellcheck.base import SpellChecker

SOUNDEX_MAP: Dict[str, str] = {
    # vowels
    'а': '0', 'о': '0',
    'у': '1', 'ы': '1', 'ю': '1',
    'и': '2', 'е': '2', 'ё': '2', 'э': '2', 'я': '2',
    # consonants
    'б': '1', 'п': '1',
    'в': '2', 'ф': '2',
    'г': '3', 'к': '3', 'х': '3',
    'д': '4', 'т': '4',
    'ж': '5', 'ш': '5', 'щ': '5', 'ч': '5',
    'з': '6', 'с': '6', 'ц': '6',
    'л': '7',
    'м': '8',
    'н': '9',
    'р': 'A',
    # silent
    'ь': '', 'ъ': '',
}

# First word of each group is the correct spelling
PHONETIC_GROUPS: List[Sequence[str]] = [
    ("путин", "пуьин", "путен"),
    ("трамп", "трамб", "трумп"),
    ("байден", "бойден", "байдин"),
    ("москва", "масква", "моксва"),
    ("киев", "кыев", "кеив"),
    ("россия", "расия", "росия"),
    ("украина", "укрина", "украйна"),
    ("президент", "презедент", "призидент"),
    ("правительство", "правителство"),
]


def russian_soundex(word: str) -> str:
    """
    Phonetic code of a word: its first letter followed by four symbols.

    Letters are mapped through SOUNDEX_MAP (unknown characters are kept),
    runs of the same symbol collapse into one, and the symbol of the first
    letter is replaced by the letter itself.

    Args:
        word: Word to encode

    Returns:
        Code such as "п4290", or "" for an empty word
    """
    if not word:
        return ""
    word = word.lower()

    compressed = []
    for char in word:
        for symbol in SOUNDEX_MAP.get(char, char):
            if not compressed or compressed[-1] != symbol:
                compressed.append(symbol)

    tail = "".join(compressed[1:]).ljust(4, '0')[:4]
    return word[0] + tail


class PhoneticSpellChecker(SpellChecker):
    """Correct misspellings that sound like a known word."""

    name = "Phonetic"
    priority = 3
    confidence = 0.75

    def __init__(self, groups: Optional[Iterable[Sequence[str]]] = None, max_distance: int = 2):
        self.max_distance = max_distance
        self.canonical_by_code: Dict[str, str] = {}
        for group in (PHONETIC_GROUPS if groups is None else groups):
            words = [w.lower() for w in group if w]
            if words:
                self.canonical_by_code[russian_soundex(words[0])] = words[0]

    def find_match(self, word: str) -> Optional[str]:
        """Canonical word sounding like word, or None."""
        word = word.lower()
        canonical = self.canonical_by_code.get(russian_soundex(word))
        if canonical is None or canonical == word:
            return None
        # Same code but a different word altogether
        if Levenshtein.distance(word, canonical, score_cutoff=self.max_distance) > self.max_distance:
            return None
        return canonical

    def try_correct(self, query: str) -> SpellCheckResult:
        words = query.lower().split()
        if not words:
            return SpellCheckResult.no_change(query, self.name)

        corrected_words = []
        changed = False
        for word in words:
            match = self.find_match(word)
            if match is not None:
                corrected_words.append(match)
                changed = True
            else:
                corrected_words.append(word)

        if not changed:
            return SpellCheckResult.no_change(query, self.name)
        return SpellCheckResult.correction(query, " ".join(corrected_words), self.name, self.confidence)
