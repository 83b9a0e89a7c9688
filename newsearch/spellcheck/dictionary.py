"""
Dictionary-based correction: known misspellings plus nearest word by edit distance.
"""
from typing import Dict, Iterable, Optional, Set

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

from newsearch.models.spell_check import SpellCheckResult
from newsearch.spellcheck.base import SpellChecker

KNOWN_MISSPELLINGS: Dict[str, Set[str]] = {
    "путин": {"путен", "пуьин", "путтин", "пытин", "путеин", "пуин"},
    "зеленский": {"зеленскый", "зеленски", "зиленский", "зеленьский", "зелинский"},
    "трамп": {"трамб", "трампп", "трамм", "трумп"},
    "медведев": {"медвидев", "медведдев", "мидведев"},
    "лавров": {"лавроф", "лавроов", "лаврав"},
    "байден": {"байдин", "бойден"},
    "россия": {"расия", "росия", "россиа", "рассия"},
    "украина": {"укранна", "украйна", "укрина", "украинна"},
    "америка": {"амерка", "америкка", "амирика"},
    "китай": {"кытай", "кетай"},
    "москва": {"масква", "моксва", "москав", "мосва"},
    "петербург": {"питербург", "петерьург", "петербурк"},
    "киев": {"кыев", "киив", "кеив", "кийев"},
    "вашингтон": {"вашынгтон", "вашингтан", "ващингтон"},
    "президент": {"презедент", "призидент", "президнт"},
    "правительство": {"правительтво", "правителство"},
    "парламент": {"парламнт"},
}

EXTRA_KNOWN_WORDS = frozenset({
    "новости", "политика", "экономика", "общество", "спорт", "культура",
    "международный", "российский", "украинский", "американский",
    "выборы", "санкции", "война", "мир", "договор", "соглашение",
    "министр", "депутат", "сенатор", "губернатор", "мэр",
})


class DictionarySpellChecker(SpellChecker):
    """Correct words against a small built-in dictionary of news vocabulary."""

    name = "Dictionary"
    priority = 1
    confidence = 0.8

    def __init__(self, max_distance: int = 2, extra_words: Optional[Iterable[str]] = None):
        self.max_distance = max_distance
        self.misspellings: Dict[str, str] = {
            wrong: correct
            for correct, variants in KNOWN_MISSPELLINGS.items()
            for wrong in variants
        }
        self.known_words: Set[str] = set(KNOWN_MISSPELLINGS) | set(EXTRA_KNOWN_WORDS)
        if extra_words:
            self.known_words.update(w.lower() for w in extra_words)

    def find_best_match(self, word: str) -> Optional[str]:
        word = word.lower()
        if word in self.known_words:
            return word
        if word in self.misspellings:
            return self.misspellings[word]

        matches = process.extract(
            word,
            self.known_words,
            scorer=Levenshtein.distance,
            score_cutoff=self.max_distance,
            limit=None,
        )
        candidates = [(candidate, distance) for candidate, distance, _ in matches if distance > 0]
        if not candidates:
            return None
        # Closest first, longer words win ties
        candidates.sort(key=lambda c: (c[1], -len(c[0]), c[0]))
        return candidates[0][0]

    def try_correct(self, query: str) -> SpellCheckResult:
        words = query.lower().split()
        corrected_words = []
        changed = False
        for word in words:
            match = self.find_best_match(word)
            if match is not None and match != word:
                corrected_words.append(match)
                changed = True
            else:
                corrected_words.append(word)

        if not changed:
            return SpellCheckResult.no_change(query, self.name)
        return SpellCheckResult.correction(query, " ".join(corrected_words), self.name, self.confidence)
