"""
Correction of words typed with the wrong keyboard layout (QWERTY <-> ЙЦУКЕН).
"""
from typing import Dict, Iterable, Optional, Set

from newsearch.models.spell_check import SpellCheckResult
from newsearch.spellcheck.base import SpellChecker

# Physical key positions: QWERTY key -> ЙЦУКЕН letter on the same key
EN_TO_RU: Dict[str, str] = {
    'q': 'й', 'w': 'ц', 'e': 'у', 'r': 'к', 't': 'е', 'y': 'н', 'u': 'г',
    'i': 'ш', 'o': 'щ', 'p': 'з', '[': 'х', ']': 'ъ',
    'a': 'ф', 's': 'ы', 'd': 'в', 'f': 'а', 'g': 'п', 'h': 'р', 'j': 'о',
    'k': 'л', 'l': 'д', ';': 'ж', "'": 'э',
    'z': 'я', 'x': 'ч', 'c': 'с', 'v': 'м', 'b': 'и', 'n': 'т', 'm': 'ь',
    ',': 'б', '.': 'ю', '/': '.',
    '`': 'ё', '~': 'Ё',
}

RU_TO_EN: Dict[str, str] = {ru: en for en, ru in EN_TO_RU.items()}

COMMON_RUSSIAN_WORDS = frozenset({
    # politics
    "путин", "зеленский", "трамп", "байден", "медведев", "лавров",
    "президент", "министр", "правительство", "парламент", "депутат",
    "выборы", "политика", "власть", "государство", "страна",
    # geography
    "россия", "украина", "америка", "китай", "европа", "азия",
    "москва", "петербург", "киев", "вашингтон", "лондон", "париж",
    # topics
    "новости", "экономика", "общество", "культура", "спорт",
    "международный", "российский", "украинский", "американский",
    "война", "мир", "договор", "соглашение", "санкции",
    # frequent words
    "который", "сказать", "время", "человек", "работа", "жизнь",
    "день", "рука", "делать", "вопрос", "дом", "сторона",
    "образ", "место", "право", "слово", "дело", "голова", "ребенок",
    "сила", "конец", "вид", "система", "часть", "город", "отношение",
})

COMMON_ENGLISH_WORDS = frozenset({
    "putin", "trump", "biden", "ukraine", "russia", "america", "china",
    "moscow", "kiev", "washington", "london", "paris", "berlin",
    "president", "minister", "government", "parliament", "election",
    "news", "politics", "economy", "society", "sport", "culture",
})


def _is_cyrillic(char: str) -> bool:
    return 'а' <= char <= 'я' or 'А' <= char <= 'Я' or char in 'ёЁ'


def _convert(word: str, mapping: Dict[str, str]) -> str:
    converted = []
    for char in word:
        mapped = mapping.get(char.lower())
        if mapped is None:
            converted.append(char)
        else:
            converted.append(mapped.upper() if char.isupper() else mapped)
    return "".join(converted)


class KeyboardLayoutSpellChecker(SpellChecker):
    """
    Convert words typed in the wrong layout.

    "gjkbnbrf" becomes "политика" because the result is a known Russian
    word; a conversion that produces an unknown word is discarded and the
    word is kept as typed.
    """

    name = "KeyboardLayout"
    priority = 2
    confidence = 0.9

    def __init__(self, russian_words: Optional[Iterable[str]] = None,
                 english_words: Optional[Iterable[str]] = None):
        self.russian_words: Set[str] = set(COMMON_RUSSIAN_WORDS)
        self.english_words: Set[str] = set(COMMON_ENGLISH_WORDS)
        if russian_words:
            self.russian_words.update(w.lower() for w in russian_words)
        if english_words:
            self.english_words.update(w.lower() for w in english_words)

    def try_correct(self, query: str) -> SpellCheckResult:
        words = query.split()
        if not words:
            return SpellCheckResult.no_change(query, self.name)

        corrected_words = []
        changed = False
        for word in words:
            corrected = self.correct_word(word)
            if corrected is not None and corrected.lower() != word.lower():
                corrected_words.append(corrected)
                changed = True
            else:
                corrected_words.append(word)

        if not changed:
            return SpellCheckResult.no_change(query, self.name)
        return SpellCheckResult.correction(query, " ".join(corrected_words), self.name, self.confidence)

    def correct_word(self, word: str) -> Optional[str]:
        """Layout-converted word if the conversion is a known word, else None."""
        if not word:
            return None

        if self._looks_like_english_layout(word):
            russian = _convert(word, EN_TO_RU)
            if russian.lower() in self.russian_words:
                return russian

        if any(_is_cyrillic(c) for c in word):
            english = _convert(word, RU_TO_EN)
            if english.lower() in self.english_words:
                return english

        return None

    @staticmethod
    def _looks_like_english_layout(word: str) -> bool:
        # ASCII letters plus the punctuation keys that carry Russian letters
        has_letter = False
        for char in word:
            if char.isascii() and char.isalpha():
                has_letter = True
            elif char.lower() not in EN_TO_RU:
                return False
        return has_letter
