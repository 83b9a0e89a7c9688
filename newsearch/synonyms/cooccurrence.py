"""
Document co-occurrence analysis for synonym candidates.

Builds an inverted index word -> set of article indices and scores every pair
of words that share at least one article with the Jaccard coefficient of
their article sets. Pairs are enumerated through the index (words reachable
from a word's own articles), never over the full vocabulary square.

Candidate groups are star-shaped: an anchor maps only to its direct
neighbours. A~B and B~C does not make A~C.
"""
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set
import math

from newsearch.synonyms.options import MiningOptions
from newsearch.text.preprocessor import normalize
from newsearch.text.stop_words import StopWordsProvider
from newsearch.text.tokenizer import filter_by_frequency, tokenize_article, word_frequencies
from logger_config import logger


@dataclass(frozen=True)
class WordSimilarity:
    """Similarity of two words over the articles they appear in."""
    word1: str
    word2: str
    jaccard_similarity: float
    cosine_similarity: float
    co_occurrence_count: int
    word1_frequency: int
    word2_frequency: int

    def other(self, word: str) -> str:
        """The word paired with `word` in this similarity."""
        return self.word2 if word == self.word1 else self.word1


def jaccard(set1: Set[int], set2: Set[int]) -> float:
    if not set1 and not set2:
        return 0.0
    union = len(set1 | set2)
    return len(set1 & set2) / union if union else 0.0


class CoOccurrenceAnalyzer:
    """Find potential synonyms from co-occurrence in the same articles."""

    def __init__(self, stop_words: Optional[StopWordsProvider] = None):
        self.stop_words = stop_words or StopWordsProvider.create_default()
        self._index: Dict[str, Set[int]] = {}
        self.last_pairs_examined = 0

    def build_inverted_index(self, articles: Sequence, options: MiningOptions) -> Dict[str, Set[int]]:
        """
        Map every eligible word to the indices of the articles containing it.

        Eligible words pass the document-frequency bounds, the length bounds
        and are not excluded or forbidden.

        Args:
            articles: Corpus articles
            options: Mining options

        Returns:
            Inverted index
        """
        frequencies = word_frequencies(
            articles,
            stop_words=self.stop_words,
            include_titles=options.use_titles,
            include_content=options.use_content,
        )
        valid_words = filter_by_frequency(
            frequencies,
            min_frequency=options.min_word_frequency,
            max_frequency=options.max_word_frequency,
        )
        valid_words = {w for w in valid_words if options.within_length(w) and not options.is_excluded(w)}

        index: Dict[str, Set[int]] = {}
        for i, article in enumerate(articles):
            words = tokenize_article(
                article,
                stop_words=self.stop_words,
                include_titles=options.use_titles,
                include_content=options.use_content,
            )
            for word in words:
                if word in valid_words:
                    index.setdefault(word, set()).add(i)

        self._index = index
        return index

    def find_potential_synonyms(self, articles: Sequence,
                                options: Optional[MiningOptions] = None) -> Dict[str, List[WordSimilarity]]:
        """
        Score co-occurring word pairs and expose them per anchor word.

        Args:
            articles: Corpus articles
            options: Mining options (defaults if None)

        Returns:
            Mapping anchor -> neighbours sorted by similarity (descending),
            at most options.max_synonyms_per_word each
        """
        options = options or MiningOptions.create_default()
        self.last_pairs_examined = 0

        if not articles:
            logger.warning("No articles to analyze, no synonym candidates produced")
            self._index = {}
            return {}

        logger.info(f"Building inverted index from {len(articles)} articles")
        index = self.build_inverted_index(articles, options)
        logger.info(f"Index built, unique words: {len(index)}")

        # Forward index: article -> eligible words, used to reach co-occurring words only
        documents: List[Set[str]] = [set() for _ in range(len(articles))]
        for word, doc_ids in index.items():
            for doc_id in doc_ids:
                documents[doc_id].add(word)

        results: Dict[str, List[WordSimilarity]] = {}
        words = sorted(index)
        report_every = max(1, len(words) // 10)

        for position, word1 in enumerate(words, start=1):
            docs1 = index[word1]
            if len(docs1) < options.min_co_occurrences:
                continue

            # Intersection sizes with every later word sharing an article
            shared = Counter()
            for doc_id in docs1:
                for word2 in documents[doc_id]:
                    if word2 > word1:
                        shared[word2] += 1

            self.last_pairs_examined += len(shared)

            for word2, intersection in shared.items():
                if intersection < options.min_co_occurrences:
                    continue
                docs2 = index[word2]
                union = len(docs1) + len(docs2) - intersection
                similarity = intersection / union if union else 0.0
                if similarity < options.min_similarity_threshold:
                    continue

                pair = WordSimilarity(
                    word1=word1,
                    word2=word2,
                    jaccard_similarity=similarity,
                    cosine_similarity=intersection / math.sqrt(len(docs1) * len(docs2)),
                    co_occurrence_count=intersection,
                    word1_frequency=len(docs1),
                    word2_frequency=len(docs2),
                )
                results.setdefault(word1, []).append(pair)
                results.setdefault(word2, []).append(pair)

            if position % report_every == 0:
                logger.debug(f"Co-occurrence progress: {position}/{len(words)} words")

        for anchor, neighbours in results.items():
            neighbours.sort(key=lambda s: (-s.jaccard_similarity, s.other(anchor)))
            del neighbours[options.max_synonyms_per_word:]

        logger.info(
            f"Co-occurrence analysis done: {self.last_pairs_examined} co-occurring pairs examined, "
            f"{len(results)} words with candidates"
        )
        return results

    def group_synonyms(self, similarities: Dict[str, List[WordSimilarity]]) -> Dict[str, Set[str]]:
        """
        Turn per-anchor similarity lists into candidate groups.

        Each anchor keeps only its direct neighbours; groups are not merged
        or closed transitively.
        """
        groups: Dict[str, Set[str]] = {}
        for anchor, neighbours in similarities.items():
            members = {sim.other(anchor) for sim in neighbours}
            members.discard(anchor)
            if members:
                groups[anchor] = members
        return groups

    def similarity(self, word1: str, word2: str) -> float:
        """Jaccard similarity of two words over the last built index."""
        docs1 = self._index.get(normalize(word1), set())
        docs2 = self._index.get(normalize(word2), set())
        return jaccard(docs1, docs2)
