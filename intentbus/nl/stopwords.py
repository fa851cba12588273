"""English stop words dropped before intent matching.

Kept small and high-signal. Contractions appear both with and without the
apostrophe because the tokenizer preserves apostrophes.
"""

STOP_WORDS_EN: frozenset[str] = frozenset({
    # articles, conjunctions
    "a", "an", "the", "and", "or", "but", "so",
    # pronouns, possessives
    "i", "you", "he", "she", "it", "we", "they", "me", "him", "her", "us", "them",
    "my", "his", "its", "our", "their",
    # auxiliaries, modals
    "am", "are", "was", "were", "be", "been", "being",
    "do", "does", "did", "doing",
    "have", "has", "had", "having",
    "can", "could", "may", "might", "shall", "should", "will", "would", "must",
    # prepositions
    "to", "of", "in", "on", "at", "for", "from", "by", "with", "about", "as",
    "into", "over", "after", "before", "between", "under", "above", "out", "up", "down",
    # determiners, wh-words, negation
    "that", "this", "these", "those", "there", "here", "then", "than",
    "what", "which", "who", "whom", "whose", "when", "where", "why", "how",
    "not", "no", "nor", "if", "because", "while", "until", "once",
    # contractions
    "im", "i'm", "ive", "i've", "id", "i'd", "ill", "i'll",
    "youre", "you're", "youve", "you've", "youd", "you'd", "youll", "you'll",
    "hes", "he's", "shes", "she's", "it's", "we're", "weve", "we've", "well", "we'll",
    "theyre", "they're", "theyve", "they've", "theyd", "they'd", "theyll", "they'll",
    "cant", "can't", "dont", "don't", "doesnt", "doesn't", "isnt", "isn't",
    "arent", "aren't", "wont", "won't", "shouldnt", "shouldn't", "couldnt", "couldn't",
    # greetings (low signal for disambiguation)
    "ya", "yo", "hey", "hi", "hello",
})
