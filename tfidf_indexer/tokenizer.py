"""
HTML document processor: turns raw HTML into the ordered stream of index terms.
Extracts visible text, tokenizes it (Penn Treebank rules), lowercases, keeps
alphanumeric characters and applies Porter stemming.
"""

import re
import warnings
from typing import Protocol

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning, MarkupResemblesLocatorWarning
from bs4.builder import ParserRejectedMarkup
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

from nltk.stem import PorterStemmer
from nltk.tokenize import TreebankWordTokenizer

from .errors import DocumentReadError

_STEMMER = PorterStemmer()
_WORD_TOKENIZER = TreebankWordTokenizer()
_NON_ALNUM = re.compile(r"[^a-z0-9]")


class DocumentProcessor(Protocol):
    def process_text(self, raw_text: str) -> list[str] | None:
        """Return the document's terms in order; None or [] if it has none."""
        ...


def extract_text_from_html(html_content: str) -> str:
    """
    Extract visible text from HTML content, stripping tags and scripts.
    """
    soup = BeautifulSoup(html_content, "lxml")
    # Remove script and style elements
    for element in soup(["script", "style"]):
        element.decompose()
    return soup.get_text(separator=" ", strip=True)


def tokenize(text: str, min_length: int = 1) -> list[str]:
    """
    Tokenize text into words with NLTK's Treebank tokenizer, which handles
    contractions, punctuation and hyphenation without a corpus download.
    Returns lowercase, alphanumeric-only tokens of at least min_length characters.
    """
    if not text:
        return []
    tokens = []
    for line in text.splitlines():
        for word in _WORD_TOKENIZER.tokenize(line):
            # Drops punctuation tokens like "n't", ","
            token = _NON_ALNUM.sub("", word.lower())
            if len(token) >= min_length:
                tokens.append(token)
    return tokens


def stem_tokens(tokens: list[str]) -> list[str]:
    """Stem a list of tokens."""
    return [_STEMMER.stem(t) for t in tokens]


class HtmlDocumentProcessor:
    def __init__(self, use_stemming: bool = True, min_length: int = 1) -> None:
        self.use_stemming = use_stemming
        self.min_length = min_length

    def process_text(self, raw_text: str) -> list[str] | None:
        """Raises DocumentReadError when the parser rejects the markup."""
        try:
            text = extract_text_from_html(raw_text)
        except ParserRejectedMarkup as e:
            raise DocumentReadError(f"Could not parse HTML: {e}") from e
        tokens = tokenize(text, min_length=self.min_length)
        if not tokens:
            return None
        if self.use_stemming:
            tokens = stem_tokens(tokens)
        return tokens
