"""Parser for web-search style query text.

Understands the same syntax as PostgreSQL's websearch_to_tsquery():

- bare words must all match: `deploy failed`
- quoted text matches as a phrase: `"connection reset"`
- a leading minus excludes a word or phrase: `deploy -staging`
- the word `or` separates alternatives: `"sad cat" or "fat rat"`

Alternatives bind looser than the implicit AND, so `a b or c` means
`(a AND b) OR c`.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Term:
    """A word or a phrase (several adjacent words)."""

    text: str

    @property
    def is_phrase(self) -> bool:
        return len(self.text.split()) > 1


@dataclass
class Alternative:
    """Terms that must all match, and terms that must not."""

    include: list[Term] = field(default_factory=list)
    exclude: list[Term] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.include and not self.exclude


@dataclass
class WebSearchQuery:
    """Parsed query: any one alternative has to match."""

    raw: str
    alternatives: list[Alternative] = field(default_factory=list)

    @property
    def searchable(self) -> list[Alternative]:
        """Alternatives that can match something.

        An alternative made only of exclusions would match almost every
        message, so it is dropped.
        """
        return [alt for alt in self.alternatives if alt.include]

    def is_empty(self) -> bool:
        return not self.searchable


def parse_websearch(text: str) -> WebSearchQuery:
    """Parse query text into alternatives of included and excluded terms."""
    query = WebSearchQuery(raw=text)
    current = Alternative()
    pos = 0
    length = len(text)

    while pos < length:
        if text[pos].isspace():
            pos += 1
            continue

        negate = False
        if text[pos] == "-" and pos + 1 < length and not text[pos + 1].isspace():
            negate = True
            pos += 1

        if text[pos] == '"':
            end = text.find('"', pos + 1)
            if end == -1:
                end = length
            term_text = " ".join(text[pos + 1 : end].split())
            pos = end + 1
            quoted = True
        else:
            end = pos
            while end < length and not text[end].isspace() and text[end] != '"':
                end += 1
            term_text = text[pos:end]
            pos = end
            quoted = False

        # Terms without letters or digits produce no tokens
        if not any(ch.isalnum() for ch in term_text):
            continue

        if not quoted and not negate and term_text.lower() == "or":
            if not current.is_empty():
                query.alternatives.append(current)
                current = Alternative()
            continue

        if negate:
            current.exclude.append(Term(term_text))
        else:
            current.include.append(Term(term_text))

    if not current.is_empty():
        query.alternatives.append(current)

    return query


def _quote_fts5(term: Term) -> str:
    # FTS5 string literal; the tokenizer splits it into a phrase
    return '"' + term.text.replace('"', '""') + '"'


def to_fts5_match(query: WebSearchQuery) -> str | None:
    """Render a parsed query as an SQLite FTS5 MATCH expression.

    Every term is quoted so user input never reaches the FTS5 query
    grammar.

    Returns:
        The MATCH expression, or None if the query cannot match anything.
    """
    groups = []
    for alternative in query.searchable:
        expression = " AND ".join(_quote_fts5(term) for term in alternative.include)
        for term in alternative.exclude:
            expression += f" NOT {_quote_fts5(term)}"
        groups.append(f"({expression})")

    if not groups:
        return None
    return " OR ".join(groups)


def to_websearch_text(query: WebSearchQuery) -> str:
    """Render a parsed query back as websearch_to_tsquery() input.

    Only searchable alternatives are kept, so PostgreSQL matches the same
    messages as the FTS5 expression. Every term is quoted; a quoted single
    word means the same as the bare word.
    """
    groups = []
    for alternative in query.searchable:
        terms = [f'"{term.text}"' for term in alternative.include]
        terms.extend(f'-"{term.text}"' for term in alternative.exclude)
        groups.append(" ".join(terms))
    return " or ".join(groups)
