"""Tests for the web-search query parser."""

import pytest

from slackvault.infrastructure.persistence.fulltext.websearch import (
    Term,
    parse_websearch,
    to_fts5_match,
    to_websearch_text,
)


class TestParseWebsearch:
    """Tests for parse_websearch."""

    def test_bare_words(self) -> None:
        """Bare words are all required."""
        query = parse_websearch("deploy failed")

        assert len(query.alternatives) == 1
        assert query.alternatives[0].include == [Term("deploy"), Term("failed")]
        assert query.alternatives[0].exclude == []

    def test_quoted_phrase(self) -> None:
        """Quoted text becomes a single phrase term."""
        query = parse_websearch('"connection   reset" peer')

        include = query.alternatives[0].include
        assert include == [Term("connection reset"), Term("peer")]
        assert include[0].is_phrase
        assert not include[1].is_phrase

    def test_unterminated_quote(self) -> None:
        """An unterminated quote runs to the end of the text."""
        query = parse_websearch('"connection reset')

        assert query.alternatives[0].include == [Term("connection reset")]

    def test_excluded_word_and_phrase(self) -> None:
        """Leading minus excludes words and phrases."""
        query = parse_websearch('deploy -staging -"dry run"')

        alternative = query.alternatives[0]
        assert alternative.include == [Term("deploy")]
        assert alternative.exclude == [Term("staging"), Term("dry run")]

    def test_lone_minus_is_a_word(self) -> None:
        """A minus followed by a space is not an exclusion."""
        query = parse_websearch("deploy - staging")

        assert query.alternatives[0].exclude == []

    def test_or_splits_alternatives(self) -> None:
        """The word `or` separates alternatives, case-insensitively."""
        query = parse_websearch('"sad cat" OR "fat rat" or dog')

        assert [alt.include for alt in query.alternatives] == [
            [Term("sad cat")],
            [Term("fat rat")],
            [Term("dog")],
        ]

    def test_quoted_or_is_a_term(self) -> None:
        """A quoted "or" is searched for literally."""
        query = parse_websearch('this "or" that')

        assert query.alternatives[0].include == [
            Term("this"),
            Term("or"),
            Term("that"),
        ]

    def test_dangling_or_is_ignored(self) -> None:
        """Leading or trailing `or` is dropped."""
        query = parse_websearch("or deploy or")

        assert [alt.include for alt in query.alternatives] == [[Term("deploy")]]

    @pytest.mark.parametrize("text", ["", "   ", "-deploy", '""', "or", "- "])
    def test_empty_queries(self, text: str) -> None:
        """Queries without positive terms are empty."""
        assert parse_websearch(text).is_empty()


class TestToFts5Match:
    """Tests for to_fts5_match."""

    def test_words_are_quoted_and_anded(self) -> None:
        assert to_fts5_match(parse_websearch("deploy failed")) == (
            '("deploy" AND "failed")'
        )

    def test_exclusions(self) -> None:
        assert to_fts5_match(parse_websearch('deploy -"dry run"')) == (
            '("deploy" NOT "dry run")'
        )

    def test_alternatives(self) -> None:
        assert to_fts5_match(parse_websearch("a b or c")) == (
            '("a" AND "b") OR ("c")'
        )

    def test_exclusion_only_alternative_dropped(self) -> None:
        assert to_fts5_match(parse_websearch("-a or b")) == '("b")'

    def test_stray_quote_starts_phrase(self) -> None:
        assert to_fts5_match(parse_websearch('say"hi')) == '("say" AND "hi")'

    def test_operators_are_quoted(self) -> None:
        assert to_fts5_match(parse_websearch("NOT deploy*")) == (
            '("NOT" AND "deploy*")'
        )

    def test_empty_query(self) -> None:
        assert to_fts5_match(parse_websearch("-deploy")) is None


class TestToWebsearchText:
    """Tests for to_websearch_text."""

    def test_words_and_phrases_are_quoted(self) -> None:
        query = parse_websearch('deploy "connection reset" -staging')

        assert to_websearch_text(query) == (
            '"deploy" "connection reset" -"staging"'
        )

    def test_alternatives(self) -> None:
        query = parse_websearch("deploy failed or rollback")

        assert to_websearch_text(query) == '"deploy" "failed" or "rollback"'

    def test_exclusion_only_alternative_dropped(self) -> None:
        """Both backends ignore alternatives made only of exclusions."""
        query = parse_websearch("deploy or -staging")

        assert to_websearch_text(query) == '"deploy"'
        assert to_fts5_match(query) == '("deploy")'

    def test_quoted_or_stays_a_term(self) -> None:
        query = parse_websearch('"or" deploy')

        assert to_websearch_text(query) == '"or" "deploy"'
