"""
Query parser for keyword search.

Parses the free-text query syntax and transforms it into an FTS5 MATCH
expression against the full-text fields of the index.

Supported syntax:
- bare terms, combined with OR by default: `cnn yolo`
- required / excluded terms: `+cnn -rnn`, `NOT rnn`
- explicit operators between operands: `cnn AND yolo`, `cnn OR yolo`
- quoted phrases: `"object detection"`
- grouping: `(cnn OR rnn) AND yolo`
- field prefix on any operand: `content:yolo`

Every term reaches FTS5 as a quoted string, so FTS5 keywords and
punctuation in user input are never interpreted as operators.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from ..core import get_logger, QueryParserError
from ..database.schema import Schema, build_default_schema

logger = get_logger(__name__)


MUST = "must"
SHOULD = "should"
MUST_NOT = "must_not"

BINARY_OPERATORS = ("AND", "OR")


@dataclass
class Token:
    kind: str
    value: str = ""


@dataclass
class Term:
    text: str
    phrase: bool = False
    field: Optional[str] = None


@dataclass
class Group:
    clauses: List[Tuple[str, Union[Term, "Group"]]] = field(default_factory=list)
    field: Optional[str] = None


class QueryParser:
    """
    Parses user queries into FTS5 MATCH expressions.

    Only full-text fields of the schema are searchable; exact-match
    fields such as `path` are rejected.
    """

    def __init__(self, schema: Schema = None):
        """
        Initialize the parser.

        Args:
            schema: Index schema. Defaults to the standard three-field schema.
        """
        self.schema = schema or build_default_schema()

    def parse(self, query: str) -> Optional[str]:
        """
        Parse a query into an FTS5 MATCH expression.

        Args:
            query: Raw user input.

        Returns:
            MATCH expression, or None when the query can match nothing
            (empty input, or no positive term).

        Raises:
            QueryParserError: If the query is not valid syntax.
        """
        group = self._parse_tree(query)
        if group is None:
            return None

        expression = self._render_group(group)
        logger.debug(f"Parsed query {query!r} -> {expression!r}")
        return expression

    def _parse_tree(self, query: str) -> Optional[Group]:
        """Parse the query into its clause tree, None for blank input."""
        if not query or not query.strip():
            return None

        self._query = query
        self._tokens = self._tokenize(query)
        self._pos = 0

        group = self._parse_group()

        if self._peek() is not None:
            self._error("unbalanced parentheses: unexpected ')'")

        return group

    def _error(self, reason: str):
        raise QueryParserError(self._query, reason, query=self._query)

    def _tokenize(self, query: str) -> List[Token]:
        """Split the raw query into tokens."""
        tokens = []
        i = 0
        length = len(query)

        while i < length:
            char = query[i]

            if char.isspace():
                i += 1

            elif char in "()":
                tokens.append(Token(char))
                i += 1

            elif char == '"':
                end = query.find('"', i + 1)
                if end == -1:
                    self._error("unbalanced quotes")
                tokens.append(Token("phrase", query[i + 1:end]))
                i = end + 1

            elif char in "+-":
                if i + 1 >= length or query[i + 1].isspace() or query[i + 1] == ")":
                    self._error(f"dangling operator '{char}'")
                tokens.append(Token(char))
                i += 1

            else:
                start = i
                while i < length and not query[i].isspace() and query[i] not in '()"':
                    i += 1
                word = query[start:i]

                field_name, colon, rest = word.partition(":")
                if colon and field_name:
                    tokens.append(Token("field", field_name))
                    if rest:
                        tokens.append(Token("word", rest))
                elif word in BINARY_OPERATORS or word == "NOT":
                    tokens.append(Token(word))
                else:
                    tokens.append(Token("word", word))

        return tokens

    def _peek(self) -> Optional[Token]:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _next(self) -> Optional[Token]:
        token = self._peek()
        self._pos += 1
        return token

    def _parse_group(self) -> Group:
        """Parse operands up to the end of input or a closing parenthesis."""
        clauses = []
        pending_operator = None

        while True:
            token = self._peek()

            if token is None or token.kind == ")":
                break

            if token.kind in BINARY_OPERATORS:
                if not clauses or pending_operator:
                    self._error(f"dangling operator '{token.kind}'")
                pending_operator = self._next().kind
                continue

            occur, node = self._parse_clause()

            if pending_operator == "AND":
                if clauses and clauses[-1][0] == SHOULD:
                    clauses[-1] = (MUST, clauses[-1][1])
                if occur == SHOULD:
                    occur = MUST

            pending_operator = None

            if node is not None:
                clauses.append((occur, node))

        if pending_operator:
            self._error(f"dangling operator '{pending_operator}'")

        return Group(clauses=clauses)

    def _parse_clause(self) -> Tuple[str, Optional[Union[Term, Group]]]:
        """Parse one operand with its optional +, -, NOT prefix."""
        occur = SHOULD
        token = self._next()

        if token.kind == "+":
            occur = MUST
            token = self._next()
        elif token.kind == "-":
            occur = MUST_NOT
            token = self._next()

        if token is not None and token.kind == "NOT":
            occur = MUST_NOT
            token = self._next()

        field_name = None
        if token is not None and token.kind == "field":
            field_name = self._check_field(token.value)
            token = self._next()

        if token is None:
            self._error("query ends where an operand is expected")

        if token.kind == "(":
            group = self._parse_group()
            closing = self._next()
            if closing is None or closing.kind != ")":
                self._error("unbalanced parentheses: missing ')'")
            if not group.clauses:
                self._error("empty parentheses")
            group.field = field_name
            return occur, group

        if token.kind == "word":
            return occur, self._make_term(token.value, False, field_name)

        if token.kind == "phrase":
            return occur, self._make_term(token.value, True, field_name)

        self._error(f"unexpected '{token.value or token.kind}'")

    @staticmethod
    def _make_term(text: str, phrase: bool, field_name: Optional[str]) -> Optional[Term]:
        # text without any word character produces no token
        if not any(char.isalnum() for char in text):
            return None
        return Term(text=text, phrase=phrase, field=field_name)

    def _check_field(self, name: str) -> str:
        """Validate a field prefix against the schema."""
        if not self.schema.has_field(name):
            self._error(f"field '{name}' does not exist")

        if self.schema.get_field(name) not in self.schema.text_fields:
            self._error(f"field '{name}' is not full-text searchable")

        return name

    @staticmethod
    def _quote(text: str) -> str:
        return '"' + text.replace('"', '""') + '"'

    def _render_node(self, node: Union[Term, Group]) -> Optional[str]:
        if isinstance(node, Term):
            rendered = self._quote(node.text)
        else:
            inner = self._render_group(node)
            if inner is None:
                return None
            rendered = f"({inner})"

        if node.field:
            return f"{node.field} : {rendered}"
        return rendered

    def _render_group(self, group: Group) -> Optional[str]:
        """
        Render a group: required operands are AND-ed, otherwise optional
        operands are OR-ed; excluded operands are subtracted with NOT.
        """
        must, should, must_not = [], [], []

        for occur, node in group.clauses:
            rendered = self._render_node(node)

            if occur == MUST:
                if rendered is None:
                    return None
                must.append(rendered)
            elif rendered is not None:
                (should if occur == SHOULD else must_not).append(rendered)

        if must:
            expression = " AND ".join(must)
        elif should:
            expression = " OR ".join(should)
        else:
            return None

        for excluded in must_not:
            expression = f"({expression}) NOT {excluded}"

        return expression

    def extract_terms(self, query: str) -> List[str]:
        """
        Extract the positive terms of a query.

        Useful for locating matches in page text.

        Args:
            query: Raw query text.

        Returns:
            Terms and phrases that are not excluded, in query order.
        """
        group = self._parse_tree(query)
        if group is None:
            return []
        return self._collect(group, excluded=False)

    def _collect(self, group: Group, excluded: bool) -> List[str]:
        terms = []
        for occur, node in group.clauses:
            node_excluded = excluded or occur == MUST_NOT
            if isinstance(node, Group):
                terms.extend(self._collect(node, node_excluded))
            elif not node_excluded:
                terms.append(node.text)
        return terms


if __name__ == "__main__":
    parser = QueryParser()

    test_queries = [
        "convolutional",
        "cnn yolo",
        "+cnn -rnn",
        '"object detection" AND yolo',
        "(cnn OR rnn) AND NOT lstm",
        "content:anchor",
        "-only negative",
    ]

    for q in test_queries:
        print(f"  {q!r} -> {parser.parse(q)!r}")

    for bad in ['"unterminated', "(cnn", "cnn AND", "path:data/a.pdf"]:
        try:
            parser.parse(bad)
        except QueryParserError as e:
            print(f"  {bad!r} -> {e.message}")
