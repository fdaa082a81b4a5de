"""
Model formulas as structured values.

A Formula names one outcome term, a tuple of predictor terms and whether
an intercept is included. Terms are built with small combinators rather
than parsed from strings:

    >>> from pyeconometrics.regression.formula import Formula, col, log, interact
    >>> f = Formula.build(log("sales"), ["rpdi", "conf", "q2", interact("q2", "rpdi")])
    >>> str(f)
    'log(sales) ~ rpdi + conf + q2 + q2:rpdi'

Formula.parse() accepts the familiar "y ~ a + b:c - 1" notation as a thin
convenience on top of the same combinators.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Union

from pyeconometrics.core.exceptions import InvalidParameterError

Transform = Literal['identity', 'log', 'reciprocal', 'power', 'scale']

_TRANSFORMS = ('identity', 'log', 'reciprocal', 'power', 'scale')


@dataclass(frozen=True)
class Term:
    """
    A single column, optionally transformed.

    Attributes:
        column: Source column name in the Table
        transform: One of 'identity', 'log', 'reciprocal', 'power', 'scale'
        degree: Exponent for 'power' (ignored otherwise)
    """
    column: str
    transform: Transform = 'identity'
    degree: int = 1

    def __post_init__(self) -> None:
        if not isinstance(self.column, str) or not self.column:
            raise InvalidParameterError(
                f"column: expected a non-empty string, got {self.column!r}",
                parameter='column', value=self.column,
            )
        if self.transform not in _TRANSFORMS:
            raise InvalidParameterError(
                f"transform must be one of {_TRANSFORMS}, got {self.transform!r}",
                parameter='transform', value=self.transform,
            )
        if self.transform == 'power':
            if isinstance(self.degree, bool) or not isinstance(self.degree, int) or self.degree < 1:
                raise InvalidParameterError(
                    f"degree must be an integer >= 1, got {self.degree!r}",
                    parameter='degree', value=self.degree,
                )

    @property
    def name(self) -> str:
        """Display name, in R's notation."""
        if self.transform == 'log':
            return f"log({self.column})"
        if self.transform == 'reciprocal':
            return f"I(1/{self.column})"
        if self.transform == 'power':
            return self.column if self.degree == 1 else f"I({self.column}^{self.degree})"
        if self.transform == 'scale':
            return f"scale({self.column})"
        return self.column

    @property
    def columns(self) -> tuple[str, ...]:
        return (self.column,)

    def interact(self, other: TermLike) -> Interaction:
        """Pairwise product of this term and another."""
        return Interaction(self, as_term(other))

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Interaction:
    """Pairwise product of two terms (R's a:b)."""
    left: Term
    right: Term

    def __post_init__(self) -> None:
        if not isinstance(self.left, Term) or not isinstance(self.right, Term):
            raise InvalidParameterError(
                "interactions are pairwise products of two plain terms"
            )
        if self.left == self.right:
            raise InvalidParameterError(
                f"cannot interact {self.left.name} with itself; use poly() instead",
                parameter='interaction', value=self.left.name,
            )

    @property
    def name(self) -> str:
        return f"{self.left.name}:{self.right.name}"

    @property
    def key(self) -> frozenset[str]:
        """Order-free identity: a:b and b:a span the same design columns."""
        return frozenset((self.left.name, self.right.name))

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(self.left.columns + self.right.columns))

    def __str__(self) -> str:
        return self.name


PredictorTerm = Union[Term, Interaction]
TermLike = Union[str, Term]


# === Combinators ===

def as_term(value: TermLike) -> Term:
    """Promote a column name to an identity Term."""
    if isinstance(value, Term):
        return value
    if isinstance(value, str):
        return Term(value)
    raise InvalidParameterError(
        f"expected a column name or Term, got {type(value).__name__}",
        parameter='term', value=value,
    )


def col(name: str) -> Term:
    return Term(name)


def log(name: str) -> Term:
    return Term(name, 'log')


def reciprocal(name: str) -> Term:
    return Term(name, 'reciprocal')


def poly(name: str, degree: int) -> Term:
    """The column raised to an integer power, R's I(x^d)."""
    return Term(name, 'power', degree)


def scale(name: str) -> Term:
    """Centered and unit-variance column; parameters are learned at fit time."""
    return Term(name, 'scale')


def interact(left: TermLike, right: TermLike) -> Interaction:
    return Interaction(as_term(left), as_term(right))


# === Formula ===

@dataclass(frozen=True)
class Formula:
    """
    Immutable regression formula.

    Attributes:
        outcome: Outcome term (may be transformed, never an interaction)
        predictors: Predictor terms in design-column order
        intercept: Whether an intercept column is added
    """
    outcome: Term
    predictors: tuple[PredictorTerm, ...]
    intercept: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.outcome, Term):
            raise InvalidParameterError(
                "outcome must be a single Term, not an interaction",
                parameter='outcome', value=self.outcome,
            )
        for term in self.predictors:
            if not isinstance(term, (Term, Interaction)):
                raise InvalidParameterError(
                    f"predictor {term!r} is not a Term or Interaction",
                    parameter='predictors', value=term,
                )
        if not self.predictors and not self.intercept:
            raise InvalidParameterError(
                "formula needs at least one predictor or an intercept",
                parameter='predictors', value=(),
            )
        seen: dict[object, str] = {}
        duplicates: list[str] = []
        for term in self.predictors:
            key = term.key if isinstance(term, Interaction) else term.name
            if key not in seen:
                seen[key] = term.name
            elif seen[key] == term.name:
                duplicates.append(term.name)
            else:
                duplicates.append(f"{seen[key]} = {term.name}")
        if duplicates:
            raise InvalidParameterError(
                f"duplicate predictor terms: {duplicates}",
                parameter='predictors', value=tuple(duplicates),
            )
        if self.outcome.column in self.predictor_columns:
            raise InvalidParameterError(
                f"outcome column {self.outcome.column!r} also appears as a predictor",
                parameter='outcome', value=self.outcome.column,
            )

    @classmethod
    def build(
        cls,
        outcome: TermLike,
        predictors: list[TermLike | Interaction] | tuple[TermLike | Interaction, ...] = (),
        *,
        intercept: bool = True,
    ) -> Formula:
        """Build a Formula from column names, Terms and Interactions."""
        terms = tuple(
            p if isinstance(p, Interaction) else as_term(p) for p in predictors
        )
        return cls(outcome=as_term(outcome), predictors=terms, intercept=intercept)

    @classmethod
    def parse(cls, text: str) -> Formula:
        """
        Parse R-style formula text.

        Supported: ``y ~ a + b``, ``log(y)``, ``I(1/x)``, ``I(x^2)``,
        ``scale(x)``, ``a:b``, ``a*b`` (expands to a + b + a:b), and
        ``- 1`` / ``+ 0`` to drop the intercept.
        """
        return _parse_formula(text)

    @property
    def columns(self) -> tuple[str, ...]:
        """Every referenced table column, outcome first, without repeats."""
        cols = [self.outcome.column]
        for term in self.predictors:
            cols.extend(term.columns)
        return tuple(dict.fromkeys(cols))

    @property
    def predictor_columns(self) -> tuple[str, ...]:
        cols: list[str] = []
        for term in self.predictors:
            cols.extend(term.columns)
        return tuple(dict.fromkeys(cols))

    @property
    def term_names(self) -> tuple[str, ...]:
        return tuple(t.name for t in self.predictors)

    def with_predictors(self, predictors: tuple[PredictorTerm, ...]) -> Formula:
        return Formula(outcome=self.outcome, predictors=predictors, intercept=self.intercept)

    def __str__(self) -> str:
        rhs = " + ".join(t.name for t in self.predictors)
        if not self.intercept:
            return f"{self.outcome.name} ~ {rhs} - 1"
        return f"{self.outcome.name} ~ {rhs or '1'}"


# === String convenience layer ===

_NAME = r"[A-Za-z_.][A-Za-z0-9_.]*"
_ATOM_PATTERNS = (
    (re.compile(rf"^log\(\s*({_NAME})\s*\)$"), lambda m: Term(m.group(1), 'log')),
    (re.compile(rf"^scale\(\s*({_NAME})\s*\)$"), lambda m: Term(m.group(1), 'scale')),
    (re.compile(rf"^I\(\s*1\s*/\s*({_NAME})\s*\)$"), lambda m: Term(m.group(1), 'reciprocal')),
    (re.compile(rf"^I\(\s*({_NAME})\s*\^\s*(\d+)\s*\)$"),
     lambda m: Term(m.group(1), 'power', int(m.group(2)))),
    (re.compile(rf"^({_NAME})$"), lambda m: Term(m.group(1))),
)


def _parse_atom(text: str) -> Term:
    text = text.strip()
    for pattern, make in _ATOM_PATTERNS:
        match = pattern.match(text)
        if match:
            return make(match)
    raise InvalidParameterError(f"cannot parse formula term {text!r}", parameter='formula', value=text)


def _parse_formula(text: str) -> Formula:
    if not isinstance(text, str) or text.count('~') != 1:
        raise InvalidParameterError(
            f"formula must contain exactly one '~', got {text!r}",
            parameter='formula', value=text,
        )
    lhs, rhs = (part.strip() for part in text.split('~'))
    outcome = _parse_atom(lhs)

    intercept = True
    predictors: list[PredictorTerm] = []
    # Split on + and - at top level (terms never contain bare +/-).
    for sign, chunk in re.findall(r"([+-]?)\s*([^+-]+)", rhs):
        chunk = chunk.strip()
        if chunk == '0' or (chunk == '1' and sign == '-'):
            intercept = False
            continue
        if chunk == '1':
            continue
        if sign == '-':
            raise InvalidParameterError(
                f"only '- 1' may be subtracted in a formula, got '- {chunk}'",
                parameter='formula', value=text,
            )
        if '*' in chunk:
            left, right = (_parse_atom(p) for p in chunk.split('*', 1))
            new_terms: list[PredictorTerm] = [left, right, Interaction(left, right)]
        elif ':' in chunk:
            left, right = (_parse_atom(p) for p in chunk.split(':', 1))
            new_terms = [Interaction(left, right)]
        else:
            new_terms = [_parse_atom(chunk)]
        for term in new_terms:
            if term not in predictors:
                predictors.append(term)

    return Formula(outcome=outcome, predictors=tuple(predictors), intercept=intercept)
