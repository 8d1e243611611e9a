"""Prioritized category rules: (kind, pattern, canonical) evaluated in order."""

from typing import Iterable, Tuple

import polars as pl

from .fields import blank_to_null

Rule = Tuple[str, object, str]


def _normalized(expr: pl.Expr) -> pl.Expr:
    return blank_to_null(expr).str.to_uppercase().str.replace_all("_", " ")


def _predicate(rule: Rule, expr: pl.Expr) -> pl.Expr:
    kind, pattern, _ = rule
    norm = _normalized(expr)
    if kind == "missing":
        return blank_to_null(expr).is_null()
    if kind == "equals":
        return (norm == pl.lit(pattern)).fill_null(False)
    if kind == "in":
        return norm.is_in(list(pattern)).fill_null(False)
    if kind == "contains":
        return norm.str.contains(str(pattern), literal=True).fill_null(False)
    if kind == "regex":
        return norm.str.contains(str(pattern)).fill_null(False)
    raise ValueError(f"Unknown category rule kind: {kind}")


def map_category(expr: pl.Expr, rules: Iterable[Rule]) -> pl.Expr:
    """Map raw text to a canonical category; unmatched text is title-cased."""
    fallback = blank_to_null(expr).str.to_lowercase().str.to_titlecase()
    chain = None
    for rule in rules:
        cond = _predicate(rule, expr)
        canonical = pl.lit(rule[2])
        chain = pl.when(cond).then(canonical) if chain is None else chain.when(cond).then(canonical)
    if chain is None:
        return fallback
    return chain.otherwise(fallback)


def category_matched(expr: pl.Expr, rules: Iterable[Rule]) -> pl.Expr:
    matched = pl.lit(False)
    for rule in rules:
        matched = matched | _predicate(rule, expr)
    return matched
