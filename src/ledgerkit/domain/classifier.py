"""Rule-based transaction classifier.

The classifier walks the rules in priority order (highest first, catalog
insertion order between equal priorities) and returns the account of the
first rule whose pattern matches. It is greedy on purpose: a few narrow,
high-priority rules pre-empt the broad catch-alls below them.

Matching is case-sensitive and locale-independent. An empty description never
matches. A regular-expression rule that does not compile is skipped and
logged, never raised to the caller.
"""

import logging
import re
from typing import Callable, Iterable, Optional

from ledgerkit.domain.entities import (
    ClassificationResult,
    MappingRule,
    PatternKind,
    UNCLASSIFIED,
)
from ledgerkit.domain.errors import InvalidPatternError, ValidationError

logger = logging.getLogger(__name__)

Matcher = Callable[[str], bool]


def order_rules(rules: Iterable[MappingRule]) -> list[MappingRule]:
    """Order rules by priority descending.

    The sort is stable, so rules with equal priority keep the order they are
    given in (catalog insertion order when called with catalog rows).
    """
    return sorted(rules, key=lambda rule: -rule.priority)


def match_pattern(kind: PatternKind, pattern: str, description: str) -> bool:
    """Match a literal pattern of the given kind against a description."""
    if kind == PatternKind.SUBSTRING:
        return pattern in description
    if kind == PatternKind.PREFIX:
        return description.startswith(pattern)
    if kind == PatternKind.SUFFIX:
        return description.endswith(pattern)
    if kind == PatternKind.EXACT:
        return description == pattern
    raise ValidationError(f"Pattern kind '{kind}' is not a literal kind")


def compile_rule(rule: MappingRule) -> Matcher:
    """Build a matcher for one rule.

    Raises:
        InvalidPatternError: If a regular-expression pattern does not compile
        ValidationError: If the pattern is empty or the kind is unknown
    """
    if not rule.pattern:
        raise ValidationError(f"Rule '{rule.name}' has an empty pattern")
    try:
        kind = PatternKind(rule.pattern_kind)
    except ValueError:
        raise ValidationError(f"Rule '{rule.name}' has unknown pattern kind '{rule.pattern_kind}'")

    if kind == PatternKind.REGEX:
        try:
            regex = re.compile(rule.pattern)
        except re.error as e:
            raise InvalidPatternError(rule.name, rule.pattern, str(e)) from e
        return lambda description: regex.search(description) is not None

    pattern = rule.pattern
    return lambda description: match_pattern(kind, pattern, description)


class Classifier:
    """Assigns an account code to a description from an ordered rule set."""

    def __init__(self, rules: Iterable[MappingRule]):
        """Compile the active rules once.

        Args:
            rules: Mapping rules; inactive rules are ignored
        """
        self.rules: list[MappingRule] = []
        self.invalid_rules: list[InvalidPatternError] = []
        self._matchers: list[tuple[MappingRule, Matcher]] = []

        for rule in order_rules(r for r in rules if r.active):
            try:
                matcher = compile_rule(rule)
            except ValidationError as e:
                logger.warning("Skipping mapping rule '%s': %s", rule.name, e)
                if isinstance(e, InvalidPatternError):
                    self.invalid_rules.append(e)
                continue
            self.rules.append(rule)
            self._matchers.append((rule, matcher))

    def match(self, description: Optional[str]) -> Optional[MappingRule]:
        """Return the first matching rule, or None."""
        if not description:
            return None
        for rule, matcher in self._matchers:
            if matcher(description):
                return rule
        return None

    def classify(self, description: Optional[str]) -> ClassificationResult:
        """Classify a description.

        Returns:
            The winning rule's account, or ``UNCLASSIFIED`` when nothing matches
        """
        rule = self.match(description)
        if rule is None:
            return UNCLASSIFIED
        return ClassificationResult(account_code=rule.account_code, rule_name=rule.name)
