"""Tests for the rule-based classifier."""

import logging

import pytest

from ledgerkit.domain.classifier import Classifier, compile_rule, match_pattern, order_rules
from ledgerkit.domain.entities import MappingRule, PatternKind, UNCLASSIFIED
from ledgerkit.domain.errors import InvalidPatternError, ValidationError


def rule(name, pattern, account, priority, kind=PatternKind.SUBSTRING, active=True):
    return MappingRule(
        name=name,
        pattern_kind=kind,
        pattern=pattern,
        account_code=account,
        priority=priority,
        active=active,
    )


def test_specific_rule_beats_generic_rule():
    """Test a specific higher-priority rule wins over a generic one that also matches."""
    classifier = Classifier(
        [
            rule("Insurance", "INSURANCE", "8800", 5),
            rule("Insurance Chauke Salaries", "INSURANCE CHAUKE", "8100", 10),
        ]
    )

    result = classifier.classify("INSURANCE CHAUKE")

    assert result.matched
    assert result.account_code == "8100"
    assert result.rule_name == "Insurance Chauke Salaries"


def test_override_rule_beats_standard_rule():
    """Test the highest priority wins when several rules match."""
    classifier = Classifier(
        [
            rule("Professional Services", "SERVICE", "8700", 8),
            rule("Bank Fees", "FEE", "9600", 20),
        ]
    )

    assert classifier.classify("MONTHLY SERVICE FEE").account_code == "9600"


def test_equal_priority_uses_insertion_order():
    classifier = Classifier(
        [
            rule("First", "PAYMENT", "8100", 9),
            rule("Second", "PAYMENT", "8700", 9),
        ]
    )

    assert classifier.classify("IMMEDIATE PAYMENT").rule_name == "First"


def test_no_match_is_unclassified():
    """Test an unmatched description is a normal result, not an error."""
    classifier = Classifier([rule("Bank Fees", "FEE", "9600", 20)])

    result = classifier.classify("CREDIT TRANSFER")

    assert result == UNCLASSIFIED
    assert not result.matched
    assert result.account_code is None


@pytest.mark.parametrize("description", ["", None])
def test_empty_description_never_matches(description):
    classifier = Classifier(
        [
            rule("Anything", ".*", "8100", 10, kind=PatternKind.REGEX),
            rule("Exact empty", "X", "8100", 5, kind=PatternKind.EXACT),
        ]
    )

    assert classifier.classify(description) == UNCLASSIFIED


def test_matching_is_case_sensitive():
    classifier = Classifier([rule("Insurance", "INSURANCE", "8800", 5)])

    assert classifier.classify("insurance premium") == UNCLASSIFIED
    assert classifier.classify("Insurance premium") == UNCLASSIFIED
    assert classifier.classify("INSURANCE PREMIUM").account_code == "8800"


def test_regex_matches_anywhere_in_description():
    """Test regular expressions use search semantics."""
    classifier = Classifier(
        [rule("Education", "(COLLEGE|SCHOOL|UNIVERSITY)", "9300", 5, kind=PatternKind.REGEX)]
    )

    assert classifier.classify("DEBIT ORDER ST MARYS SCHOOL FEES MARCH").account_code == "9300"


def test_regex_with_groups_and_wildcards():
    classifier = Classifier(
        [
            rule(
                "Director Loan Reimbursement",
                "STONE JEFFR.*MAPHOSA.*(REIMBURSE|REPAYMENT)",
                "4000",
                10,
                kind=PatternKind.REGEX,
            )
        ]
    )

    assert classifier.classify("CREDIT STONE JEFFREY MAPHOSA REPAYMENT MAR").account_code == "4000"
    assert classifier.classify("CREDIT STONE JEFFREY MAPHOSA").matched is False


def test_invalid_regex_is_skipped_and_logged(caplog):
    """Test a rule whose regex does not compile fails closed without breaking other rules."""
    with caplog.at_level(logging.WARNING, logger="ledgerkit.domain.classifier"):
        classifier = Classifier(
            [
                rule("Broken", "SALARY(", "8100", 20, kind=PatternKind.REGEX),
                rule("Salaries", "SALARY", "8100-001", 8),
            ]
        )

    assert [r.name for r in classifier.rules] == ["Salaries"]
    assert len(classifier.invalid_rules) == 1
    assert classifier.invalid_rules[0].rule_name == "Broken"
    assert "Broken" in caplog.text
    assert classifier.classify("SALARY MARCH").account_code == "8100-001"


def test_inactive_rules_are_ignored():
    classifier = Classifier(
        [
            rule("Bank Fees", "FEE", "9600", 20, active=False),
            rule("Professional Services", "SERVICE", "8700", 8),
        ]
    )

    assert classifier.classify("MONTHLY SERVICE FEE").account_code == "8700"


@pytest.mark.parametrize(
    "kind,pattern,description,expected",
    [
        (PatternKind.PREFIX, "RTD-", "RTD-DEBIT AGAINST PAYERS AUTH", True),
        (PatternKind.PREFIX, "RTD-", "REVERSAL RTD-DEBIT", False),
        (PatternKind.SUFFIX, "CAPITALISED", "INTEREST CAPITALISED", True),
        (PatternKind.SUFFIX, "CAPITALISED", "CAPITALISED INTEREST", False),
        (PatternKind.EXACT, "BALANCE BROUGHT FORWARD", "BALANCE BROUGHT FORWARD", True),
        (PatternKind.EXACT, "BALANCE BROUGHT FORWARD", "BALANCE BROUGHT FORWARD 2024", False),
        (PatternKind.SUBSTRING, "FEE", "MONTHLY SERVICE FEE", True),
    ],
)
def test_literal_pattern_kinds(kind, pattern, description, expected):
    assert match_pattern(kind, pattern, description) is expected


def test_compile_rule_rejects_empty_pattern():
    with pytest.raises(ValidationError):
        compile_rule(rule("Empty", "", "8100", 5))


def test_compile_rule_raises_for_invalid_regex():
    with pytest.raises(InvalidPatternError) as exc_info:
        compile_rule(rule("Broken", "[A-Z", "8100", 5, kind=PatternKind.REGEX))
    assert exc_info.value.pattern == "[A-Z"


def test_order_rules_is_stable():
    rules = [
        rule("a", "A", "8100", 5),
        rule("b", "B", "8100", 10),
        rule("c", "C", "8100", 5),
        rule("d", "D", "8100", 10),
    ]

    assert [r.name for r in order_rules(rules)] == ["b", "d", "a", "c"]


@pytest.mark.parametrize(
    "specs",
    [
        [("FEE", 20), ("SERVICE", 8), ("INSURANCE", 5)],
        [("SERVICE", 8), ("FEE", 8), ("PAY", 8)],
        [("LOAN", 0), ("PAY", 25), ("LOAN", 25), ("INSURANCE", 3)],
        [("PAY", 10)],
    ],
)
@pytest.mark.parametrize(
    "description",
    ["MONTHLY SERVICE FEE", "LOAN PAY", "OLD MUTUAL INSURANCE", "NOTHING HERE", "", "PAYE SERVICE LOAN FEE"],
)
def test_classification_is_deterministic(specs, description):
    """Test repeated calls and freshly built classifiers agree."""
    rules = [rule(f"rule-{i}", pattern, f"{8000 + i}", priority) for i, (pattern, priority) in enumerate(specs)]

    first = Classifier(rules)
    second = Classifier(list(rules))

    result = first.classify(description)
    assert first.classify(description) == result
    assert second.classify(description) == result


@pytest.mark.parametrize("generic_first", [True, False])
@pytest.mark.parametrize("low,high", [(0, 1), (5, 10), (9, 10), (14, 15), (8, 50)])
def test_higher_priority_always_wins(low, high, generic_first):
    """Test precedence does not depend on insertion order unless priorities tie."""
    specific = rule("specific", "INSURANCE CHAUKE", "8100", high)
    generic = rule("generic", "INSURANCE", "8800", low)
    rules = [generic, specific] if generic_first else [specific, generic]

    assert Classifier(rules).classify("PAYMENT INSURANCE CHAUKE").account_code == "8100"
