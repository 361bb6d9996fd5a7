"""Rule catalog: validated, company-scoped storage of mapping rules.

Rules are configuration data. They reach the catalog one at a time through
``add_rule`` or in bulk from a versioned rule-set file validated against
``RuleSet``. The catalog is the only consumer of raw rule rows; everything
downstream works with ``MappingRule`` entities ordered by ``active_rules``.

Priorities are plain integers, higher wins. Reserved bands:

    >= 15   override   unconditional winners (bank fee narratives)
    10..14  specific   named counterparties and exact narratives
    8..9    standard   ordinary business patterns
    < 8     generic    broad catch-alls
"""

import logging
from enum import Enum
from importlib import resources
from pathlib import Path
from typing import Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, model_validator

from ledgerkit.database.base import Database
from ledgerkit.domain.classifier import Classifier, compile_rule, order_rules
from ledgerkit.domain.entities import MappingRule, PatternKind
from ledgerkit.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_rule,
    rule_not_found,
)

logger = logging.getLogger(__name__)

PRIORITY_OVERRIDE = 15
PRIORITY_SPECIFIC = 10
PRIORITY_STANDARD = 8

STANDARD_RULES_RESOURCE = "standard_rules.json"


class PriorityBand(str, Enum):
    """Reserved priority bands."""

    OVERRIDE = "override"
    SPECIFIC = "specific"
    STANDARD = "standard"
    GENERIC = "generic"


def priority_band(priority: int) -> PriorityBand:
    """Return the reserved band a priority falls in."""
    if priority >= PRIORITY_OVERRIDE:
        return PriorityBand.OVERRIDE
    if priority >= PRIORITY_SPECIFIC:
        return PriorityBand.SPECIFIC
    if priority >= PRIORITY_STANDARD:
        return PriorityBand.STANDARD
    return PriorityBand.GENERIC


class RuleRow(BaseModel):
    """One rule as it appears in a rule-set file."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    pattern_kind: PatternKind = PatternKind.SUBSTRING
    pattern: str = Field(min_length=1)
    account_code: str = Field(min_length=1)
    priority: StrictInt
    active: StrictBool = True

    def to_rule(self) -> MappingRule:
        return MappingRule(
            name=self.name,
            pattern_kind=self.pattern_kind,
            pattern=self.pattern,
            account_code=self.account_code,
            priority=self.priority,
            active=self.active,
        )


class RuleSet(BaseModel):
    """A versioned set of rules, kept in file order."""

    model_config = ConfigDict(extra="forbid")

    version: str = Field(min_length=1)
    rules: list[RuleRow]

    @model_validator(mode="after")
    def check_unique_names(self) -> "RuleSet":
        seen = set()
        for row in self.rules:
            if row.name in seen:
                raise ValueError(f"duplicate rule name '{row.name}'")
            seen.add(row.name)
        return self

    def to_rules(self) -> list[MappingRule]:
        return [row.to_rule() for row in self.rules]


def parse_rule_set(content: str) -> RuleSet:
    """Parse and validate rule-set JSON.

    Raises:
        ValidationError: If the content does not match the rule-set schema
    """
    try:
        return RuleSet.model_validate_json(content)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid rule set: {e}") from e


def load_rule_set_file(path: str | Path) -> RuleSet:
    """Read and validate a rule-set file."""
    content = Path(path).read_text(encoding="utf-8")
    return parse_rule_set(content)


def standard_rule_set() -> RuleSet:
    """Return the rule set shipped with the package."""
    content = resources.files("ledgerkit").joinpath("data", STANDARD_RULES_RESOURCE).read_text(encoding="utf-8")
    return parse_rule_set(content)


def validate_rule(rule: MappingRule) -> None:
    """Check a rule before it enters the catalog.

    Raises:
        ValidationError: If name, pattern or account code is empty, or the
            priority is not an integer
        InvalidPatternError: If a regular-expression pattern does not compile
    """
    if not rule.name or not rule.name.strip():
        raise ValidationError("Rule name cannot be empty")
    if not rule.account_code or not rule.account_code.strip():
        raise ValidationError(f"Rule '{rule.name}' has an empty account code")
    if isinstance(rule.priority, bool) or not isinstance(rule.priority, int):
        raise ValidationError(f"Rule '{rule.name}' priority must be an integer, got {rule.priority!r}")
    compile_rule(rule)


class RuleCatalog:
    """Service for managing a company's mapping rules."""

    def __init__(self, db: Database):
        """Initialize rule catalog.

        Args:
            db: Database instance
        """
        self.db = db

    def add_rule(self, company_id: int, rule: MappingRule) -> int:
        """Add a new rule at the end of the company's catalog.

        Args:
            company_id: Company ID
            rule: Rule to add

        Returns:
            Rule ID

        Raises:
            ValidationError: If the rule is invalid
            ConflictError: If a rule with the same name already exists
        """
        validate_rule(rule)
        if self.db.get_mapping_rule(company_id, rule.name) is not None:
            raise ConflictError(duplicate_rule(company_id, rule.name))
        self._warn_unknown_account(company_id, rule)

        return self.db.create_mapping_rule(
            company_id=company_id,
            name=rule.name,
            pattern_kind=PatternKind(rule.pattern_kind).value,
            pattern=rule.pattern,
            account_code=rule.account_code,
            priority=rule.priority,
            active=rule.active,
        )

    def upsert_rule(self, company_id: int, rule: MappingRule) -> int:
        """Add a rule, or replace the definition of the rule with the same name.

        A replaced rule keeps its catalog position, so tie-breaks between
        equal priorities do not move when a rule is edited.
        """
        validate_rule(rule)
        existing = self.db.get_mapping_rule(company_id, rule.name)
        if existing is None:
            return self.add_rule(company_id, rule)

        self._warn_unknown_account(company_id, rule)
        self.db.replace_mapping_rule(
            rule_id=existing.id,
            pattern_kind=PatternKind(rule.pattern_kind).value,
            pattern=rule.pattern,
            account_code=rule.account_code,
            priority=rule.priority,
            active=rule.active,
        )
        return existing.id

    def load_rule_set(self, company_id: int, rule_set: RuleSet) -> int:
        """Upsert every rule of a rule set as one unit.

        Returns:
            Number of rules loaded
        """
        rules = rule_set.to_rules()
        for rule in rules:
            validate_rule(rule)

        with self.db.atomic():
            for rule in rules:
                self.upsert_rule(company_id, rule)

        logger.info(
            "Loaded rule set %s for company %s (%d rules)", rule_set.version, company_id, len(rules)
        )
        return len(rules)

    def get_rule(self, company_id: int, name: str) -> Optional[MappingRule]:
        """Get a rule by name."""
        return self.db.get_mapping_rule(company_id, name)

    def list_rules(self, company_id: int) -> list[MappingRule]:
        """List all rules, active or not, in catalog insertion order."""
        return self.db.list_mapping_rules(company_id)

    def active_rules(self, company_id: int) -> list[MappingRule]:
        """Return active rules ordered by priority descending, insertion order on ties."""
        return order_rules(self.db.list_mapping_rules(company_id, active_only=True))

    def deactivate_rule(self, company_id: int, name: str) -> None:
        """Deactivate a rule so it no longer takes part in classification.

        Raises:
            NotFoundError: If the rule does not exist
        """
        rule = self._require_rule(company_id, name)
        self.db.set_mapping_rule_active(rule.id, False)

    def activate_rule(self, company_id: int, name: str) -> None:
        """Re-activate a deactivated rule."""
        rule = self._require_rule(company_id, name)
        self.db.set_mapping_rule_active(rule.id, True)

    def remove_rule(self, company_id: int, name: str) -> None:
        """Delete a rule from the catalog."""
        rule = self._require_rule(company_id, name)
        self.db.delete_mapping_rule(rule.id)

    def classifier(self, company_id: int) -> Classifier:
        """Build a classifier over the company's active rules."""
        return Classifier(self.active_rules(company_id))

    def _require_rule(self, company_id: int, name: str) -> MappingRule:
        rule = self.db.get_mapping_rule(company_id, name)
        if rule is None:
            raise NotFoundError(rule_not_found(company_id, name))
        return rule

    def _warn_unknown_account(self, company_id: int, rule: MappingRule) -> None:
        if self.db.get_account(company_id, rule.account_code) is None:
            logger.warning(
                "Rule '%s' targets account %s which is not in the chart of accounts for company %s",
                rule.name,
                rule.account_code,
                company_id,
            )
