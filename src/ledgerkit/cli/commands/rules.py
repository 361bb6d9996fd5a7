"""Mapping rule commands."""

import click
from ledgerkit.domain.classifier import order_rules
from ledgerkit.domain.rules import RuleCatalog, load_rule_set_file, priority_band, standard_rule_set
from ledgerkit.domain.entities import MappingRule, PatternKind
from ledgerkit.domain.errors import DomainError
from ledgerkit.cli.error_handling import handle_domain_error


@click.group()
def rules_group():
    """Manage mapping rules."""
    pass


@rules_group.command("add")
@click.argument("name", metavar="NAME")
@click.argument("pattern", metavar="PATTERN")
@click.argument("account_code", metavar="ACCOUNT")
@click.option(
    "--kind",
    type=click.Choice([kind.value for kind in PatternKind]),
    default=PatternKind.SUBSTRING.value,
    show_default=True,
    help="How PATTERN is matched",
)
@click.option("--priority", type=int, required=True, help="Higher priorities are checked first")
@click.option("--inactive", is_flag=True, help="Add the rule deactivated")
@click.pass_context
def add_rule(ctx, name: str, pattern: str, account_code: str, kind: str, priority: int, inactive: bool):
    """Add a mapping rule.

    Matching is case-sensitive. Reserved priority bands: 15 and above
    override everything, 10-14 specific, 8-9 standard, below 8 generic.

    Examples:
        ledgerkit rules add "Bank Fees" FEE 9600 --priority 20
        ledgerkit rules add "Education" "(COLLEGE|SCHOOL)" 9300 --kind regex --priority 5
    """
    db = ctx.obj["db"]
    catalog = RuleCatalog(db)

    rule = MappingRule(
        name=name,
        pattern_kind=PatternKind(kind),
        pattern=pattern,
        account_code=account_code,
        priority=priority,
        active=not inactive,
    )
    try:
        catalog.add_rule(ctx.obj["company_id"], rule)
        click.echo(f"Added rule '{name}' -> {account_code} (priority {priority}, {priority_band(priority).value})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@rules_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include inactive rules")
@click.pass_context
def list_rules(ctx, show_all: bool):
    """List rules in the order the classifier checks them."""
    db = ctx.obj["db"]
    catalog = RuleCatalog(db)
    company_id = ctx.obj["company_id"]

    if show_all:
        rules = order_rules(catalog.list_rules(company_id))
    else:
        rules = catalog.active_rules(company_id)
    if not rules:
        click.echo("No rules found.")
        return

    click.echo("\nMapping rules:")
    click.echo("-" * 100)
    for rule in rules:
        status = "" if rule.active else " (inactive)"
        click.echo(
            f"{rule.priority:3d} | {rule.name:35s} | {rule.pattern_kind.value:9s} | "
            f"{rule.pattern[:30]:30s} | {rule.account_code}{status}"
        )


@rules_group.command("load")
@click.argument("path", required=False, type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def load_rules(ctx, path: str | None):
    """Load a rule-set file, replacing rules with the same name.

    Without PATH the standard rule set shipped with ledgerkit is loaded.
    """
    db = ctx.obj["db"]
    catalog = RuleCatalog(db)

    try:
        rule_set = load_rule_set_file(path) if path is not None else standard_rule_set()
        count = catalog.load_rule_set(ctx.obj["company_id"], rule_set)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Loaded {count} rules (rule set version {rule_set.version})")


@rules_group.command("test")
@click.argument("description", metavar="DESCRIPTION")
@click.pass_context
def test_rules(ctx, description: str):
    """Show which rule a description would be classified by."""
    db = ctx.obj["db"]
    catalog = RuleCatalog(db)

    classifier = catalog.classifier(ctx.obj["company_id"])
    rule = classifier.match(description)
    if rule is None:
        click.echo("No match (transaction would stay unclassified)")
        return
    click.echo(f"Matched rule '{rule.name}' (priority {rule.priority}) -> {rule.account_code}")


@rules_group.command("deactivate")
@click.argument("name", metavar="NAME")
@click.pass_context
def deactivate_rule(ctx, name: str):
    """Deactivate a rule."""
    db = ctx.obj["db"]
    catalog = RuleCatalog(db)

    try:
        catalog.deactivate_rule(ctx.obj["company_id"], name)
        click.echo(f"Deactivated rule '{name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@rules_group.command("remove")
@click.argument("name", metavar="NAME")
@click.pass_context
def remove_rule(ctx, name: str):
    """Delete a rule."""
    db = ctx.obj["db"]
    catalog = RuleCatalog(db)

    try:
        catalog.remove_rule(ctx.obj["company_id"], name)
        click.echo(f"Removed rule '{name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rules_group, name="rules")
