"""Command-line entrypoint for the RBAC validator."""
import asyncio
import json
import sys
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from .client import AzureAuthorizationAPI, BuiltInRoleLookupProvider
from .config import build_credential
from .errors import ConfigurationError
from .models import AzureValidatorSpec
from .runner import RuleOutcome, ValidatorRunner
from .validators import RBACRuleService, RoleAssignmentRuleService

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ERROR = 2


def load_spec(path: str) -> AzureValidatorSpec:
    """Load a validator spec from a YAML (or JSON) file.

    The file may hold the spec itself or a full AzureValidator document, in
    which case its ``spec`` key is used.
    """
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Cannot read validator spec {path}: {exc}") from exc
    if isinstance(data, dict) and isinstance(data.get("spec"), dict):
        data = data["spec"]
    if not isinstance(data, dict):
        raise ConfigurationError(f"Validator spec {path} is not a mapping")
    try:
        return AzureValidatorSpec.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid validator spec {path}: {exc}") from exc


async def run_spec(spec: AzureValidatorSpec) -> list[RuleOutcome]:
    credential = build_credential(spec.auth)
    try:
        async with AzureAuthorizationAPI(credential) as api:
            provider = BuiltInRoleLookupProvider(api)
            runner = ValidatorRunner(
                RoleAssignmentRuleService(api, provider),
                RBACRuleService(api, provider),
            )
            return await runner.run(spec)
    finally:
        await credential.close()


def exit_code(outcomes: list[RuleOutcome]) -> int:
    if any(o.error for o in outcomes):
        return EXIT_ERROR
    if all(o.succeeded for o in outcomes):
        return EXIT_OK
    return EXIT_FAILED


def _echo_outcome(outcome: RuleOutcome) -> None:
    if outcome.error:
        click.secho(
            f"[ERROR] {outcome.rule_kind} #{outcome.index}: {outcome.error}",
            fg="red", err=True,
        )
        return
    result = outcome.result
    color = "green" if result.succeeded else "yellow"
    click.secho(
        f"[{result.state.value}] {result.rule_identifier} ({result.validation_type}): "
        f"{result.message}",
        fg=color,
    )
    for failure in result.failures:
        click.echo(f"    - {failure}")


@click.group()
def cli():
    """RBAC validator command-line interface."""
    pass


@cli.command()
@click.argument("spec_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print outcomes as JSON.")
def validate(spec_file: str, as_json: bool):
    """Validate the role assignments described in SPEC_FILE."""
    try:
        spec = load_spec(spec_file)
        outcomes = asyncio.run(run_spec(spec))
    except ConfigurationError as exc:
        click.secho(f"Configuration error: {exc.message}", fg="red", err=True)
        sys.exit(EXIT_ERROR)
    except Exception as exc:
        click.secho(f"Validation aborted: {type(exc).__name__}: {exc}", fg="red", err=True)
        sys.exit(EXIT_ERROR)

    if as_json:
        click.echo(json.dumps([o.model_dump(mode="json") for o in outcomes], indent=2))
    else:
        for outcome in outcomes:
            _echo_outcome(outcome)
    sys.exit(exit_code(outcomes))


if __name__ == "__main__":
    cli()
