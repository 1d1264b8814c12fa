"""CLI: roles, permissions, check, check-roles, validate, export, token."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from careauth.auth.jwt import create_token
from careauth.config import Config
from careauth.core.gate import AuthorizationGate
from careauth.core.resolver import PermissionResolver
from careauth.errors import ConfigurationError, InvalidRoleError
from careauth.loader import dump_policy, load_policy

policy_option = click.option(
    "--policy",
    "policy_path",
    type=click.Path(),
    default=None,
    help="Policy YAML file (defaults to the configured or built-in policy)",
)


def _load_gate(config: Config, policy_path: str | None) -> AuthorizationGate:
    if policy_path:
        config.policy_path = Path(policy_path)
    return AuthorizationGate.from_policy(config.load_policy())


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(package_name="careauth")
@click.pass_context
def main(ctx: click.Context) -> None:
    """careauth: role-based authorization for the care platform."""
    config = Config.load()
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        _fail(ValueError(f"Unknown log level: {config.log_level}"))
    logging.basicConfig(level=level)
    ctx.obj = config


@main.command()
@policy_option
@click.pass_obj
def roles(config: Config, policy_path: str | None) -> None:
    """List declared roles and what they inherit."""
    try:
        gate = _load_gate(config, policy_path)
    except ConfigurationError as e:
        _fail(e)

    policy = gate.resolver.policy
    table = Table(title="Roles")
    table.add_column("Role", style="cyan")
    table.add_column("Inherits")
    table.add_column("Own", justify="right")
    table.add_column("Effective", justify="right")
    for role in gate.registry:
        parents = ", ".join(p.value for p in policy.hierarchy[role]) or "-"
        table.add_row(
            role.value,
            parents,
            str(len(policy.permissions[role])),
            str(len(gate.resolver.effective_permissions(role))),
        )
    Console().print(table)


@main.command()
@click.argument("role")
@policy_option
@click.pass_obj
def permissions(config: Config, role: str, policy_path: str | None) -> None:
    """Print the effective permissions of ROLE."""
    try:
        gate = _load_gate(config, policy_path)
        granted = gate.resolver.effective_permissions(role)
    except (ConfigurationError, InvalidRoleError) as e:
        _fail(e)

    for permission in sorted(granted):
        click.echo(permission)


@main.command()
@click.argument("role")
@click.argument("permission")
@policy_option
@click.pass_obj
def check(config: Config, role: str, permission: str, policy_path: str | None) -> None:
    """Check whether ROLE holds PERMISSION. Exits 1 when denied."""
    try:
        gate = _load_gate(config, policy_path)
        allowed = gate.is_authorized(role, permission)
    except (ConfigurationError, InvalidRoleError) as e:
        _fail(e)

    click.echo(f"{'ALLOWED' if allowed else 'DENIED'}: {role} -> {permission}")
    if not allowed:
        sys.exit(1)


@main.command("check-roles")
@click.argument("role")
@click.argument("allowed", nargs=-1, required=True)
@policy_option
@click.pass_obj
def check_roles(
    config: Config, role: str, allowed: tuple[str, ...], policy_path: str | None
) -> None:
    """Check whether ROLE passes a route that allows ALLOWED roles."""
    try:
        gate = _load_gate(config, policy_path)
        ok = gate.is_authorized_for_any_role(role, allowed)
    except (ConfigurationError, InvalidRoleError) as e:
        _fail(e)

    click.echo(f"{'ALLOWED' if ok else 'DENIED'}: {role} -> [{', '.join(allowed)}]")
    if not ok:
        sys.exit(1)


@main.command()
@click.argument("path", type=click.Path(exists=True))
def validate(path: str) -> None:
    """Validate a policy file."""
    try:
        policy = load_policy(Path(path))
        resolver = PermissionResolver(policy)
    except ConfigurationError as e:
        _fail(e)

    console = Console()
    console.print(
        Panel(
            f"[green]✓[/green] Policy OK: {path}\n"
            f"Roles: {', '.join(r.value for r in resolver.registry)}\n"
            f"Default permissions: {len(policy.defaults)}",
            title="Policy Valid",
        )
    )


@main.command()
@click.argument("path", type=click.Path())
@policy_option
@click.pass_obj
def export(config: Config, path: str, policy_path: str | None) -> None:
    """Write the active policy to PATH as YAML."""
    try:
        gate = _load_gate(config, policy_path)
    except ConfigurationError as e:
        _fail(e)

    dump_policy(gate.resolver.policy, Path(path))
    click.echo(f"Exported policy to {path}")


@main.command()
@click.argument("user_id")
@click.argument("email")
@click.argument("role")
@click.option("--verified", is_flag=True, default=False, help="Mark the principal as verified")
@click.option("--secret", envvar="CAREAUTH_JWT_SECRET", default=None, help="Signing secret")
@policy_option
@click.pass_obj
def token(
    config: Config,
    user_id: str,
    email: str,
    role: str,
    verified: bool,
    secret: str | None,
    policy_path: str | None,
) -> None:
    """Mint an access token for local testing."""
    try:
        gate = _load_gate(config, policy_path)
        parsed = gate.registry.parse(role)
    except (ConfigurationError, InvalidRoleError) as e:
        _fail(e)

    click.echo(
        create_token(
            user_id,
            email,
            parsed,
            is_verified=verified,
            secret=secret,
            exp_minutes=config.access_token_minutes,
            issuer=config.token_issuer,
            audience=config.token_audience,
        )
    )
