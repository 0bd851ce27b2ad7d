# Conta/manage_users.py
import os

import typer
from dotenv import load_dotenv
from tabulate import tabulate

from Conta.database import Store
from Conta.provisioning import owner_open_id, provision_bootstrap_admin
from Conta.users import list_users, set_role

load_dotenv()
cli = typer.Typer(help="Gestão de usuários do Joias")


def _store() -> Store:
    store = Store(os.getenv("DATABASE_URL"))
    store.init_schema()
    return store


@cli.command("list")
def list_cmd():
    """Lista todos os usuários (id, openId, email, papel, último login)."""
    rows = [
        (u.id, u.open_id, u.email or "", u.role, u.last_signed_in.strftime("%d/%m/%Y %H:%M"))
        for u in list_users(_store())
    ]
    typer.echo(tabulate(rows, headers=["id", "openId", "email", "role", "lastSignedIn"]))


@cli.command()
def promote(open_id: str):
    """Torna o usuário administrador."""
    if set_role(_store(), open_id, "admin") is None:
        typer.echo("❌ Usuário não encontrado"); raise typer.Exit(1)
    typer.echo("✅ Promovido a admin")


@cli.command()
def demote(open_id: str):
    """Volta o usuário para o papel 'user'."""
    if set_role(_store(), open_id, "user") is None:
        typer.echo("❌ Usuário não encontrado"); raise typer.Exit(1)
    typer.echo("✅ Papel alterado para user")


@cli.command()
def bootstrap():
    """Promove a conta OWNER_OPEN_ID (precisa ter feito login uma vez)."""
    owner = owner_open_id()
    if not owner:
        typer.echo("❌ OWNER_OPEN_ID não configurado"); raise typer.Exit(1)
    user = provision_bootstrap_admin(_store())
    if user is None:
        typer.echo("❌ Usuário não encontrado"); raise typer.Exit(1)
    typer.echo(f"✅ {user.open_id} é admin")


if __name__ == "__main__":
    cli()
