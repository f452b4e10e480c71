"""CLI tools for recovery CRM administration."""

import click
from pydantic import ValidationError

from recovery_crm.db.enums import Role
from recovery_crm.db.models import User
from recovery_crm.db.session import SessionLocal
from recovery_crm.schemas.auth import RegisterRequest
from recovery_crm.schemas.customer import CustomerCreate
from recovery_crm.schemas.followup import FollowupCreate
from recovery_crm.services import auth_service, customer_service, followup_service


@click.group()
def cli():
    """Recovery CRM CLI tools."""
    pass


@cli.command()
@click.option("--username", required=True, help="Login name")
@click.option("--email", required=True, help="Admin email address")
@click.option("--password", required=True, prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--first-name", default="Admin", show_default=True)
@click.option("--last-name", default="User", show_default=True)
@click.option("--phone", default="0000000000", show_default=True)
def create_admin(username: str, email: str, password: str, first_name: str, last_name: str, phone: str):
    """
    Create an admin account.

    Example:
        recovery-crm create-admin --username admin --email admin@example.com
    """
    try:
        data = RegisterRequest(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            role=Role.ADMIN,
        )
    except ValidationError as e:
        raise click.ClickException(str(e))

    db = SessionLocal()
    try:
        user = auth_service.register_user(db, data)
        click.echo(f"✓ Created admin {user.username}")
        click.echo(f"  ID: {user.id}")
    except auth_service.UserAlreadyExistsError:
        click.echo(f"❌ A user with username '{username}' or email '{email}' already exists")
    finally:
        db.close()


DEMO_PASSWORD = "demo1234"

DEMO_USERS = [
    ("demo_admin", Role.ADMIN, "Asha", "Rao"),
    ("demo_agent", Role.AGENT, "Vikram", "Shah"),
    ("demo_telecaller", Role.TELECALLER, "Neha", "Iyer"),
    ("demo_marketing", Role.MARKETING, "Rohit", "Das"),
]

DEMO_CUSTOMERS = [
    ("Ramesh Kumar", "9876543210", "Recovery agents calling after settlement", "HDFC Bank"),
    ("Sunita Patel", "9123456780", "CIBIL not updated after loan closure", "SBI"),
]


@cli.command()
def seed_demo():
    """
    Seed demo users, customers and leads for local development.

    Every demo user logs in with the password "demo1234". Existing demo
    users are left untouched.
    """
    db = SessionLocal()
    try:
        users = {}
        for username, role, first_name, last_name in DEMO_USERS:
            existing = db.query(User).filter(User.username == username).first()
            if existing:
                users[role] = existing
                continue
            users[role] = auth_service.register_user(
                db,
                RegisterRequest(
                    username=username,
                    email=f"{username}@example.com",
                    password=DEMO_PASSWORD,
                    first_name=first_name,
                    last_name=last_name,
                    phone="9000000000",
                    role=role,
                ),
            )
            click.echo(f"✓ Created {role.value} {username}")

        telecaller = users[Role.TELECALLER]
        for name, phone, problem, bank in DEMO_CUSTOMERS:
            customer = customer_service.create_customer(
                db,
                CustomerCreate(
                    name=name,
                    phone=phone,
                    problem=problem,
                    bank=bank,
                    telecaller_id=telecaller.id,
                ),
            )
            click.echo(f"✓ Created customer {customer.case_id}")

        followup_service.create_followup(
            db,
            FollowupCreate(
                time="10:30 AM",
                name="Mahesh Verma",
                phone="9988776655",
                issue_type="Harassment",
                village="Nashik",
                created_by=telecaller.id,
            ),
        )
        click.echo("✓ Created demo follow-up")
    except customer_service.CustomerServiceError as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
