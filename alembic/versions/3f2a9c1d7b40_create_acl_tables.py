"""create_acl_tables

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2026-10-18 10:12:31.204118

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7b40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "domain",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "parent_id",
            sa.Integer(),
            nullable=True,
            comment="Parent domain (NULL for ROOT)",
        ),
        sa.Column(
            "path",
            sa.String(length=1024),
            nullable=False,
            comment="Ancestry path, e.g. '/' or '/eng/qa/'",
        ),
        sa.ForeignKeyConstraint(["parent_id"], ["domain.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("parent_id", "name", name="uq_domain_parent_name"),
    )
    op.create_index("ix_domain_parent_id", "domain", ["parent_id"])
    op.create_index("ix_domain_path", "domain", ["path"])

    op.create_table(
        "account",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("domain_id", sa.Integer(), nullable=False),
        sa.Column(
            "account_type",
            sa.String(length=20),
            nullable=False,
            comment="admin, domain_admin or user",
        ),
        sa.ForeignKeyConstraint(["domain_id"], ["domain.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("domain_id", "name", name="uq_account_domain_name"),
    )
    op.create_index("ix_account_domain_id", "account", ["domain_id"])
    op.create_index("ix_account_domain_type", "account", ["domain_id", "account_type"])

    op.create_table(
        "acl_role",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "description",
            sa.String(length=1024),
            nullable=True,
            comment="Description of the role's purpose",
        ),
        sa.Column(
            "domain_id",
            sa.Integer(),
            nullable=True,
            comment="Owning domain (NULL = global)",
        ),
        sa.Column(
            "parent_role_id",
            sa.Integer(),
            nullable=True,
            comment="Parent role for permission inheritance",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["domain_id"], ["domain.id"]),
        sa.ForeignKeyConstraint(["parent_role_id"], ["acl_role.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("domain_id", "name", name="uq_acl_role_domain_name"),
    )
    op.create_index("ix_acl_role_domain_id", "acl_role", ["domain_id"])
    op.create_index("ix_acl_role_parent_role_id", "acl_role", ["parent_role_id"])
    op.create_index("ix_acl_role_domain_name", "acl_role", ["domain_id", "name"])

    op.create_table(
        "acl_group",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "description",
            sa.String(length=1024),
            nullable=True,
            comment="Description of the group's purpose",
        ),
        sa.Column("domain_id", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["domain_id"], ["domain.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("domain_id", "name", name="uq_acl_group_domain_name"),
    )
    op.create_index("ix_acl_group_domain_id", "acl_group", ["domain_id"])
    op.create_index("ix_acl_group_domain_name", "acl_group", ["domain_id", "name"])

    op.create_table(
        "acl_group_role_map",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("group_id", sa.Integer(), nullable=False),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["group_id"], ["acl_group.id"]),
        sa.ForeignKeyConstraint(["role_id"], ["acl_role.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("group_id", "role_id", name="uq_acl_group_role"),
    )
    op.create_index("ix_acl_group_role_map_group_id", "acl_group_role_map", ["group_id"])
    op.create_index("ix_acl_group_role_map_role_id", "acl_group_role_map", ["role_id"])

    op.create_table(
        "acl_group_account_map",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("group_id", sa.Integer(), nullable=False),
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["group_id"], ["acl_group.id"]),
        sa.ForeignKeyConstraint(["account_id"], ["account.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("group_id", "account_id", name="uq_acl_group_account"),
    )
    op.create_index(
        "ix_acl_group_account_map_group_id", "acl_group_account_map", ["group_id"]
    )
    op.create_index(
        "ix_acl_group_account_map_account_id", "acl_group_account_map", ["account_id"]
    )

    op.create_table(
        "acl_api_permission",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.Column(
            "api_name",
            sa.String(length=255),
            nullable=False,
            comment="Platform API name, e.g. 'listVirtualMachines'",
        ),
        sa.ForeignKeyConstraint(["role_id"], ["acl_role.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("role_id", "api_name", name="uq_acl_api_permission_role_api"),
    )
    op.create_index("ix_acl_api_permission_role_id", "acl_api_permission", ["role_id"])

    op.create_table(
        "acl_entity_permission",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.Column("entity_type", sa.String(length=100), nullable=False),
        sa.Column("entity_id", sa.BigInteger(), nullable=False),
        sa.Column("access_type", sa.String(length=100), nullable=False),
        sa.Column("permission", sa.String(length=10), nullable=False),
        sa.ForeignKeyConstraint(["role_id"], ["acl_role.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_acl_entity_permission_role_id", "acl_entity_permission", ["role_id"])
    op.create_index(
        "ix_acl_entity_permission_entity",
        "acl_entity_permission",
        ["entity_type", "entity_id"],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("acl_entity_permission")
    op.drop_table("acl_api_permission")
    op.drop_table("acl_group_account_map")
    op.drop_table("acl_group_role_map")
    op.drop_table("acl_group")
    op.drop_table("acl_role")
    op.drop_table("account")
    op.drop_table("domain")
