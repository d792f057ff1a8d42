"""Create voidling tables

Revision ID: 3b1f6c2a9d40
Revises:
Create Date: 2025-01-12 18:21:07.412093

"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3b1f6c2a9d40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "account_link",
        sa.Column("id", sa.Integer, primary_key=True, nullable=False),
        sa.Column("discord_member_id", sa.BigInteger, nullable=False),
        sa.Column("runescape_name", sa.String, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index(
        "uq_account_link_member_name",
        "account_link",
        ["discord_member_id", sa.text("lower(runescape_name)")],
        unique=True,
    )
    op.create_index(
        "uq_account_link_active_member",
        "account_link",
        ["discord_member_id"],
        unique=True,
        sqlite_where=sa.text("is_active"),
        postgresql_where=sa.text("is_active"),
    )

    op.create_table(
        "tracked_competition",
        sa.Column("id", sa.Integer, primary_key=True, nullable=False),
        sa.Column("wom_competition_id", sa.BigInteger, nullable=False, unique=True),
        sa.Column("verification_code", sa.String, nullable=False),
        sa.Column("metric", sa.String, nullable=False),
        sa.Column(
            "type",
            sa.Enum("BOSS_OF_THE_WEEK", "SKILL_OF_THE_WEEK", name="competitiontype"),
            nullable=False,
        ),
        sa.Column("discord_thread_id", sa.BigInteger, nullable=True),
        sa.Column(
            "status",
            sa.Enum("OPEN", "FINISHED", name="competitionstatus"),
            nullable=False,
            server_default="OPEN",
        ),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("finished_at", sa.DateTime, nullable=True),
    )

    op.create_table(
        "scheduled_event",
        sa.Column("id", sa.Integer, primary_key=True, nullable=False),
        sa.Column(
            "type",
            sa.Enum("MASS", "WILDY_WEDNESDAY", name="scheduledeventtype"),
            nullable=False,
        ),
        sa.Column("activity", sa.String, nullable=False),
        sa.Column("location", sa.String, nullable=False),
        sa.Column("scheduled_at", sa.DateTime, nullable=False),
        sa.Column("discord_event_id", sa.BigInteger, nullable=False, unique=True),
        sa.Column("timezone", sa.String, nullable=False, server_default="UTC"),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )

    op.create_table(
        "event_participation",
        sa.Column("id", sa.Integer, primary_key=True, nullable=False),
        sa.Column("event_id", sa.Integer, sa.ForeignKey("scheduled_event.id"), nullable=False),
        sa.Column("account_link_id", sa.Integer, sa.ForeignKey("account_link.id"), nullable=False),
        sa.Column("notified", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.UniqueConstraint("event_id", "account_link_id"),
    )

    op.create_table(
        "guild_config",
        sa.Column("guild_id", sa.BigInteger, primary_key=True, nullable=False),
        sa.Column("coordinator_role_id", sa.BigInteger, nullable=True),
        sa.Column("default_timezone", sa.String, nullable=True),
        sa.Column("competition_code_channel_id", sa.BigInteger, nullable=True),
        sa.Column("event_notification_channel_id", sa.BigInteger, nullable=True),
        sa.Column("event_notification_role_id", sa.BigInteger, nullable=True),
    )

    op.create_table(
        "user_timezone_pref",
        sa.Column("discord_user_id", sa.BigInteger, primary_key=True, nullable=False),
        sa.Column("timezone", sa.String, nullable=False),
    )


def downgrade():
    op.drop_table("user_timezone_pref")
    op.drop_table("guild_config")
    op.drop_table("event_participation")
    op.drop_table("scheduled_event")
    op.drop_table("tracked_competition")
    op.drop_index("uq_account_link_active_member", "account_link")
    op.drop_index("uq_account_link_member_name", "account_link")
    op.drop_table("account_link")
    sa.Enum(name="scheduledeventtype").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="competitionstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="competitiontype").drop(op.get_bind(), checkfirst=True)
