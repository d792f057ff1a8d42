from datetime import datetime

from sqlalchemy import Index, func
from sqlalchemy.orm import Mapped, mapped_column

from models.models import Base, DiscordSnowflake, IntPk, utcnow


class AccountLink(Base):
    """Binding between a Discord member and a RuneScape name.

    Rows are never deleted: unlinking deactivates, relinking reactivates.
    """

    __tablename__ = "account_link"

    id: Mapped[IntPk] = mapped_column(init=False)
    discord_member_id: Mapped[DiscordSnowflake]
    runescape_name: Mapped[str]
    is_active: Mapped[bool] = mapped_column(default=True)
    created_at: Mapped[datetime] = mapped_column(
        default_factory=utcnow, insert_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime] = mapped_column(
        default_factory=utcnow,
        insert_default=func.current_timestamp(),
        onupdate=utcnow,
    )


# RSNs are case-insensitive, so uniqueness is on the lowered name
Index(
    "uq_account_link_member_name",
    AccountLink.discord_member_id,
    func.lower(AccountLink.runescape_name),
    unique=True,
)
# at most one active link per member
Index(
    "uq_account_link_active_member",
    AccountLink.discord_member_id,
    unique=True,
    sqlite_where=AccountLink.is_active.is_(True),
    postgresql_where=AccountLink.is_active.is_(True),
)
