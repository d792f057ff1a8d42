import logging
from typing import Optional

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy_utils import ScalarListException

from models import AccountLink, db_session
from utils.exceptions import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    VoidlingError,
)


def get_active_link(discord_member_id: int, session=db_session) -> Optional[AccountLink]:
    return (
        session.query(AccountLink)
        .filter(
            AccountLink.discord_member_id == discord_member_id,
            AccountLink.is_active == True,  # noqa 712
        )
        .one_or_none()
    )


def find_active_link_by_name(
    runescape_name: str, session=db_session
) -> Optional[AccountLink]:
    """Reverse lookup from an RSN to whoever currently has it linked"""
    return (
        session.query(AccountLink)
        .filter(
            func.lower(AccountLink.runescape_name) == func.lower(runescape_name),
            AccountLink.is_active == True,  # noqa 712
        )
        .order_by(AccountLink.updated_at.desc())
        .first()
    )


def link_account(
    discord_member_id: int, runescape_name: str, session=db_session
) -> AccountLink:
    """Make runescape_name the single active link for the member.

    The name must already have been checked against Wise Old Man. Everything
    happens in one transaction: either the member ends up with exactly this
    link active, or nothing changes.
    """
    try:
        existing = (
            session.query(AccountLink)
            .filter(
                AccountLink.discord_member_id == discord_member_id,
                func.lower(AccountLink.runescape_name) == func.lower(runescape_name),
            )
            .one_or_none()
        )
        if existing is not None and existing.is_active:
            session.rollback()
            raise ConflictError(VoidlingError.ALREADY_LINKED, runescape_name)

        session.execute(
            update(AccountLink)
            .where(
                AccountLink.discord_member_id == discord_member_id,
                AccountLink.is_active == True,  # noqa 712
            )
            .values(is_active=False)
        )

        if existing is not None:
            logging.info(f"Reactivating account link {existing.id}")
            existing.is_active = True
            link = existing
        else:
            logging.info(
                f"Creating new account link for {discord_member_id} with RSN {runescape_name}"
            )
            link = AccountLink(
                discord_member_id=discord_member_id, runescape_name=runescape_name
            )
            session.add(link)

        session.commit()
    except (ScalarListException, SQLAlchemyError) as e:
        session.rollback()
        logging.exception(e)
        raise PersistenceError(f"could not link {runescape_name}") from e

    logging.info(f"Linked RSN {runescape_name} to Discord user {discord_member_id}")
    return link


def unlink_account(discord_member_id: int, session=db_session) -> AccountLink:
    """Deactivate the member's active link, keeping the row for relinking later"""
    try:
        link = get_active_link(discord_member_id, session)
        if link is None:
            raise NotFoundError(VoidlingError.NOT_LINKED, str(discord_member_id))
        link.is_active = False
        session.commit()
    except (ScalarListException, SQLAlchemyError) as e:
        session.rollback()
        logging.exception(e)
        raise PersistenceError(f"could not unlink {discord_member_id}") from e

    logging.info(
        f"Unlinked RSN {link.runescape_name} from Discord user {discord_member_id}"
    )
    return link
