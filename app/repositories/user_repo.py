# app/repositories/user_repo.py
import uuid

from sqlmodel import Session, select

from app.models.user import Profile


class ProfileRepository:
    """
    Read access to the profile directory.

    Profiles are created and edited by the profile pages of the
    storefront; this service only lists them for the link picker.
    """

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[Profile]:
        stmt = (
            select(Profile)
            .where(Profile.user_id == user_id)
            .order_by(Profile.username)
        )
        return session.exec(stmt).all()

    def get_by_id(self, session: Session, profile_id: uuid.UUID) -> Profile | None:
        return session.get(Profile, profile_id)
