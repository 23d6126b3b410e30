from loguru import logger
from sqlmodel import Session

from src.setlist_studio.core.services.oauth_client_service import ExternalLoginInfo
from src.setlist_studio.entities.core.user import ApplicationUser, ApplicationUserRepository
from src.setlist_studio.entities.core.user_identity import UserIdentity, UserIdentityRepository


class UserManagementService:
    """Provisions local users for external logins."""

    def __init__(self, db_session: Session) -> None:
        self._db_session = db_session
        self._user_repo = ApplicationUserRepository(db_session)
        self._identity_repo = UserIdentityRepository(db_session)

    def provision_user(self, login: ExternalLoginInfo) -> ApplicationUser:
        """Return the user linked to this provider key, creating one on first sign-in.

        Profile fields reported by the provider refresh the stored user.
        """
        try:
            identity = self._identity_repo.get_by_provider_key(login.provider, login.provider_key)

            if identity is None:
                user = self._user_repo.create(
                    ApplicationUser(
                        display_name=login.display_name or _name_from_email(login.email),
                        email=login.email,
                        profile_picture_url=login.picture_url,
                        provider=login.provider_display_name,
                        provider_key=login.provider_key,
                    )
                )
                self._identity_repo.create(
                    UserIdentity(
                        user_id=user.id,
                        provider=login.provider,
                        provider_key=login.provider_key,
                        provider_display_name=login.provider_display_name,
                    )
                )
                self._db_session.commit()
                logger.info("Provisioned user {} from {}", user.id, login.provider)
                return user

            user = self._user_repo.get(identity.user_id)
            if user is None:
                raise ValueError("User identity exists but user not found")

            updated = False
            if login.email and login.email != user.email:
                user.email = login.email
                updated = True
            if login.display_name and login.display_name != user.display_name:
                user.display_name = login.display_name
                updated = True
            if login.picture_url and login.picture_url != user.profile_picture_url:
                user.profile_picture_url = login.picture_url
                updated = True

            if updated:
                user = self._user_repo.update(user)
                self._db_session.commit()

            return user
        except Exception:
            logger.exception("Error during user provisioning for {}", login.provider)
            self._db_session.rollback()
            raise


def _name_from_email(email: str | None) -> str | None:
    if not email or "@" not in email:
        return None
    return email.split("@")[0].replace(".", " ").replace("_", " ").title()
