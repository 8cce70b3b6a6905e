from config import settings
from repositories.user_repo import UserRepository
from services.auth_service import AuthService, ROLE_ADMINISTRATOR, ROLE_CUSTOMER
import logging

logger = logging.getLogger(__name__)

SEED_USERS = [
    ("admin@bookstore.com", ROLE_ADMINISTRATOR),
    ("customer1@gmail.com", ROLE_CUSTOMER),
    ("customer2@gmail.com", ROLE_CUSTOMER),
]


class SeedService:

    @staticmethod
    async def seed() -> None:
        """Create default roles and users if they don't exist"""
        for role in (ROLE_ADMINISTRATOR, ROLE_CUSTOMER):
            await UserRepository.ensure_role(role)

        for email, role in SEED_USERS:
            existing = await UserRepository.get_by_email(email)
            if existing:
                continue
            await AuthService.register(email, settings.SEED_PASSWORD, role=role)
            logger.info(f"Seeded user {email} as {role}")
