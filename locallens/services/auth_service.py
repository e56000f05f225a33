import logging
from datetime import timedelta
from typing import Optional, Tuple

import bcrypt
from flask_jwt_extended import create_access_token
from werkzeug.security import check_password_hash, generate_password_hash

from locallens.core.errors import ConflictError, UnauthorizedError, ValidationError
from locallens.models.category import parse_category
from locallens.models.domain import Business, Coordinate, User
from locallens.models.request_models import SignUpRequest
from locallens.services.dashboard_service import locate_address

logger = logging.getLogger(__name__)

# accounts created by the Express service carry bcryptjs hashes
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def register_owner(
    store,
    geocoder,
    req: SignUpRequest,
    fallback: Optional[Coordinate] = None,
) -> Tuple[User, Business, bool]:
    """
    Create a business owner account together with its business.

    The address is geocoded when given; a failed lookup leaves the business
    without coordinates. If the business can't be stored the freshly created
    user is removed again and the error propagates.
    """
    category = parse_category(req.category)
    if category is None:
        raise ValidationError("category is required")

    if store.find_user_by_email(req.email):
        raise ConflictError("User with this email already exists")

    user = store.insert_user(
        User(
            email=req.email,
            password_hash=generate_password_hash(req.password),
            name=req.name or req.business_name,
        )
    )

    coordinate, geocoded = locate_address(geocoder, req.address, None, fallback)

    try:
        business = store.insert_business(
            Business(
                name=req.business_name,
                category=category,
                category_label=req.category,
                website=req.website or None,
                address=req.address or None,
                coordinate=coordinate,
                owner_id=user.id,
            )
        )
    except Exception:
        logger.exception("Business creation failed, removing user %s", user.id)
        store.delete_user(user.id)
        raise

    logger.info("Registered owner %s with business %s", user.id, business.id)
    return user, business, geocoded


def verify_password(password_hash: str, password: str) -> bool:
    if not password_hash:
        return False

    if password_hash.startswith(BCRYPT_PREFIXES):
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Malformed bcrypt hash")
            return False

    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        logger.warning("Unrecognised password hash format")
        return False


def authenticate(store, email: str, password: str) -> User:
    user = store.find_user_by_email(email)
    if user is None or not verify_password(user.password_hash, password):
        raise UnauthorizedError("Invalid email or password")
    return user


def issue_token(user: User, business: Optional[Business], expires_days: int = 30) -> str:
    return create_access_token(
        identity=user.id,
        additional_claims={
            "role": user.role,
            "businessId": business.id if business else None,
        },
        expires_delta=timedelta(days=expires_days),
    )
