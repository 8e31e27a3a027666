"""
Onboarding Domain Service.

Creates the profile row for a principal that just signed up, and handles the
e-mail verification step of restaurant onboarding.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from latebites_shared.config.constants import Roles
from latebites_shared.config.logging import mask_email, onboarding_logger as logger
from latebites_shared.infrastructure.db import safe_commit
from latebites_shared.utils.schemas import OnboardRequest
from latebites_shared.utils.validators import normalize_phone
from latebites_api.models import Customer, OnboardingSubmission, Restaurant
from latebites_api.repositories import CustomerRepository, RestaurantRepository
from latebites_api.services.email import VerificationEmailSender


class OnboardingError(Exception):
    """Base class for onboarding failures; `message` is shown to the client."""

    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidOnboardingInput(OnboardingError):
    status_code = 400


class DuplicateProfileError(OnboardingError):
    status_code = 409


class OnboardingStorageError(OnboardingError):
    status_code = 500

    def __init__(self, message: str = "Failed to submit onboarding request. Please try again."):
        super().__init__(message)


class VerificationTokenNotFound(OnboardingError):
    status_code = 404

    def __init__(self, message: str = "Invalid or expired verification token"):
        super().__init__(message)


DUPLICATE_EMAIL_MESSAGE = (
    "This email address is already registered. Please use a different email "
    "or contact support if you believe this is an error."
)


@dataclass
class OnboardingOutcome:
    role: str
    profile_id: str
    verification_token: str | None = None
    email_sent: bool = False


@dataclass
class VerificationOutcome:
    already_verified: bool


class OnboardingService:
    """
    Domain service for profile creation and e-mail verification.

    Usage:
        outcome = OnboardingService(db, sender).onboard(request)
    """

    def __init__(self, db: Session, email_sender: VerificationEmailSender | None = None):
        self._db = db
        self._customers = CustomerRepository(db)
        self._restaurants = RestaurantRepository(db)
        self._email_sender = email_sender

    def onboard(self, request: OnboardRequest) -> OnboardingOutcome:
        """
        Create the Customer or Restaurant profile for request.user_id.

        Restaurants start unverified and get a pending submission whose
        token is mailed to the contact address.

        Raises:
            InvalidOnboardingInput: Blank name or unusable phone number.
            DuplicateProfileError: Profile or e-mail already registered.
            OnboardingStorageError: The database write failed.
        """
        name = request.name.strip()
        if not name:
            raise InvalidOnboardingInput("All fields are required")
        try:
            phone = normalize_phone(request.phone)
        except ValueError as e:
            raise InvalidOnboardingInput(str(e)) from e

        # One role per principal, whichever was chosen
        existing_role = self._existing_role(request.user_id)
        if existing_role is not None:
            raise DuplicateProfileError(f"A {existing_role} account already exists for this user")

        if request.role == Roles.CUSTOMER:
            outcome = self._create_customer(request, name, phone)
        else:
            outcome = self._create_restaurant(request, name, phone)

        logger.info(
            "Profile onboarded",
            role=outcome.role,
            profile_id=outcome.profile_id,
            email=mask_email(request.email),
        )

        if outcome.verification_token and self._email_sender is not None:
            outcome.email_sent = self._email_sender.send(
                request.email, name, name, outcome.verification_token
            )
        return outcome

    def _existing_role(self, user_id: str) -> str | None:
        if self._customers.exists(user_id):
            return Roles.CUSTOMER
        if self._restaurants.exists(user_id):
            return Roles.RESTAURANT
        return None

    def _create_customer(self, request: OnboardRequest, name: str, phone: str) -> OnboardingOutcome:
        self._db.add(Customer(id=request.user_id, name=name, phone=phone, email=request.email))
        self._commit()
        return OnboardingOutcome(role=Roles.CUSTOMER, profile_id=request.user_id)

    def _create_restaurant(self, request: OnboardRequest, name: str, phone: str) -> OnboardingOutcome:
        email_taken = self._db.scalar(
            select(OnboardingSubmission.id).where(OnboardingSubmission.email == request.email)
        )
        if email_taken:
            raise DuplicateProfileError(DUPLICATE_EMAIL_MESSAGE)

        token = secrets.token_urlsafe(32)
        restaurant = Restaurant(
            id=request.user_id,
            name=name,
            owner_name=name,
            email=request.email,
            phone=phone,
            city=request.city,
            verified=False,
            is_active=True,
        )
        self._db.add(restaurant)
        self._db.add(
            OnboardingSubmission(
                restaurant_id=request.user_id,
                restaurant_name=name,
                contact_person=name,
                email=request.email,
                phone=phone,
                city=request.city,
                verified=False,
                verification_token=token,
            )
        )
        self._commit()
        return OnboardingOutcome(
            role=Roles.RESTAURANT,
            profile_id=request.user_id,
            verification_token=token,
        )

    def _commit(self) -> None:
        try:
            safe_commit(self._db)
        except IntegrityError as e:
            logger.warning("Onboarding rejected by constraint", error=str(e.orig))
            raise DuplicateProfileError(DUPLICATE_EMAIL_MESSAGE) from e
        except SQLAlchemyError as e:
            logger.error("Onboarding insert failed", error=str(e))
            raise OnboardingStorageError() from e

    def verify_email(self, token: str) -> VerificationOutcome:
        """
        Mark the submission owning `token` as verified. Repeat calls are no-ops.

        Raises:
            VerificationTokenNotFound: No submission has this token.
            OnboardingStorageError: The update failed.
        """
        submission = self._db.scalar(
            select(OnboardingSubmission).where(OnboardingSubmission.verification_token == token)
        )
        if submission is None:
            raise VerificationTokenNotFound()

        if submission.verified:
            return VerificationOutcome(already_verified=True)

        submission.verified = True
        try:
            safe_commit(self._db)
        except SQLAlchemyError as e:
            logger.error("E-mail verification update failed", error=str(e))
            raise OnboardingStorageError("Failed to verify email. Please try again.") from e

        logger.info("Onboarding e-mail verified", email=mask_email(submission.email))
        return VerificationOutcome(already_verified=False)
