"""Slip verification domain service.

Accepting a donation slip runs these steps in order and stops at the first
failure:

    Received -> GatewayVerifying -> GatewayRejected
                                 -> PolicyChecking -> ReceiverMismatch
                                                   -> AmountInsufficient
                                                   -> DuplicateChecking -> Duplicate
                                                                        -> Accepted

Only ``Accepted`` writes to the ledger, and it is the last step, so a
rejected slip leaves nothing behind.
"""

import logging
from typing import Optional, Protocol

from slipcheck.database.base import Database
from slipcheck.domain.donation import DonationService
from slipcheck.domain.entities import (
    DonationPolicy,
    SlipSubmission,
    VerificationOutcome,
    VerificationResult,
)
from slipcheck.domain.errors import (
    DUPLICATE_SLIP,
    INSUFFICIENT_AMOUNT,
    INVALID_SLIP,
    WRONG_RECEIVER,
    ConflictError,
    InputError,
    SlipRejectedError,
    ValidationError,
    duplicate_slip,
    insufficient_amount,
    no_file_uploaded,
    wrong_receiver,
)
from slipcheck.domain.settings import SettingsService
from slipcheck.utils.account_id import is_masked, normalize_account_id

logger = logging.getLogger(__name__)

ANONYMOUS_SUPPORTER = "Anonymous supporter"


class SlipGateway(Protocol):
    def verify_slip(self, image_bytes: bytes, mime_type: str, amount) -> VerificationResult: ...


class IdentityResolver(Protocol):
    def resolve(self, token: str) -> Optional[str]: ...


def check_policy(result: VerificationResult, policy: DonationPolicy) -> None:
    """Apply the receiver and minimum-amount rules to a verified slip.

    The receiver is only compared when the vendor did not already check it,
    and a masked receiver id counts as unknown rather than mismatched. The
    minimum amount is always enforced.

    Raises:
        SlipRejectedError: ``wrong_receiver`` or ``insufficient_amount``
    """
    expected = policy.receiver_account_id
    if not result.receiver_checked and expected:
        actual = normalize_account_id(result.receiver_account)
        if actual and not is_masked(actual) and actual != expected:
            raise SlipRejectedError(WRONG_RECEIVER, wrong_receiver(expected, actual))

    if result.amount < policy.minimum_amount:
        raise SlipRejectedError(
            INSUFFICIENT_AMOUNT, insufficient_amount(policy.minimum_amount, result.amount)
        )


class SlipVerificationService:
    """Service that turns an uploaded slip into a recorded donation."""

    def __init__(
        self,
        db: Database,
        gateway: SlipGateway,
        identity_resolver: Optional[IdentityResolver] = None,
    ):
        """Initialize slip verification service.

        Args:
            db: Database instance
            gateway: Slip verification vendor client
            identity_resolver: Maps bearer tokens to user ids (optional)
        """
        self.db = db
        self.gateway = gateway
        self.identity_resolver = identity_resolver
        self.settings_service = SettingsService(db)
        self.donation_service = DonationService(db)

    def resolve_caller(self, bearer_token: Optional[str]) -> Optional[str]:
        """Best-effort lookup of the donor's user id; anonymous on any failure."""
        if not bearer_token or self.identity_resolver is None:
            return None
        try:
            return self.identity_resolver.resolve(bearer_token)
        except Exception:
            logger.warning("Could not resolve caller identity; continuing anonymously", exc_info=True)
            return None

    def verify(self, submission: SlipSubmission) -> VerificationOutcome:
        """Verify a slip and record the donation.

        Args:
            submission: The uploaded slip and donor details

        Returns:
            The vendor result and the stored donation

        Raises:
            InputError: If no image was supplied
            SlipRejectedError: If the gateway, policy or ledger rejects the slip
            ConfigurationError: If the gateway or policy is misconfigured
            GatewayError: If the vendor cannot be reached
        """
        if not submission.image_bytes:
            raise InputError(no_file_uploaded())

        user_id = self.resolve_caller(submission.bearer_token)

        result = self.gateway.verify_slip(
            submission.image_bytes, submission.mime_type, submission.claimed_amount
        )

        policy = self.settings_service.get_donation_policy()
        try:
            check_policy(result, policy)
        except SlipRejectedError as e:
            logger.info("Slip %s rejected: %s", result.trans_ref, e.error)
            raise

        if self.donation_service.donation_exists(result.trans_ref):
            logger.info("Slip %s rejected: %s", result.trans_ref, DUPLICATE_SLIP)
            raise SlipRejectedError(DUPLICATE_SLIP, duplicate_slip(result.trans_ref))

        sender_name = result.sender_name or ANONYMOUS_SUPPORTER
        display_name = (submission.display_name or "").strip() or sender_name
        message = (submission.message or "").strip() or None

        try:
            donation = self.donation_service.record_donation(
                trans_ref=result.trans_ref,
                amount=result.amount,
                sender_name=sender_name,
                display_name=display_name,
                message=message,
                user_id=user_id,
                receiver_account=policy.receiver_account_id,
                transacted_at=result.transacted_at,
                raw_payload=result.raw_payload,
            )
        except ConflictError:
            # Lost a race with a concurrent upload of the same slip
            logger.info("Slip %s rejected: %s (insert conflict)", result.trans_ref, DUPLICATE_SLIP)
            raise SlipRejectedError(DUPLICATE_SLIP, duplicate_slip(result.trans_ref))
        except ValidationError as e:
            raise SlipRejectedError(INVALID_SLIP, str(e), result.code)

        logger.info(
            "Recorded donation %s: %s THB from %s", donation.trans_ref, donation.amount, display_name
        )
        return VerificationOutcome(result=result, donation=donation)
