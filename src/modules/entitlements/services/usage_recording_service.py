import asyncio
from datetime import datetime
from typing import Callable, Optional, Union

from src.core.utils import get_logger
from src.modules.entitlements.enums.usage_type import UsageType
from src.modules.entitlements.exceptions import (
    EntitlementRepositoryError,
    InvalidEntitlementRequestError,
    UsageLimitExceededError,
)
from src.modules.entitlements.helpers import BillingPeriod, utcnow
from src.modules.entitlements.models.entitlement import UsageLimitResult
from src.modules.entitlements.repositories.interfaces import IUsageTrackingRepository
from src.modules.entitlements.services.entitlement_service import EntitlementService
from src.modules.entitlements.services.feature_catalog import parse_usage_type
from src.modules.entitlements.services.store_reads import TimedStoreReads

logger = get_logger(__name__)


class UsageRecordingService(TimedStoreReads):
    """
    Appends usage to the ledger.

    Unlike the entitlement checks, failures here are raised: a lost write
    would let users exceed their quota.
    """

    def __init__(
        self,
        usage_repository: IUsageTrackingRepository,
        entitlement_service: EntitlementService,
        store_timeout: Optional[float] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        super().__init__(store_timeout)
        self.usage_repo = usage_repository
        self.entitlement_service = entitlement_service
        self.clock = clock

    async def record_usage(
        self, user_id: str, usage_type: Union[UsageType, str], amount: int = 1
    ) -> int:
        """
        Add ``amount`` to the user's counter for the current calendar month.

        Returns:
            The counter value after the increment.
        """
        usage_type = parse_usage_type(usage_type)
        if not user_id:
            raise InvalidEntitlementRequestError("user_id is required")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 1:
            raise ValueError("amount must be a positive integer")

        period = BillingPeriod.for_month_of(self.clock())
        try:
            total = await self._read(
                self.usage_repo.increment, user_id, usage_type, period.start, period.end, amount
            )
        except asyncio.TimeoutError as e:
            logger.error("record_usage_timeout", user_id=user_id, usage_type=usage_type.value)
            raise EntitlementRepositoryError("Timed out recording usage", original_error=e)

        logger.info(
            "usage_recorded",
            user_id=user_id,
            usage_type=usage_type.value,
            amount=amount,
            period_total=total,
        )
        return total

    async def consume_usage(
        self, user_id: str, usage_type: Union[UsageType, str], amount: int = 1
    ) -> UsageLimitResult:
        """
        Record usage only if the allowance covers it.

        Raises:
            UsageLimitExceededError: the allowance for this month is used up.
        """
        usage_type = parse_usage_type(usage_type)
        limit = await self.entitlement_service.check_usage_limit(user_id, usage_type)

        if not limit.allowed or (limit.remaining is not None and limit.remaining < amount):
            raise UsageLimitExceededError(
                f"Monthly {usage_type.value} limit reached",
                usage_type=usage_type.value,
                remaining=limit.remaining or 0,
            )

        await self.record_usage(user_id, usage_type, amount)

        if limit.remaining is None:
            return UsageLimitResult.unlimited()
        remaining = limit.remaining - amount
        return UsageLimitResult(allowed=remaining > 0, remaining=remaining)
