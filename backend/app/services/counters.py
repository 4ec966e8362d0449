"""View/lead counter increments.

The stored procedure is tried first. If it fails, the counter is read and
written back through the elevated path. That fallback is read-modify-write
and not atomic: two concurrent fallbacks can read the same value and lose
one increment. Counting is therefore at-least-once on the primary path and
possibly lossy on the fallback path.
"""

from app.exceptions import CounterReconciliationFailure
from app.models.property import COUNTER_FIELDS
from app.schemas.product import CounterResult
from app.services.repository import PropertyRepository
from app.utils.logging import get_logger

logger = get_logger("rentals.counters")


class CounterReconciler:
    def __init__(self, repository: PropertyRepository):
        self.repository = repository

    async def increment(self, property_id: str, counter: str) -> CounterResult:
        """Bump ``counter`` by one. Never raises; failures come back in the result."""
        if counter not in COUNTER_FIELDS:
            return self._failed(property_id, counter, "Unknown counter")

        try:
            await self.repository.call_increment_procedure(property_id, counter)
            logger.info("counter_incremented", property_id=property_id, counter=counter, method="primary")
            return CounterResult(success=True, method="primary")
        except Exception as exc:
            logger.warning(
                "counter_procedure_failed",
                property_id=property_id,
                counter=counter,
                error=str(exc),
            )

        try:
            current = await self.repository.read_counter(property_id, counter)
            if current is None:
                return self._failed(property_id, counter, "Product not found")

            new_value = current + 1
            if not await self.repository.write_counter(property_id, counter, new_value):
                return self._failed(property_id, counter, "Product not found")
        except Exception as exc:
            return self._failed(property_id, counter, f"Fallback update failed: {exc.__class__.__name__}")

        logger.info(
            "counter_incremented",
            property_id=property_id,
            counter=counter,
            method="fallback",
            new_value=new_value,
        )
        return CounterResult(success=True, method="fallback")

    async def record_view(self, property_id: str) -> CounterResult:
        return await self.increment(property_id, "view_count")

    async def record_lead(self, property_id: str) -> CounterResult:
        return await self.increment(property_id, "leads_count")

    def _failed(self, property_id: str, counter: str, reason: str) -> CounterResult:
        failure = CounterReconciliationFailure(property_id, counter, reason)
        logger.error(
            "counter_reconciliation_failure",
            property_id=failure.property_id,
            counter=failure.counter,
            reason=failure.reason,
        )
        return CounterResult(success=False, method=None, error=reason)
