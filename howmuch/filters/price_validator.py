# howmuch/filters/price_validator.py

"""Observation validation: drop unusable prices before statistics."""

import logging
import math

from howmuch.models.price_observation import PriceObservation

logger = logging.getLogger("howmuch.filters")


class PriceValidator:
    """Drop observations whose price cannot enter a summary."""

    @staticmethod
    def validate(
        observations: list[PriceObservation],
    ) -> tuple[list[PriceObservation], int]:
        """Drop observations whose price is not a positive finite number.

        Returns the valid observations and the count of dropped items.
        """
        valid: list[PriceObservation] = []
        dropped = 0

        for observation in observations:
            price = observation.price
            if not (price > 0 and math.isfinite(price)):
                logger.debug(
                    "Dropped unusable price %r "
                    "(service=%s, source=%s)",
                    price,
                    observation.service_id,
                    observation.source,
                )
                dropped += 1
                continue
            valid.append(observation)

        if dropped:
            logger.info(
                "Validation dropped %d invalid observations",
                dropped,
            )

        return valid, dropped
