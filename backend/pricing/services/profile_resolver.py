from __future__ import annotations

import logging

from django.db.models import Q

from pricing.models import PricingProfile

logger = logging.getLogger(__name__)

_NO_CLIENT = Q(robaws_client_id__isnull=True) | Q(robaws_client_id="")


class PricingProfileResolver:
    """Client-specific profile, then the carrier default, then the global profile."""

    def resolve(self, carrier_id=None, robaws_client_id=None, on=None):
        candidates = PricingProfile.objects.valid_on(on).prefetch_related("rules").order_by("-updated_at", "-id")

        if robaws_client_id:
            profile = candidates.filter(robaws_client_id=str(robaws_client_id)).first()
            if profile:
                return profile

        if carrier_id:
            profile = candidates.filter(_NO_CLIENT, carrier_id=carrier_id).first()
            if profile:
                return profile

        profile = candidates.filter(_NO_CLIENT, carrier__isnull=True).first()
        if profile is None:
            logger.debug(f"No pricing profile for carrier={carrier_id} client={robaws_client_id}")
        return profile
