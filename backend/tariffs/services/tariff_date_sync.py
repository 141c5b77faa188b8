import logging

logger = logging.getLogger(__name__)


class TariffDateSyncService:
    """Keeps an article's date overrides in line with the dates set on its purchase tariff."""

    def sync_tariff_dates_to_article(self, tariff) -> bool:
        """
        Copy the tariff's update/validity dates onto the mapped article's overrides.

        Args:
            tariff: CarrierPurchaseTariff with its mapping loaded

        Returns:
            True when the article was saved, False when nothing changed
        """
        mapping = tariff.mapping
        article = mapping.article if mapping else None
        if article is None:
            logger.debug(f"Tariff {tariff.pk} has no mapped article, skipping date sync")
            return False

        changed = []
        if article.update_date_override != tariff.update_date:
            article.update_date_override = tariff.update_date
            changed.append('update_date_override')
        if article.validity_date_override != tariff.validity_date:
            article.validity_date_override = tariff.validity_date
            changed.append('validity_date_override')

        if not changed:
            return False

        article.save(update_fields=changed + ['updated_at'])
        logger.info(
            f"Synced tariff {tariff.pk} dates to article {article.article_code or article.pk}: "
            f"update={tariff.update_date} validity={tariff.validity_date}"
        )
        return True
