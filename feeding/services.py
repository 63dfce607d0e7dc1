"""
Feed Input Service

Feed inputs draw stock from a Feed inventory item, so every create, update
and delete is paired with an adjustment in the inventory ledger.
"""

import logging

from django.db import transaction

from events.services import require_stocking
from inventory.services import InventoryLedger

logger = logging.getLogger(__name__)


class FeedInputService:
    """
    Usage:
        service = FeedInputService(farm, user)
        feed_input = service.create(serializer)
    """

    def __init__(self, farm, user=None):
        self.farm = farm
        self.user = user

    @transaction.atomic
    def create(self, serializer):
        data = serializer.validated_data
        require_stocking(data['pond'], data['season'], data['date'], 'feed input')

        feed_input = serializer.save(farm=self.farm, created_by=self.user)
        InventoryLedger.consume(
            feed_input.inventory_item, feed_input.quantity,
            related=feed_input, user=self.user,
            reason=f'Feed input for pond {feed_input.pond} on {feed_input.date}'
        )
        logger.info(
            f"Feed input created: {feed_input.quantity} of {feed_input.inventory_item} "
            f"to pond {feed_input.pond_id} (farm {self.farm.id})"
        )
        return feed_input

    @transaction.atomic
    def update(self, serializer):
        previous = serializer.instance
        old_item, old_quantity = previous.inventory_item, previous.quantity

        data = serializer.validated_data
        if 'date' in data or 'pond' in data:
            require_stocking(
                data.get('pond', previous.pond), data.get('season', previous.season),
                data.get('date', previous.date), 'feed input'
            )

        feed_input = serializer.save()
        InventoryLedger.replace_usage(
            old_item, old_quantity, feed_input.inventory_item, feed_input.quantity,
            related=feed_input, user=self.user, label='feed input'
        )
        logger.info(f"Feed input updated: {feed_input.id}")
        return feed_input

    @transaction.atomic
    def delete(self, feed_input):
        InventoryLedger.restore(
            feed_input.inventory_item, feed_input.quantity,
            related=feed_input, user=self.user,
            reason=f'Reversal of feed input {feed_input.id} due to deletion'
        )
        logger.info(f"Feed input deleted: {feed_input.id}")
        feed_input.delete()
