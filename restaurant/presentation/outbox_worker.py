import asyncio
import logging

from restaurant.database import AsyncSessionLocal
from restaurant.infrastructure.unit_of_work import UnitOfWork
from restaurant.infrastructure.kafka_producer import KafkaProducerClient
from restaurant.application.process_outbox import ProcessOutboxEventsUseCase
from restaurant.config import settings

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


async def outbox_worker(publisher: KafkaProducerClient):
    """Worker для публикации событий заказов из outbox"""
    logger.info("Outbox worker запущен")

    use_case = ProcessOutboxEventsUseCase(
        unit_of_work=UnitOfWork(AsyncSessionLocal),
        publisher=publisher
    )

    while True:
        try:
            processed = await use_case(limit=settings.OUTBOX_BATCH_SIZE)
            if processed:
                logger.info(f"Опубликовано {processed} outbox events")

            await asyncio.sleep(settings.OUTBOX_POLL_INTERVAL)

        except Exception as e:
            logger.error(f"Ошибка в outbox worker: {e}", exc_info=True)
            await asyncio.sleep(settings.OUTBOX_POLL_INTERVAL * 3)


async def main():
    publisher = KafkaProducerClient(settings.KAFKA_BOOTSTRAP_SERVERS, settings.ORDER_EVENTS_TOPIC)
    await publisher.start()
    try:
        await outbox_worker(publisher)
    finally:
        await publisher.stop()


if __name__ == "__main__":
    asyncio.run(main())
