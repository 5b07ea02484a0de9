"""Temporal worker for Minesweeper game."""
import asyncio
import logging
from temporalio.worker import Worker
from minesweeper.workflows import MinesweeperWorkflow
from minesweeper import activities
from minesweeper.config import get_task_queue, get_temporal_client, get_data_dir

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main():
    """Start the Temporal worker."""
    client = await get_temporal_client()
    task_queue = get_task_queue()

    worker = Worker(
        client,
        task_queue=task_queue,
        workflows=[MinesweeperWorkflow],
        activities=[activities.record_win],
    )

    logger.info("Worker started, connected to Temporal")
    logger.info(f"Listening on task queue: {task_queue}, data in {get_data_dir()}")

    await worker.run()


if __name__ == "__main__":
    asyncio.run(main())
