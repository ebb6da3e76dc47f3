"""MongoDB connection utilities."""

from __future__ import annotations

import logging
import time
from typing import Optional

import pymongo
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class DBController:
    """Small wrapper around a PyMongo client connection."""

    def __init__(
        self,
        uri: str,
        db_name: str = "classboard",
        timeout_ms: int = 5000,
    ) -> None:
        if not uri:
            raise ValueError("uri is required")
        self.uri = uri
        self.db_name = db_name
        self.timeout_ms = timeout_ms

        self.client: Optional[pymongo.MongoClient] = None
        self.db = None

    def connect(self, max_retries: int = 1, retry_delay: int = 2) -> bool:
        """Connect to MongoDB and verify the connection with a ping.

        Args:
            max_retries: Maximum number of connection attempts
            retry_delay: Seconds to wait between retries
        """
        for attempt in range(1, max_retries + 1):
            try:
                self.client = pymongo.MongoClient(
                    self.uri,
                    serverSelectionTimeoutMS=self.timeout_ms,
                    connectTimeoutMS=self.timeout_ms,
                    socketTimeoutMS=self.timeout_ms,
                )
                # A database named in the URI path wins over the configured default
                self.db = self.client.get_default_database(default=self.db_name)
                self.client.admin.command("ping")
                logger.info(
                    "mongodb_connected db=%s attempt=%d/%d",
                    self.db.name, attempt, max_retries,
                )
                return True
            except (PyMongoError, ValueError) as exc:
                logger.warning(
                    "mongodb_connect_failed attempt=%d/%d error=%s",
                    attempt, max_retries, exc,
                )
                self.disconnect()
                if attempt < max_retries:
                    logger.info("Retrying in %d seconds...", retry_delay)
                    time.sleep(retry_delay)

        logger.error("Failed to connect to MongoDB after %d attempts", max_retries)
        return False

    def disconnect(self) -> None:
        """Disconnect from MongoDB."""

        if self.client is not None:
            self.client.close()
            logger.info("Disconnected from MongoDB")
        self.client = None
        self.db = None
