import logging

from pymongo import MongoClient

logger = logging.getLogger(__name__)


def connect(uri: str, db_name: str):
    """Open a client and return the named database handle."""
    client = MongoClient(uri, tz_aware=True, serverSelectionTimeoutMS=5000)
    logger.info("Mongo client created for database %s", db_name)
    return client[db_name]
