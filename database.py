"""
MongoDB connection

`db` is a pymongo Database when DATABASE_URL and DATABASE_NAME are set,
otherwise None and the service keeps its state in local JSON files.
"""
import logging

from pymongo import MongoClient

from config import DATABASE_URL, DATABASE_NAME

logger = logging.getLogger(__name__)

db = None

if DATABASE_URL and DATABASE_NAME:
    client = MongoClient(DATABASE_URL)
    db = client[DATABASE_NAME]
    logger.info("Using MongoDB database %s", DATABASE_NAME)
