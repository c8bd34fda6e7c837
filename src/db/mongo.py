from __future__ import annotations
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from typing import TypedDict

class MongoHandles(TypedDict):
    db: Database
    sessions: Collection

def connect_mongo(mongo_uri: str, db_name: str) -> MongoHandles:
    client = MongoClient(
        mongo_uri,
        serverSelectionTimeoutMS=30000,
        connectTimeoutMS=20000,
        socketTimeoutMS=20000,
    )
    db = client[db_name]
    return {
        "db": db,
        "sessions": db["chat_sessions"],
    }

def ensure_indexes(handles: MongoHandles) -> None:
    handles["sessions"].create_index([("createdAt", -1)])
