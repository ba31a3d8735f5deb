from fastapi import Request

from app.db.mongo import MongoDatabase


def get_database(request: Request) -> MongoDatabase:
    """Return the connection handle owned by the running application."""
    return request.app.state.mongo
