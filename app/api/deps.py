"""Dependencies resolved from application state"""

from fastapi import Request

from app.jobs.broker import TaskPublisher
from app.search.base import SearchIndex
from app.store.base import MetricsStore


def get_search_index(request: Request) -> SearchIndex:
    return request.app.state.search_index


def get_store(request: Request) -> MetricsStore:
    return request.app.state.store


def get_publisher(request: Request) -> TaskPublisher:
    return request.app.state.publisher
