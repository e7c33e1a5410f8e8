"""
Accessors for the services created in the application lifespan.

Tests replace these through app.dependency_overrides.
"""

from fastapi import Request

from ...dedup.reactor import DedupReactor
from ...infra.settings import Settings
from ...llm.envelope import StructuredCaller
from ...store.base import KeyValueStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> KeyValueStore:
    return request.app.state.store


def get_caller(request: Request) -> StructuredCaller:
    return request.app.state.caller


def get_reactor(request: Request) -> DedupReactor:
    return request.app.state.reactor
