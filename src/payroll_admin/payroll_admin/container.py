from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .cascade.engine import CascadeDeleteEngine
from .cascade.graph import DependencyGraph
from .cascade.relationships import build_hr_dependency_graph
from .cascade.service import CascadeDeleteService
from .core.constants import DEFAULT_DIRECTUS_TIMEOUT, MAX_CASCADE_DEPTH
from .core.exceptions import ValidationError
from .database.connection import DatabaseConnection, db_config_from_dict
from .records.directus_record_client import DirectusRecordClient
from .records.mysql_record_client import MySQLRecordClient
from .records.repository import RecordClient


@dataclass(frozen=True)
class Container:
    record_client: RecordClient
    dependency_graph: DependencyGraph

    cascade_engine: CascadeDeleteEngine
    cascade_service: CascadeDeleteService


def build_record_client(settings: Any) -> RecordClient:
    backend = str(getattr(settings, "RECORD_BACKEND", "mysql")).lower()

    if backend == "mysql":
        conn = DatabaseConnection.get_instance(db_config_from_dict(getattr(settings, "DB_CONFIG")))
        return MySQLRecordClient(conn)

    if backend == "directus":
        client = DirectusRecordClient(
            str(getattr(settings, "DIRECTUS_URL")),
            token=getattr(settings, "DIRECTUS_TOKEN", None),
            timeout=float(getattr(settings, "DIRECTUS_TIMEOUT", DEFAULT_DIRECTUS_TIMEOUT)),
        )
        email = getattr(settings, "DIRECTUS_EMAIL", None)
        password = getattr(settings, "DIRECTUS_PASSWORD", None)
        if not getattr(settings, "DIRECTUS_TOKEN", None) and email and password:
            client.login(email, password)
        return client

    raise ValidationError(f"RECORD_BACKEND không hợp lệ: {backend!r}")


def build_container(settings: Any, *, record_client: Optional[RecordClient] = None) -> Container:
    client = record_client or build_record_client(settings)
    graph = build_hr_dependency_graph()

    cascade_engine = CascadeDeleteEngine(
        graph,
        client,
        max_depth=int(getattr(settings, "CASCADE_MAX_DEPTH", MAX_CASCADE_DEPTH)),
        strict_depth=bool(getattr(settings, "CASCADE_STRICT_DEPTH", False)),
    )
    cascade_service = CascadeDeleteService(cascade_engine)

    return Container(
        record_client=client,
        dependency_graph=graph,
        cascade_engine=cascade_engine,
        cascade_service=cascade_service,
    )
