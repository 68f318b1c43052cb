"""BaseService — abstract foundation for all taskboard services.

Every service receives a :class:`Store` at construction time. The Store
provides transactional database access and the dependency graphs.
Services own their transaction boundaries via ``self._store.transaction()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from taskboard.services.result import ServiceResult, fail

if TYPE_CHECKING:
    from taskboard.infrastructure.store import Store, StoreTransaction


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class TaskService(BaseService):
            def create(self, graph_id: str, title: str) -> ServiceResult:
                with self._store.transaction() as txn:
                    ...
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    @property
    def _user(self) -> str:
        """Identity recorded in created_by / updated_by fields."""
        return self._store.settings.board.user

    @staticmethod
    def _require_graph(txn: StoreTransaction, graph_id: str, op: str) -> ServiceResult | None:
        """Return a NOT_FOUND result if *graph_id* does not exist, else None."""
        if txn.get_graph(graph_id) is None:
            return fail(op, "NOT_FOUND", f"No graph found with ID: {graph_id}")
        return None
