"""SQLAlchemy Core table definitions for the taskboard database.

One table per record kind. Links reference tasks by foreign key, so a
task's links must be deleted before the task itself. ``tasks.workflow_id``
is a soft reference (validated by the service layer) because imported
tasks may name workflows that were never exported.
"""

from __future__ import annotations

from sqlalchemy import (
    REAL,
    Column,
    ForeignKey,
    Index,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

graphs = Table(
    "graphs",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False),
    Column("created_by", Text, nullable=False),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)

workflows = Table(
    "workflows",
    metadata,
    Column("id", Text, primary_key=True),
    Column("label", Text, nullable=False),
    Column("graph_id", Text, ForeignKey("graphs.id"), nullable=False),
)

tasks = Table(
    "tasks",
    metadata,
    Column("id", Text, primary_key=True),
    Column("graph_id", Text, ForeignKey("graphs.id"), nullable=False),
    Column("title", Text, nullable=False),
    Column("description", Text, nullable=False, default="", server_default=""),
    Column("status", Text, nullable=False, default="Pending", server_default="Pending"),
    Column("background_color", Text, nullable=False, default="#ffffff"),
    Column("foreground_color", Text, nullable=False, default="#000000"),
    Column("created_by", Text, nullable=False),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
    Column("updated_by", Text),
    Column("assigned_to", Text),
    Column("assigned_by", Text),
    Column("workflow_id", Text),  # soft reference to workflows.id
    # Canvas position; NULL until placed by a drag or an arrange
    Column("x", REAL),
    Column("y", REAL),
)

links = Table(
    "links",
    metadata,
    Column("id", Text, primary_key=True),
    Column("graph_id", Text, ForeignKey("graphs.id"), nullable=False),
    Column("source_id", Text, ForeignKey("tasks.id"), nullable=False),
    Column("target_id", Text, ForeignKey("tasks.id"), nullable=False),
    UniqueConstraint("graph_id", "source_id", "target_id"),
)

Index("ix_tasks_graph", tasks.c.graph_id)
Index("ix_links_graph", links.c.graph_id)
Index("ix_workflows_graph", workflows.c.graph_id)
