"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, taskboard.toml only contains
overrides. A fresh board needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, PositiveFloat, PositiveInt

from taskboard.domain.layout import LayoutGeometry


class BoardConfig(BaseModel):
    """[board] section."""

    model_config = {"frozen": True}

    user: str = "local"
    default_graph: str | None = None


class LayoutConfig(BaseModel):
    """[layout] section — arrange geometry in pixels."""

    model_config = {"frozen": True}

    node_width: PositiveFloat = 240
    node_height: PositiveFloat = 200
    horizontal_spacing: PositiveFloat = 300
    vertical_spacing: PositiveFloat = 280
    start_x: float = 100
    start_y: float = 100

    def geometry(self) -> LayoutGeometry:
        """Build the domain geometry value object."""
        return LayoutGeometry(
            node_width=self.node_width,
            node_height=self.node_height,
            horizontal_spacing=self.horizontal_spacing,
            vertical_spacing=self.vertical_spacing,
            start_x=self.start_x,
            start_y=self.start_y,
        )


class ArrangeConfig(BaseModel):
    """[arrange] section."""

    model_config = {"frozen": True}

    max_workers: PositiveInt = 8


class TbConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    board: BoardConfig = Field(default_factory=BoardConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    arrange: ArrangeConfig = Field(default_factory=ArrangeConfig)
