"""Topology records exchanged with the fetch and render collaborators."""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class NodeKind(str, Enum):
    """Kinds of infrastructure entity placed on the canvas."""

    SERVER = "server"
    PROJECT = "project"

    @classmethod
    def parse(cls, value: Any) -> Optional["NodeKind"]:
        """Match a raw kind string case-insensitively, None if unknown."""
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class TopologyNode(BaseModel):
    """A server or project as reported by the topology endpoint.

    The endpoint names the kind ``type``; ``kind`` is accepted too. Unknown
    kinds are kept verbatim so they survive the round trip to the renderer.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    kind: str = Field(default=NodeKind.PROJECT.value, alias="type")
    label: str = ""
    status: str = "unknown"
    meta: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        # Ids come back from the API as strings or integers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("kind", "label", "status", mode="before")
    @classmethod
    def _display_text(cls, value: Any, info: ValidationInfo) -> Any:
        # Display-only fields never disqualify a node
        if value is None:
            return cls.model_fields[info.field_name].get_default()
        if isinstance(value, NodeKind):
            return value.value
        if isinstance(value, str):
            return value
        return str(value)

    @field_validator("meta", mode="before")
    @classmethod
    def _meta_mapping(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, dict):
            return {"value": value}
        return value

    @property
    def node_kind(self) -> Optional[NodeKind]:
        return NodeKind.parse(self.kind)

    @property
    def is_server(self) -> bool:
        return self.node_kind is NodeKind.SERVER


class TopologyEdge(BaseModel):
    """Directed relation between two node ids."""

    model_config = ConfigDict(extra="ignore")

    source: str
    target: str
    label: Optional[str] = None

    @field_validator("source", "target", mode="before")
    @classmethod
    def _stringify_endpoint(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("label", mode="before")
    @classmethod
    def _stringify_label(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class PositionedNode(TopologyNode):
    """A topology node with its final canvas coordinates."""

    x: float
    y: float


class LayoutResult(BaseModel):
    """Snapshot handed to the renderer once a layout has been computed."""

    nodes: List[PositionedNode] = Field(default_factory=list)
    edges: List[TopologyEdge] = Field(default_factory=list)
    positions: Dict[str, Tuple[float, float]] = Field(default_factory=dict)
    canvas_width: float
    canvas_height: float
    iterations: int = 0
    dropped_edges: int = 0
