"""Pydantic schemas for the network and knowledge graphs.

Serialized with camelCase keys (`linkCount`) for the force-graph client.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _GraphModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GraphNode(_GraphModel):
    id: str
    name: str
    type: str
    status: str | None = None
    categories: list[str] = Field(default_factory=list)
    avatar: str | None = None
    color: str | None = None
    link_count: int = 0


class GraphLink(_GraphModel):
    source: str
    target: str
    type: str


class GraphData(_GraphModel):
    nodes: list[GraphNode] = Field(default_factory=list)
    links: list[GraphLink] = Field(default_factory=list)
