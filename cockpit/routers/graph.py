"""Graph router - network and knowledge graphs for the cockpit visualisations."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cockpit.core.deps import api_dependencies, get_db
from cockpit.schemas.graph import GraphData
from cockpit.services import graph_service

router = APIRouter(dependencies=api_dependencies)


@router.get("/network", response_model=GraphData, response_model_by_alias=True)
def network_graph(db: Session = Depends(get_db)):
    """Organisations, contacts and documents joined on their references."""
    return graph_service.get_network_graph(db)


@router.get("/knowledge", response_model=GraphData, response_model_by_alias=True)
def knowledge_graph(db: Session = Depends(get_db)):
    """Network graph plus categories, with a colour per node."""
    return graph_service.get_knowledge_graph(db)
