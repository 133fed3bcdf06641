"""Tests for the network and knowledge graph builders."""

import uuid
from types import SimpleNamespace

import pytest

from cockpit.services import graph_service


def _org(name, categories=None):
    return SimpleNamespace(id=uuid.uuid4(), name=name, categories=categories or [])


def _contact(name, organization=None, status="mid", categories=None, tasks=None):
    return SimpleNamespace(
        id=uuid.uuid4(),
        name=name,
        organization=organization,
        status=status,
        categories=categories or [],
        avatar=None,
        tasks=tasks or [],
    )


def _document(name, contact_id=None, organisation_id=None):
    return SimpleNamespace(
        id=uuid.uuid4(), name=name, contact_id=contact_id, organisation_id=organisation_id
    )


def _links(graph):
    return {(link.source, link.target, link.type) for link in graph.links}


def test_network_graph_links():
    acme = _org("Acme")
    ada = _contact("Ada", organization="ACME")
    bob = _contact("Bob", tasks=[{"text": "Call", "assignees": [str(ada.id)]}])
    nda = _document("NDA", contact_id=ada.id, organisation_id=acme.id)

    graph = graph_service.build_network_graph([acme], [ada, bob], [nda])

    ada_id = f"contact-{ada.id}"
    acme_id = f"org-{acme.id}"
    assert {n.id for n in graph.nodes} == {acme_id, ada_id, f"contact-{bob.id}", f"document-{nda.id}"}
    assert _links(graph) == {
        (ada_id, acme_id, "belongs_to"),
        (f"contact-{bob.id}", ada_id, "assigned_task"),
        (f"document-{nda.id}", ada_id, "has_document"),
        (f"document-{nda.id}", acme_id, "has_document"),
    }

    counts = {n.id: n.link_count for n in graph.nodes}
    assert counts[ada_id] == 3
    assert counts[acme_id] == 2
    assert counts[f"contact-{bob.id}"] == 1


def test_unknown_organisation_gets_no_link():
    graph = graph_service.build_network_graph([], [_contact("Ada", organization="Nowhere")], [])
    assert graph.links == []
    assert graph.nodes[0].link_count == 0


def test_dangling_assignee_links_are_kept():
    ghost = str(uuid.uuid4())
    contact = _contact("Ada", tasks=[{"text": "x", "assignees": [ghost]}])

    graph = graph_service.build_network_graph([], [contact], [])

    assert _links(graph) == {(f"contact-{contact.id}", f"contact-{ghost}", "assigned_task")}


def test_knowledge_graph_categories_and_colors():
    client = SimpleNamespace(id=uuid.uuid4(), name="Client")
    acme = _org("Acme", categories=["client"])
    ada = _contact("Ada", status="high prio", categories=["Client", "Unknown"])
    eve = _contact("Eve", status="weird")

    graph = graph_service.build_knowledge_graph([client], [acme], [ada, eve], [])

    nodes = {n.id: n for n in graph.nodes}
    cat_id = f"category-{client.id}"
    assert nodes[cat_id].color == "#10b981"
    assert nodes[f"org-{acme.id}"].color == "#3b82f6"
    assert nodes[f"contact-{ada.id}"].color == "#ef4444"
    assert nodes[f"contact-{eve.id}"].color == "#6b7280"
    assert _links(graph) == {
        (f"org-{acme.id}", cat_id, "has_category"),
        (f"contact-{ada.id}", cat_id, "has_category"),
    }
    assert nodes[cat_id].link_count == 2


@pytest.mark.asyncio
async def test_graph_endpoint_uses_camel_case(authed_client):
    await authed_client.post("/api/organisations", json={"name": "Acme"})
    await authed_client.post("/api/contacts", json={"name": "Ada", "organization": "Acme"})

    response = await authed_client.get("/api/graph/network")

    assert response.status_code == 200
    body = response.json()
    assert len(body["nodes"]) == 2
    assert all("linkCount" in node for node in body["nodes"])
    assert [link["type"] for link in body["links"]] == ["belongs_to"]

    response = await authed_client.get("/api/graph/knowledge")
    assert response.status_code == 200
    assert all(node["color"] for node in response.json()["nodes"])
