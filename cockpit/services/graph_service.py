"""Graph builders for the network and knowledge views.

Each record becomes one node and each reference one link. Layout and
physics are left to the client. Links to records that no longer exist
(deleted assignees, documents pointing at removed contacts) are still
emitted; the client drops dangling ids.
"""

from collections import Counter
from typing import Iterable

from sqlalchemy.orm import Session

from cockpit.db.enums import GraphLinkType, GraphNodeType, Priority
from cockpit.db.models import Category, Contact, Document, Organisation
from cockpit.schemas.graph import GraphData, GraphLink, GraphNode
from cockpit.services import contact_service, document_service, organisation_service

TYPE_COLORS = {
    GraphNodeType.ORGANISATION.value: "#3b82f6",
    GraphNodeType.CONTACT.value: "#6b7280",
    GraphNodeType.CATEGORY.value: "#10b981",
    GraphNodeType.DOCUMENT.value: "#8b5cf6",
    GraphNodeType.TASK.value: "#f59e0b",
}

CONTACT_STATUS_COLORS = {
    Priority.HIGH_PRIO.value: "#ef4444",
    Priority.PRIO.value: "#f97316",
    Priority.MID.value: "#eab308",
    Priority.LOW.value: "#6b7280",
}


def org_node_id(org_id) -> str:
    return f"org-{org_id}"


def contact_node_id(contact_id) -> str:
    return f"contact-{contact_id}"


def document_node_id(document_id) -> str:
    return f"document-{document_id}"


def category_node_id(category_id) -> str:
    return f"category-{category_id}"


def _assignee_links(contact: Contact) -> list[GraphLink]:
    source = contact_node_id(contact.id)
    links = []
    for task in contact.tasks or []:
        for assignee_id in task.get("assignees") or []:
            links.append(
                GraphLink(
                    source=source,
                    target=contact_node_id(assignee_id),
                    type=GraphLinkType.ASSIGNED_TASK.value,
                )
            )
    return links


def _document_links(document: Document) -> list[GraphLink]:
    source = document_node_id(document.id)
    links = []
    if document.contact_id:
        links.append(
            GraphLink(
                source=source,
                target=contact_node_id(document.contact_id),
                type=GraphLinkType.HAS_DOCUMENT.value,
            )
        )
    if document.organisation_id:
        links.append(
            GraphLink(
                source=source,
                target=org_node_id(document.organisation_id),
                type=GraphLinkType.HAS_DOCUMENT.value,
            )
        )
    return links


def _apply_link_counts(nodes: list[GraphNode], links: list[GraphLink]) -> None:
    """linkCount = number of link endpoints touching the node."""
    counts: Counter = Counter()
    for link in links:
        counts[link.source] += 1
        counts[link.target] += 1
    for node in nodes:
        node.link_count = counts.get(node.id, 0)


def build_network_graph(
    organisations: Iterable[Organisation],
    contacts: Iterable[Contact],
    documents: Iterable[Document],
) -> GraphData:
    nodes: list[GraphNode] = []
    links: list[GraphLink] = []
    org_by_name: dict[str, GraphNode] = {}

    for org in organisations:
        node = GraphNode(
            id=org_node_id(org.id),
            name=org.name,
            type=GraphNodeType.ORGANISATION.value,
            categories=list(org.categories or []),
        )
        nodes.append(node)
        org_by_name[org.name.lower()] = node

    for contact in contacts:
        node = GraphNode(
            id=contact_node_id(contact.id),
            name=contact.name,
            type=GraphNodeType.CONTACT.value,
            status=contact.status,
            categories=list(contact.categories or []),
            avatar=contact.avatar,
        )
        nodes.append(node)

        if contact.organization:
            org_node = org_by_name.get(contact.organization.lower())
            if org_node:
                links.append(
                    GraphLink(
                        source=node.id,
                        target=org_node.id,
                        type=GraphLinkType.BELONGS_TO.value,
                    )
                )
        links.extend(_assignee_links(contact))

    for document in documents:
        nodes.append(
            GraphNode(
                id=document_node_id(document.id),
                name=document.name,
                type=GraphNodeType.DOCUMENT.value,
            )
        )
        links.extend(_document_links(document))

    _apply_link_counts(nodes, links)
    return GraphData(nodes=nodes, links=links)


def build_knowledge_graph(
    categories: Iterable[Category],
    organisations: Iterable[Organisation],
    contacts: Iterable[Contact],
    documents: Iterable[Document],
) -> GraphData:
    nodes: list[GraphNode] = []
    links: list[GraphLink] = []
    category_by_name: dict[str, GraphNode] = {}
    org_by_name: dict[str, GraphNode] = {}

    def category_links(source: str, names: list[str] | None) -> None:
        for name in names or []:
            cat_node = category_by_name.get(name.lower())
            if cat_node:
                links.append(
                    GraphLink(
                        source=source,
                        target=cat_node.id,
                        type=GraphLinkType.HAS_CATEGORY.value,
                    )
                )

    for category in categories:
        node = GraphNode(
            id=category_node_id(category.id),
            name=category.name,
            type=GraphNodeType.CATEGORY.value,
            color=TYPE_COLORS[GraphNodeType.CATEGORY.value],
        )
        nodes.append(node)
        category_by_name[category.name.lower()] = node

    for org in organisations:
        node = GraphNode(
            id=org_node_id(org.id),
            name=org.name,
            type=GraphNodeType.ORGANISATION.value,
            categories=list(org.categories or []),
            color=TYPE_COLORS[GraphNodeType.ORGANISATION.value],
        )
        nodes.append(node)
        org_by_name[org.name.lower()] = node
        category_links(node.id, org.categories)

    for contact in contacts:
        node = GraphNode(
            id=contact_node_id(contact.id),
            name=contact.name,
            type=GraphNodeType.CONTACT.value,
            status=contact.status,
            categories=list(contact.categories or []),
            avatar=contact.avatar,
            color=CONTACT_STATUS_COLORS.get(
                contact.status, TYPE_COLORS[GraphNodeType.CONTACT.value]
            ),
        )
        nodes.append(node)

        if contact.organization:
            org_node = org_by_name.get(contact.organization.lower())
            if org_node:
                links.append(
                    GraphLink(
                        source=node.id,
                        target=org_node.id,
                        type=GraphLinkType.BELONGS_TO.value,
                    )
                )
        category_links(node.id, contact.categories)
        links.extend(_assignee_links(contact))

    for document in documents:
        nodes.append(
            GraphNode(
                id=document_node_id(document.id),
                name=document.name,
                type=GraphNodeType.DOCUMENT.value,
                color=TYPE_COLORS[GraphNodeType.DOCUMENT.value],
            )
        )
        links.extend(_document_links(document))

    _apply_link_counts(nodes, links)
    return GraphData(nodes=nodes, links=links)


# =============================================================================
# Database-backed entry points
# =============================================================================

def get_network_graph(db: Session) -> GraphData:
    return build_network_graph(
        organisation_service.get_organisations(db),
        contact_service.get_contacts(db),
        document_service.get_documents(db),
    )


def get_knowledge_graph(db: Session) -> GraphData:
    categories = db.query(Category).order_by(Category.name.asc()).all()
    return build_knowledge_graph(
        categories,
        organisation_service.get_organisations(db),
        contact_service.get_contacts(db),
        document_service.get_documents(db),
    )
