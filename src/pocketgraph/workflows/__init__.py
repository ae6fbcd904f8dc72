"""Sample pipelines built on the engine."""

from pocketgraph.workflows.agent import create_agent_flow
from pocketgraph.workflows.analytics import create_analytics_flow
from pocketgraph.workflows.chatbot import create_chatbot_flow
from pocketgraph.workflows.classifier import create_classifier_flow, create_routing_flow
from pocketgraph.workflows.rag import create_offline_flow, create_online_flow, create_rag_flow
from pocketgraph.workflows.scraper import create_scraper_flow
from pocketgraph.workflows.search import create_search_flow
from pocketgraph.workflows.writer import create_writer_flow

__all__ = [
    "create_agent_flow",
    "create_analytics_flow",
    "create_chatbot_flow",
    "create_classifier_flow",
    "create_offline_flow",
    "create_online_flow",
    "create_rag_flow",
    "create_routing_flow",
    "create_scraper_flow",
    "create_search_flow",
    "create_writer_flow",
]
