"""
Analytics module for Gemini Chat API

Thin wrapper around PostHog; events are only sent from AWS Lambda.
"""

from .posthog_client import get_posthog_client, capture_event, flush_events

__all__ = ["get_posthog_client", "capture_event", "flush_events"]
