"""Orchestrator state machine."""
