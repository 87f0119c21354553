"""Pydantic request/response schemas. JSON keys are camelCase on the wire."""
