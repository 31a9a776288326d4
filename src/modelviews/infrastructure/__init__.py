"""Infrastructure layer — pydantic class materialization and source generation."""
