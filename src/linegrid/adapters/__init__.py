"""Host integrations that implement the render sink."""
