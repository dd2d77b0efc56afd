"""Application services composing monorun workflows."""
