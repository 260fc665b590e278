"""Invocation layer: input resolution, request assembly and the engine binding."""
