"""Cycle services: reconcile, evaluate, resolve, dispatch."""
