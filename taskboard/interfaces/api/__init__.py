"""HTTP API exposing the inbox and the task completion hook."""
