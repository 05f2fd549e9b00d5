"""Service layer for blockcopy."""
