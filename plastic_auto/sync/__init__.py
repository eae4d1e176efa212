"""Workspace reconciliation — drive a workspace to a clean, up-to-date state.

This package provides:
- Convergence: undo pending changes until a status query reports none
- Orchestration: clean, update to latest, clean again
"""
