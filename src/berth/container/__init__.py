"""Container engine adapter.

Submodules:
  _docker       async docker CLI wrapper, daemon check, stderr classification
  _args         docker run / exec / cp argument construction
  orchestrator  ContainerOrchestrator, the uniform engine interface
"""

from berth.container._docker import ensure_docker, run_docker
from berth.container.orchestrator import DEFAULT_LOG_TAIL, ContainerOrchestrator, Orchestrator

__all__ = [
    "DEFAULT_LOG_TAIL",
    "ContainerOrchestrator",
    "Orchestrator",
    "ensure_docker",
    "run_docker",
]
