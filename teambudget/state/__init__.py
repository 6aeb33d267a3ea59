"""Mini README: Application state package.

``data_state`` holds the reactive per-user collections and actions,
``container`` wires them together with the store and identity services.
"""

from .container import AppContainer, build_container
from .data_state import TeamDataState

__all__ = ["AppContainer", "TeamDataState", "build_container"]
