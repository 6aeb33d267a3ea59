"""Mini README: Core package initialiser for the Team Budget tracker.

The package tracks expenses and player payments for amateur sports teams.
Sub-packages are split by concern: ``store`` (realtime document tree),
``repository`` (typed CRUD on top of the tree), ``sports`` (expense schema
registry), ``finance`` (pure aggregation helpers), ``identity`` (sign-in
sessions), ``state`` (the reactive application state) and ``interface``
(the FastAPI service). Only the logger factory is re-exported here so that
importing the package stays cheap.
"""

from .logging_utils import get_logger

__version__ = "0.1.0"

__all__ = ["get_logger", "__version__"]
