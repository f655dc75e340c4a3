"""Top‑level package for the Finance Tracker.

The primary modules are:

* ``models`` – income, expense, loan, fund and goal records
* ``periods`` – month keys and the date ranges used to filter them
* ``analytics`` – monthly totals, projections and the budget split
* ``store`` – the record store contract and its SQLite implementation
* ``visualization`` – functions that generate Plotly figures
* ``dashboard`` – a Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run finance_tracker/dashboard.py
```
"""

from . import analytics  # noqa: F401  # re-exported for convenience
from . import models  # noqa: F401  # re-exported for convenience
from . import visualization  # noqa: F401  # re-exported for convenience
# Streamlit is only needed for the UI; the calculations import without it.
try:
    from . import dashboard  # type: ignore  # noqa: F401
except ModuleNotFoundError:
    dashboard = None  # type: ignore


__all__ = ["analytics", "models", "visualization", "dashboard"]
