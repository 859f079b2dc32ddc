"""Portfolio Tracker: holdings valuation against live quotes with daily snapshots."""
