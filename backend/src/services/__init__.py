"""Services for the WeatherQuest backend.

Submodules are imported directly (``from services.report_service import ...``)
so the stores can depend on ``services.errors`` without an import cycle.
"""
