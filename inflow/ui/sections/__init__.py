from .forecast import render_forecast_panel, render_scatter, render_analog_years
from .methodology import render_methodology

__all__ = [
    "render_forecast_panel",
    "render_scatter",
    "render_analog_years",
    "render_methodology",
]
