"""GPC Signal - Global Privacy Control and Do Not Track signal resolution."""

__version__ = "1.0.0"
