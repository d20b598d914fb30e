"""Version metadata for FleetRental."""

__app_name__ = "FleetRental"
__company__ = "FleetRental"
__version__ = "1.0.0"
