"""Static catalogs shipped with shellstrap."""
