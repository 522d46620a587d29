"""guitarlab: personal guitar practice tracker."""

__version__ = "0.1.0"
