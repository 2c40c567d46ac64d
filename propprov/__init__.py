__version__ = "0.1.1"

APP_NAME = "PropertyProvider"
