"""Turn a plain-language app description into a runnable CRUD scaffold."""

__version__ = "0.1.0"
