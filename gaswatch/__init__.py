"""Gas Watch: Ethereum gas price polling with rolling 1 hour and 24 hour trend windows."""

__version__ = "0.1.0"
