"""peercheck: peer dependency checker for installed node_modules trees."""

__version__ = "0.1.0"
