"""Document codecs: canonical JSON inventory and XML import."""
