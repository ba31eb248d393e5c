"""Error-tracking sinks."""
