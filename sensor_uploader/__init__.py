"""Ship a sensor's DNS and connection logs to the collection service."""
